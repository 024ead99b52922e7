"""Structured events emitted by the streak tracker and XP ledger"""
from typing import Literal, Optional
from pydantic import BaseModel


class Event(BaseModel):
    """Base event; `occurred_on` is the local calendar date (YYYY-MM-DD)"""
    type: str
    occurred_on: str


class StreakStartedEvent(Event):
    type: Literal["streak_started"] = "streak_started"
    streak: int = 1


class StreakContinuedEvent(Event):
    type: Literal["streak_continued"] = "streak_continued"
    streak: int


class StreakSavedByBreakEvent(Event):
    """A single missed day was forgiven by the weekly break"""
    type: Literal["streak_saved_by_break"] = "streak_saved_by_break"
    streak: int
    missed_date: str


class StreakResetEvent(Event):
    type: Literal["streak_reset"] = "streak_reset"
    previous_streak: int
    gap_days: int


class LevelUpEvent(Event):
    type: Literal["level_up"] = "level_up"
    old_level: int
    new_level: int
    total_xp: int


class BadgeAwardedEvent(Event):
    type: Literal["badge_awarded"] = "badge_awarded"
    badge_id: str


class PersistenceWarningEvent(Event):
    """State changed in memory but could not be written to the store"""
    type: Literal["persistence_warning"] = "persistence_warning"
    key: str
    error: Optional[str] = None


class StateRecoveredEvent(Event):
    """Stored record was unreadable and replaced by a fresh state"""
    type: Literal["state_recovered"] = "state_recovered"
    key: str
    error: Optional[str] = None
