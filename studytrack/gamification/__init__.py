"""
Gamification engines for studytrack

- Daily completion streak with a weekly break for one missed day
- XP ledger with flat 100 XP levels
- Idempotent badge awarding
"""

from studytrack.gamification.events import EventDispatcher, ALL_EVENTS
from studytrack.gamification.streak_system import StreakTracker, GRACE_PERIOD_DAYS
from studytrack.gamification.xp_system import (
    GamificationLedger,
    calculate_level_from_xp,
    validate_xp_amount,
    WORK_SESSION_XP,
    XP_PER_LEVEL,
)

__all__ = [
    "EventDispatcher",
    "ALL_EVENTS",
    "StreakTracker",
    "GRACE_PERIOD_DAYS",
    "GamificationLedger",
    "calculate_level_from_xp",
    "validate_xp_amount",
    "WORK_SESSION_XP",
    "XP_PER_LEVEL",
]
