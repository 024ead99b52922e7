"""
Daily Completion Streak Tracking

A streak counts consecutive calendar days with at least one completed
task. Rules, evaluated in order on every completion:

- First completion ever: streak starts at 1
- Same day as the last completion: nothing changes
- Next day: streak continues
- Exactly one missed day: the weekly break forgives it, at most once
  per 7 days measured from its last use
- Anything else: streak resets to 1 (today counts)

The stored streak is only re-evaluated when a task is completed; opening
the app after a long absence does not zero it.
"""

from typing import Any, Dict, Optional
from datetime import timedelta
import logging

from studytrack.gamification.base import RecordEngine
from studytrack.gamification.events import EventDispatcher
from studytrack.models.events import (
    Event,
    StreakContinuedEvent,
    StreakResetEvent,
    StreakSavedByBreakEvent,
    StreakStartedEvent,
)
from studytrack.models.streak import StreakState, StreakUpdate
from studytrack.monitoring import track_streak_update
from studytrack.storage.base import StateStore, STREAK_KEY
from studytrack.utils.datetime_helpers import Clock, days_between, parse_iso_date

logger = logging.getLogger(__name__)

GRACE_GAP_DAYS = 2  # last completion two days ago = one missed day
GRACE_PERIOD_DAYS = 7


class StreakTracker(RecordEngine[StreakState]):
    """Owns one StreakState mirrored to the store under STREAK_KEY"""

    state_model = StreakState

    def __init__(
        self,
        store: StateStore,
        clock: Clock,
        dispatcher: Optional[EventDispatcher] = None,
        key: str = STREAK_KEY
    ):
        super().__init__(store, clock, key, dispatcher)

    async def mark_completed(self) -> StreakUpdate:
        """
        Record a completion for today.

        Safe to call any number of times per day.

        Returns:
            StreakUpdate; `to_result()` gives
            {updated, streak[, savedByBreak][, reset]}
        """
        state = await self._ensure_loaded()
        today = self.clock.today()
        events = self._drain_pending_events()
        last_date = state.last_completion_date

        new_state = state.model_copy(deep=True)
        new_state.last_completion_date = today
        new_state.add_to_history(today)
        saved_by_break = None
        reset = None

        # If this is the first completion
        if last_date is None:
            new_state.current_streak = 1
            outcome = "started"
            event: Event = StreakStartedEvent(occurred_on=today)
            logger.info(f"Streak started on {today}")

        else:
            diff = days_between(today, last_date)

            # Already counted today
            if diff == 0:
                track_streak_update("unchanged")
                logger.debug(f"Completion already recorded for {today}, streak stays {state.current_streak}")
                await self._emit(events)
                return StreakUpdate(updated=False, streak=state.current_streak, events=events)

            # Consecutive day
            if diff == 1:
                new_state.current_streak = state.current_streak + 1
                outcome = "continued"
                event = StreakContinuedEvent(streak=new_state.current_streak, occurred_on=today)

            # One missed day, covered by the weekly break
            elif diff == GRACE_GAP_DAYS and self._break_available(state, today):
                new_state.current_streak = state.current_streak + 1
                new_state.last_break_date = today
                saved_by_break = True
                outcome = "saved_by_break"
                event = StreakSavedByBreakEvent(
                    streak=new_state.current_streak,
                    missed_date=(parse_iso_date(last_date) + timedelta(days=1)).isoformat(),
                    occurred_on=today
                )
                logger.info(f"Streak saved by weekly break on {today}: day {new_state.current_streak}")

            # Gap too large or break already used
            else:
                new_state.current_streak = 1
                reset = True
                outcome = "reset"
                event = StreakResetEvent(previous_streak=state.current_streak, gap_days=diff, occurred_on=today)
                logger.info(
                    f"Streak reset on {today}. Was {state.current_streak}, "
                    f"gap was {diff} days"
                )

        # Update memory first; it stays authoritative if the write fails
        self._state = new_state
        persisted, warning = await self._persist(new_state, today)
        events.append(event)
        if warning:
            events.append(warning)

        track_streak_update(outcome)
        await self._emit(events)

        logger.info(f"Updated streak: {state.current_streak} → {new_state.current_streak} days ({outcome})")

        return StreakUpdate(
            updated=True,
            streak=new_state.current_streak,
            saved_by_break=saved_by_break,
            reset=reset,
            persisted=persisted,
            events=events,
        )

    @staticmethod
    def _break_available(state: StreakState, today: str) -> bool:
        if state.last_break_date is None:
            return True
        return days_between(today, state.last_break_date) >= GRACE_PERIOD_DAYS

    @property
    def state(self) -> StreakState:
        """Copy of the current state (fresh if not loaded yet)"""
        return (self._state or StreakState()).model_copy(deep=True)

    @property
    def streak(self) -> int:
        return self._state.current_streak if self._state else 0

    @property
    def history(self) -> list[str]:
        """Completion dates, oldest first"""
        return sorted(self._state.history) if self._state else []

    async def get_streak_info(self) -> Dict[str, Any]:
        """
        Read-only streak summary for display

        Returns:
            {
                'current_streak': int,
                'last_completion_date': str | None,
                'last_break_date': str | None,
                'break_available': bool,  # as of today
                'total_days': int
            }
        """
        state = await self._ensure_loaded()
        return {
            "current_streak": state.current_streak,
            "last_completion_date": state.last_completion_date,
            "last_break_date": state.last_break_date,
            "break_available": self._break_available(state, self.clock.today()),
            "total_days": len(state.history),
        }
