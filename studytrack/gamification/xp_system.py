"""
XP, Leveling and Badges

Leveling Curve:
- Flat 100 XP per level: level = floor(xp / 100) + 1

XP Award Rules:
- Focused work session completed: 50 XP
- Amounts must be finite, whole and non-negative; XP never decreases

Badges are plain string ids awarded at most once.
"""

from typing import Any, Dict, Optional
import logging
import math

from studytrack.exceptions import ValidationError
from studytrack.gamification.base import RecordEngine
from studytrack.gamification.events import EventDispatcher
from studytrack.models.events import BadgeAwardedEvent, LevelUpEvent
from studytrack.models.gamification import (
    XP_PER_LEVEL,
    BadgeAwardResult,
    GamificationState,
    XPAwardResult,
    level_for_xp,
)
from studytrack.monitoring import track_badge_awarded, track_level_up, track_xp_awarded, track_xp_rejected
from studytrack.storage.base import StateStore, GAMIFICATION_KEY
from studytrack.utils.datetime_helpers import Clock

logger = logging.getLogger(__name__)

WORK_SESSION_XP = 50


def calculate_level_from_xp(total_xp: int) -> Dict[str, int]:
    """
    Calculate level progress from total XP

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int
        }
    """
    total_xp = max(total_xp, 0)
    level = level_for_xp(total_xp)
    xp_in_level = total_xp % XP_PER_LEVEL

    return {
        "current_level": level,
        "xp_in_current_level": xp_in_level,
        "xp_to_next_level": XP_PER_LEVEL - xp_in_level,
        "total_xp_for_next_level": level * XP_PER_LEVEL,
    }


def xp_amount_problem(amount: Any) -> Optional[str]:
    """Why an XP amount is unacceptable, or None if it is fine"""
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return "XP amount must be a number"
    if isinstance(amount, float):
        if math.isnan(amount) or math.isinf(amount):
            return "XP amount must be finite"
        if not amount.is_integer():
            return "XP amount must be a whole number"
    if amount < 0:
        return "XP amount cannot be negative"
    return None


def validate_xp_amount(amount: Any) -> int:
    """
    Check an XP amount and return it as int

    Raises:
        ValidationError: Not a finite, whole, non-negative number
    """
    problem = xp_amount_problem(amount)
    if problem:
        raise ValidationError(problem, field="amount", value=amount)
    return int(amount)


class GamificationLedger(RecordEngine[GamificationState]):
    """Owns one GamificationState mirrored to the store under GAMIFICATION_KEY"""

    state_model = GamificationState

    def __init__(
        self,
        store: StateStore,
        clock: Clock,
        dispatcher: Optional[EventDispatcher] = None,
        key: str = GAMIFICATION_KEY
    ):
        super().__init__(store, clock, key, dispatcher)

    async def add_xp(self, amount: Any) -> XPAwardResult:
        """
        Award XP and check for level up

        A level-up is dispatched as LevelUpEvent before the new level is
        applied, and also returned in the result. Invalid amounts change
        nothing and come back with accepted=False.

        Args:
            amount: XP to add

        Returns:
            XPAwardResult
        """
        state = await self._ensure_loaded()
        today = self.clock.today()
        events = self._drain_pending_events()
        old_total_xp = state.xp
        old_level = state.level

        problem = xp_amount_problem(amount)
        if problem:
            logger.warning(f"Rejected XP award of {amount!r}: {problem}")
            track_xp_rejected()
            await self._emit(events)
            return XPAwardResult(
                accepted=False,
                rejection_reason=problem,
                old_total_xp=old_total_xp,
                new_total_xp=old_total_xp,
                old_level=old_level,
                new_level=old_level,
                events=events,
            )

        xp_amount = int(amount)
        new_total_xp = old_total_xp + xp_amount
        new_level = level_for_xp(new_total_xp)
        leveled_up = new_level > old_level

        if leveled_up:
            level_event = LevelUpEvent(
                old_level=old_level,
                new_level=new_level,
                total_xp=new_total_xp,
                occurred_on=today
            )
            logger.info(f"Leveled up from {old_level} to {new_level}!")
            track_level_up()
            await self.dispatcher.dispatch(level_event)

        new_state = state.model_copy(update={"xp": new_total_xp, "level": new_level}, deep=True)
        self._state = new_state
        persisted, warning = await self._persist(new_state, today)

        track_xp_awarded(xp_amount)
        if warning:
            events.append(warning)
        await self._emit(events)
        if leveled_up:
            events.insert(0, level_event)

        logger.info(f"Awarded {xp_amount} XP. Total: {new_total_xp} XP, Level: {new_level}")

        return XPAwardResult(
            accepted=True,
            xp_awarded=xp_amount,
            old_total_xp=old_total_xp,
            new_total_xp=new_total_xp,
            old_level=old_level,
            new_level=new_level,
            leveled_up=leveled_up,
            persisted=persisted,
            events=events,
        )

    async def award_badge(self, badge_id: str) -> bool:
        """
        Award a badge once

        Returns:
            True if newly awarded, False if already held or invalid
        """
        result = await self.award_badge_detailed(badge_id)
        return result.newly_awarded

    async def award_badge_detailed(self, badge_id: str) -> BadgeAwardResult:
        """Same as award_badge, with the persistence outcome and events"""
        state = await self._ensure_loaded()
        today = self.clock.today()
        events = self._drain_pending_events()

        if not isinstance(badge_id, str) or not badge_id.strip():
            logger.warning(f"Ignoring invalid badge id {badge_id!r}")
            await self._emit(events)
            return BadgeAwardResult(badge_id=str(badge_id), newly_awarded=False, events=events)

        if badge_id in state.badges:
            logger.debug(f"Badge '{badge_id}' already awarded")
            await self._emit(events)
            return BadgeAwardResult(badge_id=badge_id, newly_awarded=False, events=events)

        new_state = state.model_copy(deep=True)
        new_state.badges.append(badge_id)
        self._state = new_state
        persisted, warning = await self._persist(new_state, today)

        events.append(BadgeAwardedEvent(badge_id=badge_id, occurred_on=today))
        if warning:
            events.append(warning)
        track_badge_awarded()
        await self._emit(events)

        logger.info(f"Awarded badge '{badge_id}'")
        return BadgeAwardResult(badge_id=badge_id, newly_awarded=True, persisted=persisted, events=events)

    @property
    def state(self) -> GamificationState:
        return (self._state or GamificationState()).model_copy(deep=True)

    @property
    def xp(self) -> int:
        return self._state.xp if self._state else 0

    @property
    def level(self) -> int:
        return self._state.level if self._state else 1

    @property
    def badges(self) -> list[str]:
        return list(self._state.badges) if self._state else []

    async def get_user_xp(self) -> Dict[str, Any]:
        """
        Current XP, level progress and badges

        Returns:
            {
                'total_xp': int,
                'current_level': int,
                'xp_in_current_level': int,
                'xp_to_next_level': int,
                'badges': list[str]
            }
        """
        state = await self._ensure_loaded()
        level_info = calculate_level_from_xp(state.xp)
        return {
            "total_xp": state.xp,
            "current_level": level_info["current_level"],
            "xp_in_current_level": level_info["xp_in_current_level"],
            "xp_to_next_level": level_info["xp_to_next_level"],
            "badges": list(state.badges),
        }
