"""
ProgressService - Study Progress Business Logic

Connects user actions to the gamification engines:
- Task checked off: streak update + streak badges
- Focused work session finished: XP award
- Settings "delete all data": wipe both records
"""

import logging
from typing import Any, Dict, List

from studytrack.gamification.streak_system import StreakTracker
from studytrack.gamification.xp_system import GamificationLedger, WORK_SESSION_XP
from studytrack.models.events import Event
from studytrack.monitoring import capture_message

logger = logging.getLogger(__name__)

FIRST_COMPLETION_BADGE = "first-streak"
STREAK_BADGES = {
    7: "streak-7",
    30: "streak-30",
    100: "streak-100",
}


def badges_for_streak(streak: int) -> List[str]:
    """Badge ids earned by a streak of this length"""
    earned = [FIRST_COMPLETION_BADGE] if streak >= 1 else []
    earned.extend(badge for days, badge in sorted(STREAK_BADGES.items()) if streak >= days)
    return earned


def _serialize_events(events: List[Event]) -> List[Dict[str, Any]]:
    return [event.model_dump() for event in events]


class ProgressService:
    """
    Service for study progress.

    Responsibilities:
    - Streak updates on task completion
    - XP for finished work sessions
    - Badge awarding for streak milestones
    - Progress snapshot and wipe
    """

    def __init__(self, tracker: StreakTracker, ledger: GamificationLedger):
        """
        Initialize ProgressService.

        Args:
            tracker: StreakTracker instance
            ledger: GamificationLedger instance
        """
        self.tracker = tracker
        self.ledger = ledger
        logger.debug("ProgressService initialized")

    async def process_task_completion(self) -> Dict[str, Any]:
        """
        Process a task being checked off.

        Returns:
            {
                'streak': {updated, streak[, savedByBreak][, reset]},
                'badges_awarded': list[str],
                'persisted': bool,
                'events': list[dict]
            }
        """
        streak_update = await self.tracker.mark_completed()
        events: List[Event] = list(streak_update.events)
        persisted = streak_update.persisted
        badges_awarded = []

        if streak_update.updated:
            for badge_id in badges_for_streak(streak_update.streak):
                badge_result = await self.ledger.award_badge_detailed(badge_id)
                events.extend(badge_result.events)
                if badge_result.newly_awarded:
                    badges_awarded.append(badge_id)
                if badge_result.persisted is False:
                    persisted = False

        logger.info(
            f"Task completion processed: streak={streak_update.streak}, "
            f"updated={streak_update.updated}, badges={badges_awarded}"
        )

        return {
            "streak": streak_update.to_result(),
            "badges_awarded": badges_awarded,
            "persisted": persisted,
            "events": _serialize_events(events),
        }

    async def process_work_session(self) -> Dict[str, Any]:
        """
        Process a finished focused work session.

        Returns:
            {
                'xp_awarded': int,
                'total_xp': int,
                'level_up': bool,
                'new_level': int,
                'persisted': bool,
                'events': list[dict]
            }
        """
        xp_result = await self.ledger.add_xp(WORK_SESSION_XP)

        logger.info(
            f"Work session processed: xp={xp_result.xp_awarded}, "
            f"total={xp_result.new_total_xp}, level={xp_result.new_level}"
        )

        return {
            "xp_awarded": xp_result.xp_awarded,
            "total_xp": xp_result.new_total_xp,
            "level_up": xp_result.leveled_up,
            "new_level": xp_result.new_level,
            "persisted": bool(xp_result.persisted),
            "events": _serialize_events(xp_result.events),
        }

    async def get_progress(self) -> Dict[str, Any]:
        """Snapshot of streak and XP state"""
        return {
            "streak": await self.tracker.get_streak_info(),
            "history": self.tracker.history,
            "xp": await self.ledger.get_user_xp(),
        }

    async def wipe_progress(self) -> Dict[str, Any]:
        """
        Delete both stored records and reset the engines.

        Each engine is reset as soon as its own record is gone, so memory
        always matches the store even when a later delete fails.

        Raises:
            StorageError: A record could not be deleted; its engine keeps its state
        """
        deleted = {}
        for engine in (self.tracker, self.ledger):
            deleted[engine.key] = await engine.store.delete(engine.key)
            engine.clear()

        logger.warning(f"🗑️  Progress wiped: {deleted}")
        capture_message("Progress wiped", level="warning", backend=self.tracker.store.backend)

        return {"deleted": deleted}
