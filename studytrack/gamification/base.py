"""
Shared load/save cycle for record-backed engines

Each engine owns one pydantic state object mirrored to a fixed store key.
Unreadable records are replaced by a fresh state instead of failing the
caller; failed writes keep the in-memory state and surface as events.
"""

import logging
from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from studytrack.exceptions import MalformedStateError
from studytrack.gamification.events import EventDispatcher
from studytrack.models.events import Event, PersistenceWarningEvent, StateRecoveredEvent
from studytrack.monitoring import capture_exception, track_malformed_state
from studytrack.storage.base import StateStore
from studytrack.utils.datetime_helpers import Clock

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT", bound=BaseModel)


class RecordEngine(Generic[StateT]):
    """Base for StreakTracker and GamificationLedger"""

    state_model: Type[StateT]

    def __init__(
        self,
        store: StateStore,
        clock: Clock,
        key: str,
        dispatcher: Optional[EventDispatcher] = None
    ):
        self.store = store
        self.clock = clock
        self.key = key
        self.dispatcher = dispatcher or EventDispatcher()
        self._state: Optional[StateT] = None
        self._pending_events: list[Event] = []

    async def load(self) -> StateT:
        """
        (Re)load state from the store.

        Missing records give a fresh state. Unreadable records are logged,
        reported and replaced by a fresh state; the next result carries a
        StateRecoveredEvent. Backend read failures (StorageError) propagate.
        """
        try:
            record = await self.store.load(self.key)
            self._state = self.state_model.from_record(record) if record is not None else self.state_model()
        except MalformedStateError as e:
            self._recover(e)
        except PydanticValidationError as e:
            self._recover(MalformedStateError(
                f"Stored record '{self.key}' failed validation ({e.error_count()} errors)",
                key=self.key,
                operation="load",
                cause=e
            ))
        return self._state

    def _recover(self, error: MalformedStateError) -> None:
        capture_exception(error, key=self.key)
        track_malformed_state(self.key)
        self._state = self.state_model()
        self._pending_events.append(StateRecoveredEvent(
            key=self.key,
            error=error.message,
            occurred_on=self.clock.today()
        ))
        logger.warning(f"Started fresh state for '{self.key}' after unreadable record")

    async def _ensure_loaded(self) -> StateT:
        if self._state is None:
            await self.load()
        return self._state

    def _drain_pending_events(self) -> list[Event]:
        events, self._pending_events = self._pending_events, []
        return events

    async def _persist(self, state: StateT, today: str) -> tuple[bool, Optional[PersistenceWarningEvent]]:
        """Write state; on failure return a warning event instead of raising"""
        result = await self.store.save(self.key, state.to_record())
        if result.success:
            return True, None

        capture_exception(result.error, key=self.key)
        return False, PersistenceWarningEvent(
            key=self.key,
            error=result.error.message if result.error else None,
            occurred_on=today
        )

    async def _emit(self, events: list[Event]) -> None:
        for event in events:
            await self.dispatcher.dispatch(event)

    def clear(self) -> None:
        """Reset in-memory state to defaults (after an external wipe)"""
        self._state = self.state_model()
        self._pending_events = []
