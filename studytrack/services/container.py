"""
Service Container - Dependency Injection Container

Simple DI container for the store, clock and engines.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from studytrack.config import (
    DATA_PATH,
    REDIS_NAMESPACE,
    REDIS_URL,
    STORAGE_BACKEND,
    USER_TIMEZONE,
)
from studytrack.gamification.events import EventDispatcher
from studytrack.storage import StateStore, create_store
from studytrack.utils.datetime_helpers import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (store, clock) are injected.
    """

    # Infrastructure dependencies (injected)
    store: StateStore
    clock: Clock
    dispatcher: EventDispatcher = field(default_factory=EventDispatcher)

    # Services (lazy-loaded via properties)
    _tracker: Optional[object] = field(default=None, init=False, repr=False)
    _ledger: Optional[object] = field(default=None, init=False, repr=False)
    _progress_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def tracker(self):
        """Get StreakTracker instance (lazy-loaded)"""
        if self._tracker is None:
            from studytrack.gamification.streak_system import StreakTracker
            self._tracker = StreakTracker(self.store, self.clock, self.dispatcher)
            logger.debug("StreakTracker instantiated")
        return self._tracker

    @property
    def ledger(self):
        """Get GamificationLedger instance (lazy-loaded)"""
        if self._ledger is None:
            from studytrack.gamification.xp_system import GamificationLedger
            self._ledger = GamificationLedger(self.store, self.clock, self.dispatcher)
            logger.debug("GamificationLedger instantiated")
        return self._ledger

    @property
    def progress_service(self):
        """Get ProgressService instance (lazy-loaded)"""
        if self._progress_service is None:
            from studytrack.services.progress_service import ProgressService
            self._progress_service = ProgressService(self.tracker, self.ledger)
            logger.debug("ProgressService instantiated")
        return self._progress_service


# Global container instance (initialized in main.py)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(
    store: Optional[StateStore] = None,
    clock: Optional[Clock] = None
) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        store: Record store (defaults to the configured STORAGE_BACKEND)
        clock: Date source (defaults to the wall clock in USER_TIMEZONE)

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    if store is None:
        store = create_store(
            STORAGE_BACKEND,
            data_path=DATA_PATH,
            redis_url=REDIS_URL,
            namespace=REDIS_NAMESPACE
        )
    if clock is None:
        clock = SystemClock(USER_TIMEZONE or None)

    _container = ServiceContainer(store=store, clock=clock)

    logger.info(f"Service container initialized (storage={store.backend})")
    return _container


def reset_container() -> None:
    """Drop the global container"""
    global _container
    _container = None
