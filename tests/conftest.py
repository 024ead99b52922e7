"""Global test fixtures and utilities for studytrack tests"""
import pytest
import tempfile
from pathlib import Path

from studytrack.gamification.events import EventDispatcher
from studytrack.gamification.streak_system import StreakTracker
from studytrack.gamification.xp_system import GamificationLedger
from studytrack.services.progress_service import ProgressService
from studytrack.storage import FileStore, MemoryStore
from studytrack.utils.datetime_helpers import FixedClock


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-01-01; tests advance it explicitly"""
    return FixedClock("2024-01-01")


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Empty in-memory record store"""
    return MemoryStore()


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test data"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def file_store(temp_data_dir):
    """File store rooted in a temporary directory"""
    return FileStore(temp_data_dir)


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def recorded_events(dispatcher):
    """Every event dispatched during the test, in order"""
    events = []
    dispatcher.subscribe("*", events.append)
    return events


@pytest.fixture
def tracker(memory_store, fixed_clock, dispatcher):
    return StreakTracker(memory_store, fixed_clock, dispatcher)


@pytest.fixture
def ledger(memory_store, fixed_clock, dispatcher):
    return GamificationLedger(memory_store, fixed_clock, dispatcher)


@pytest.fixture
def progress_service(tracker, ledger):
    return ProgressService(tracker, ledger)
