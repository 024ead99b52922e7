"""Unit tests for the service container"""
import pytest

from studytrack.gamification.streak_system import StreakTracker
from studytrack.services.container import ServiceContainer, get_container, init_container, reset_container
from studytrack.storage import FileStore, MemoryStore
from studytrack.utils.datetime_helpers import SystemClock


@pytest.fixture(autouse=True)
def clean_container():
    reset_container()
    yield
    reset_container()


def test_get_container_before_init():
    with pytest.raises(RuntimeError):
        get_container()


def test_init_container_with_injected_dependencies(memory_store, fixed_clock):
    container = init_container(store=memory_store, clock=fixed_clock)

    assert get_container() is container
    assert container.store is memory_store
    assert container.clock is fixed_clock


def test_init_container_defaults(monkeypatch, temp_data_dir):
    monkeypatch.setattr("studytrack.services.container.STORAGE_BACKEND", "file")
    monkeypatch.setattr("studytrack.services.container.DATA_PATH", temp_data_dir)
    monkeypatch.setattr("studytrack.services.container.USER_TIMEZONE", "Europe/Berlin")

    container = init_container()

    assert isinstance(container.store, FileStore)
    assert container.store.data_path == temp_data_dir
    assert isinstance(container.clock, SystemClock)
    assert str(container.clock.tz) == "Europe/Berlin"


def test_services_are_lazy_and_shared(fixed_clock):
    container = ServiceContainer(store=MemoryStore(), clock=fixed_clock)

    assert container._tracker is None
    tracker = container.tracker
    assert isinstance(tracker, StreakTracker)
    assert container.tracker is tracker

    service = container.progress_service
    assert service.tracker is tracker
    assert service.ledger is container.ledger
    # Engines share the container's dispatcher
    assert tracker.dispatcher is container.dispatcher
    assert container.ledger.dispatcher is container.dispatcher
