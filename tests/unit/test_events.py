"""Unit tests for EventDispatcher"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from studytrack.gamification.events import ALL_EVENTS, EventDispatcher
from studytrack.models.events import BadgeAwardedEvent, LevelUpEvent


@pytest.fixture
def level_up():
    return LevelUpEvent(old_level=1, new_level=2, total_xp=100, occurred_on="2024-01-01")


@pytest.mark.asyncio
async def test_dispatch_to_matching_type_only(dispatcher, level_up):
    on_level = MagicMock()
    on_badge = MagicMock()
    dispatcher.subscribe("level_up", on_level)
    dispatcher.subscribe("badge_awarded", on_badge)

    await dispatcher.dispatch(level_up)

    on_level.assert_called_once_with(level_up)
    on_badge.assert_not_called()


@pytest.mark.asyncio
async def test_wildcard_receives_everything(dispatcher, level_up):
    seen = []
    dispatcher.subscribe(ALL_EVENTS, seen.append)

    await dispatcher.dispatch(level_up)
    await dispatcher.dispatch(BadgeAwardedEvent(badge_id="streak-7", occurred_on="2024-01-07"))

    assert [e.type for e in seen] == ["level_up", "badge_awarded"]


@pytest.mark.asyncio
async def test_async_handler_awaited(dispatcher, level_up):
    handler = AsyncMock()
    dispatcher.subscribe("level_up", handler)

    await dispatcher.dispatch(level_up)

    handler.assert_awaited_once_with(level_up)


@pytest.mark.asyncio
async def test_subscribe_twice_delivers_once(dispatcher, level_up):
    handler = MagicMock()
    dispatcher.subscribe("level_up", handler)
    dispatcher.subscribe("level_up", handler)

    await dispatcher.dispatch(level_up)

    assert handler.call_count == 1


@pytest.mark.asyncio
async def test_unsubscribe(dispatcher, level_up):
    handler = MagicMock()
    dispatcher.subscribe("level_up", handler)
    dispatcher.unsubscribe("level_up", handler)
    dispatcher.unsubscribe("badge_awarded", handler)

    await dispatcher.dispatch(level_up)

    handler.assert_not_called()


@pytest.mark.asyncio
async def test_failing_handler_is_isolated(dispatcher, level_up):
    """A broken handler is reported; later handlers still run"""
    after = MagicMock()
    dispatcher.subscribe("level_up", MagicMock(side_effect=RuntimeError("boom")))
    dispatcher.subscribe("level_up", after)

    with patch("studytrack.gamification.events.capture_exception") as mock_capture:
        await dispatcher.dispatch(level_up)

    after.assert_called_once_with(level_up)
    mock_capture.assert_called_once()
    assert mock_capture.call_args.kwargs == {"event_type": "level_up"}
