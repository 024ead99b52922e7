"""
Event dispatch for gamification notifications

The engines describe what happened (streak saved, level up, write failed)
as Event objects; presentation is left to whoever subscribes.

Usage:
    dispatcher = EventDispatcher()
    dispatcher.subscribe("level_up", lambda e: print(f"Level {e.new_level}!"))
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

from studytrack.models.events import Event
from studytrack.monitoring import capture_exception

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], Union[None, Awaitable[None]]]

# Subscribe to this to receive every event
ALL_EVENTS = "*"


class EventDispatcher:
    """Fan events out to sync or async handlers"""

    def __init__(self):
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    async def dispatch(self, event: Event) -> None:
        """
        Deliver an event to its subscribers.

        A failing handler is logged and reported but never interrupts the
        caller; state has already been decided by the time we get here.
        """
        handlers = [*self._handlers.get(event.type, []), *self._handlers.get(ALL_EVENTS, [])]
        for handler in handlers:
            try:
                result: Any = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    f"Event handler {getattr(handler, '__name__', handler)!r} failed for {event.type}: {e}",
                    exc_info=True
                )
                capture_exception(e, event_type=event.type)
