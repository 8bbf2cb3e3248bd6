"""Event bus for decoupled component communication.

Usage:
    bus = EventBus()

    # Subscribe to events
    def on_sessions_changed(event):
        render(event.data.sessions)

    bus.subscribe(SESSIONS_CHANGED, on_sessions_changed)

    # Publish events
    await bus.publish(SESSIONS_CHANGED, SessionsChanged(...))
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)


@dataclass
class Event:
    """Event data container."""

    name: str
    data: Any
    source: str | None = None


class EventBus:
    """Simple event bus for publish/subscribe pattern.

    Lets the core announce state changes to the presentation layer without
    knowing anything about it.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callable]] = {}

    def subscribe(self, event_name: str, handler: Callable) -> None:
        """Subscribe to an event.

        Args:
            event_name: Event to listen for (e.g., "sessions.changed")
            handler: Sync or async function called with the ``Event``
        """
        self._subscribers.setdefault(event_name, []).append(handler)
        LOGGER.debug(f"Subscribed to event: {event_name}")

    def unsubscribe(self, event_name: str, handler: Callable) -> None:
        """Unsubscribe from an event.

        Args:
            event_name: Event to stop listening to
            handler: Handler function to remove
        """
        if event_name in self._subscribers:
            try:
                self._subscribers[event_name].remove(handler)
                LOGGER.debug(f"Unsubscribed from event: {event_name}")
            except ValueError:
                pass

    async def publish(
        self, event_name: str, data: Any, source: str | None = None
    ) -> None:
        """Publish an event to all subscribers.

        A failing handler is logged and does not stop the others.

        Args:
            event_name: Event name
            data: Event payload
            source: Optional source identifier
        """
        event = Event(name=event_name, data=data, source=source)
        handlers = list(self._subscribers.get(event_name, []))

        if not handlers:
            LOGGER.debug(f"No subscribers for event: {event_name}")
            return

        for handler in handlers:
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                LOGGER.error(f"Event handler failed for {event_name}: {e}")

    def clear(self, event_name: str | None = None) -> None:
        """Clear subscribers.

        Args:
            event_name: Specific event to clear, or None for all
        """
        if event_name:
            self._subscribers.pop(event_name, None)
        else:
            self._subscribers.clear()
