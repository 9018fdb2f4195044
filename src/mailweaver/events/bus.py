"""Synchronous event bus for assembly lifecycle events."""

import logging
from collections import deque
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous publish-subscribe event bus.

    Listeners subscribe to one event type or to every event. Dispatch
    happens in registration order on the emitting coroutine, so listeners
    must not block. Only the most recent ``history_limit`` events are kept;
    a limit of 0 disables recording.
    """

    def __init__(self, history_limit: int = 1000) -> None:
        self._listeners: dict[type, list[Callable[[Any], None]]] = {}
        self._global_listeners: list[Callable[[Any], None]] = []
        self.history: deque[Any] = deque(maxlen=history_limit)

    def subscribe(self, event_type: type, callback: Callable[[Any], None]) -> None:
        """Register a callback for a specific event type."""
        self._listeners.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Callable[[Any], None]) -> None:
        """Register a callback that receives every event."""
        self._global_listeners.append(callback)

    def emit(self, event: Any) -> None:
        """Record *event* and dispatch it to all matching listeners."""
        logger.debug("event: %r", event)
        self.history.append(event)
        for cb in self._global_listeners:
            cb(event)
        for cb in self._listeners.get(type(event), []):
            cb(event)

    def of_type(self, event_type: type) -> list[Any]:
        """Return recorded events of *event_type* in emission order."""
        return [e for e in self.history if isinstance(e, event_type)]
