"""
Event bus for hand and gesture notifications.

The pipeline publishes here; dispatchers, gesture loggers and status
displays subscribe without holding a reference to the debouncer.

Usage:
    bus = EventBus()
    bus.subscribe(Events.GESTURE_CONFIRMED, on_confirmed)
    bus.emit(Events.GESTURE_CONFIRMED, label=GestureLabel.RIGHT, timestamp=412.0)
"""

import logging
import threading
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Process-wide publish/subscribe bus with synchronous dispatch.

    Listeners run in subscription order on the emitting thread.
    """

    _instance = None

    def __new__(cls):
        """One bus per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._listeners = defaultdict(list)  # event_name -> [callback]
            cls._instance._lock = threading.Lock()
        return cls._instance

    def subscribe(self, event_name: str, callback: Callable):
        """Register callback(**kwargs) for event_name."""
        with self._lock:
            self._listeners[event_name].append(callback)
        logger.debug("Subscribed to '%s': %s",
                     event_name, getattr(callback, "__name__", repr(callback)))

    def unsubscribe(self, event_name: str, callback: Callable):
        """Remove a listener; bound methods match by equality."""
        with self._lock:
            self._listeners[event_name] = [
                cb for cb in self._listeners[event_name] if cb != callback
            ]

    def emit(self, event_name: str, **kwargs):
        """Call every listener of event_name; a failing listener is logged and skipped."""
        with self._lock:
            listeners = list(self._listeners.get(event_name, []))

        for callback in listeners:
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error("Event handler error [%s -> %s]: %s",
                             event_name, getattr(callback, "__name__", repr(callback)), e)

    def clear(self, event_name: str = None):
        """Remove all listeners, optionally for a specific event."""
        with self._lock:
            if event_name:
                self._listeners.pop(event_name, None)
            else:
                self._listeners.clear()

    @property
    def registered_events(self) -> list:
        with self._lock:
            return [name for name, cbs in self._listeners.items() if cbs]

    @property
    def listener_count(self) -> int:
        with self._lock:
            return sum(len(cbs) for cbs in self._listeners.values())

    def reset(self):
        """Drop every listener (for testing)."""
        self.clear()


class Events:
    """Event names published by the pipeline."""

    # Per-frame
    HAND_DETECTED = "hand_detected"
    HAND_LOST = "hand_lost"
    FRAME_REJECTED = "frame_rejected"
    GESTURE_DETECTED = "gesture_detected"

    # Debouncer output
    GESTURE_CONFIRMED = "gesture_confirmed"
