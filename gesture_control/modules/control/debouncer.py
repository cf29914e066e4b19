"""
Dwell-time debouncer for per-frame gesture labels.

States:
    Idle     - no label held (current label is NONE)
    Holding  - a non-none label has been seen continuously since
               label_start_time

A label is confirmed once it has been held for longer than the dwell
threshold. In the default "repeat" fire mode every qualifying frame emits
again, so dispatchers must be rate-aware. The "once" mode fires a single
event per hold and re-arms when the label changes or the hand is lost.
"""

import math
import time
import logging
from typing import Callable, List, Optional

from gesture_control.core.types import GestureLabel

logger = logging.getLogger(__name__)

DEFAULT_DWELL_THRESHOLD_MS = 300
FIRE_MODES = ("repeat", "once")


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GestureDebouncer:
    """Turns a noisy label stream into confirmed gesture events."""

    def __init__(self, config: dict = None, clock: Callable[[], float] = monotonic_ms):
        config = config or {}
        dwell = config.get("dwell_threshold_ms", DEFAULT_DWELL_THRESHOLD_MS)
        self._fire_mode = config.get("fire_mode", "repeat")

        try:
            self._dwell_threshold_ms = float(dwell)
        except (TypeError, ValueError):
            raise ValueError(f"dwell_threshold_ms must be a number, got {dwell!r}")
        if not math.isfinite(self._dwell_threshold_ms) or self._dwell_threshold_ms < 0:
            raise ValueError(f"dwell_threshold_ms must be >= 0, got {self._dwell_threshold_ms}")
        if self._fire_mode not in FIRE_MODES:
            raise ValueError(f"fire_mode must be one of {FIRE_MODES}, got {self._fire_mode!r}")

        self._clock = clock
        self._callbacks: List[Callable[[GestureLabel], None]] = []

        self._current_label = GestureLabel.NONE
        self._label_start_time = 0.0
        self._fired = False  # only consulted in "once" mode

    def update(self, label: Optional[GestureLabel], now: float = None) -> Optional[GestureLabel]:
        """Feed one frame's label.

        Args:
            label: label for this frame; None is treated as NONE
            now: timestamp in milliseconds, defaults to the debouncer clock

        Returns:
            The confirmed label if this frame emits, else None
        """
        if label is None:
            label = GestureLabel.NONE
        if now is None:
            now = self._clock()

        if label is GestureLabel.NONE:
            if self._current_label is not GestureLabel.NONE:
                logger.debug("Gesture released: %s", self._current_label.value)
            self.reset()
            return None

        if label is not self._current_label:
            logger.debug("Gesture hold started: %s -> %s at %.0fms",
                         self._current_label.value, label.value, now)
            self._current_label = label
            self._label_start_time = now
            self._fired = False
            return None

        elapsed = now - self._label_start_time
        if elapsed < 0:
            # Clock went backwards; the dwell has to be earned again.
            logger.warning("Clock moved backwards by %.0fms, restarting dwell for %s",
                           -elapsed, label.value)
            self._label_start_time = now
            return None

        if elapsed <= self._dwell_threshold_ms:
            return None
        if self._fire_mode == "once" and self._fired:
            return None

        self._fired = True
        self._emit(label)
        return label

    def _emit(self, label: GestureLabel):
        for callback in list(self._callbacks):
            try:
                callback(label)
            except Exception as e:
                logger.error("Gesture callback error: %s", e)

    def on_confirmed(self, callback: Callable[[GestureLabel], None]):
        """Register callback for confirmed gestures.

        callback(label: GestureLabel)
        """
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[GestureLabel], None]):
        self._callbacks = [cb for cb in self._callbacks if cb != callback]

    def reset(self):
        """Return to Idle."""
        self._current_label = GestureLabel.NONE
        self._label_start_time = 0.0
        self._fired = False

    @property
    def current_label(self) -> GestureLabel:
        return self._current_label

    @property
    def label_start_time(self) -> float:
        return self._label_start_time

    @property
    def is_holding(self) -> bool:
        return self._current_label is not GestureLabel.NONE

    @property
    def dwell_threshold_ms(self) -> float:
        return self._dwell_threshold_ms

    @property
    def fire_mode(self) -> str:
        return self._fire_mode

    def held_for(self, now: float = None) -> float:
        """Milliseconds the current label has been held (0 when idle)."""
        if not self.is_holding:
            return 0.0
        if now is None:
            now = self._clock()
        return max(0.0, now - self._label_start_time)
