"""
Logging setup and confirmed-gesture event logging.
"""

import os
import logging
import logging.handlers
import time

from gesture_control.core.types import GestureLabel, GESTURE_ACTION_MAP


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure logging for the application."""
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(root_logger.level)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


class GestureLogger:
    """Records confirmed gestures and the actions they map to."""

    def __init__(self):
        self.logger = logging.getLogger("gesture_events")
        self._gesture_history = []

    def log_gesture(self, label: GestureLabel, timestamp_ms: float = None, held_ms: float = None):
        """Log a confirmed gesture event."""
        action = GESTURE_ACTION_MAP.get(label)
        entry = {
            "timestamp": time.time(),
            "frame_time_ms": timestamp_ms,
            "gesture": label.value,
            "action": action,
            "held_ms": held_ms,
        }
        self._gesture_history.append(entry)
        self.logger.info(
            "Gesture: %-8s | Action: %-10s | Held: %s",
            label.value,
            action or "none",
            f"{held_ms:.0f}ms" if held_ms is not None else "N/A",
        )

    def get_history(self, last_n=None):
        """Get recent gesture history."""
        if last_n:
            return self._gesture_history[-last_n:]
        return self._gesture_history.copy()

    def counts(self) -> dict:
        """Number of confirmed events per gesture label."""
        totals = {}
        for entry in self._gesture_history:
            totals[entry["gesture"]] = totals.get(entry["gesture"], 0) + 1
        return totals

    @property
    def total_gestures(self):
        return len(self._gesture_history)
