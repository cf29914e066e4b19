"""
Status observers for hand/gesture presentation.

The pipeline pushes a PipelineState snapshot after every frame; how it is
shown (log lines, a web page, an overlay) is up to the observer.
"""

import logging

from gesture_control.core.types import PipelineState

logger = logging.getLogger(__name__)


class StatusObserver:
    """Interface for anything that displays pipeline status."""

    def update_status(self, state: PipelineState):
        raise NotImplementedError


class LoggingStatusObserver(StatusObserver):
    """Logs hand status and gesture text whenever either changes."""

    def __init__(self, log: logging.Logger = None):
        self._log = log or logger
        self._hand_status = None
        self._gesture_text = None

    def update_status(self, state: PipelineState):
        hand_status = state.hand_status
        gesture_text = state.gesture_text
        if hand_status == self._hand_status and gesture_text == self._gesture_text:
            return
        self._hand_status = hand_status
        self._gesture_text = gesture_text
        self._log.info("Hand: %-12s | Gesture: %s", hand_status, gesture_text)

    @property
    def hand_status(self) -> str:
        return self._hand_status

    @property
    def gesture_text(self) -> str:
        return self._gesture_text
