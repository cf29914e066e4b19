"""
Rule-based static gesture classifier.

Maps one frame of hand landmarks to a GestureLabel using binary per-finger
extension rules:

    open palm   (all five extended)          -> RIGHT
    peace sign  (index + middle only)        -> LEFT
    fist        (nothing extended)           -> ROTATE
    anything else                            -> NONE

The classifier holds no state between frames. Borderline finger positions
can flip between frames; smoothing that out is the debouncer's job.
"""

import logging
import numpy as np

from gesture_control.core.types import GestureLabel, FingerStates
from gesture_control.modules.detection.landmark_extractor import (
    THUMB_MCP, THUMB_TIP,
    INDEX_MCP, INDEX_TIP, MIDDLE_MCP, MIDDLE_TIP,
    RING_MCP, RING_TIP, PINKY_MCP, PINKY_TIP,
)

logger = logging.getLogger(__name__)

# Thumb bends sideways across the palm, so it is judged on the x axis.
THUMB_EXTENSION_THRESHOLD = 0.1
# Image y grows downward: an extended fingertip sits above its knuckle.
FINGER_EXTENSION_MARGIN = 0.05

# (tip, mcp) pairs for the four long fingers
_LONG_FINGERS = (
    (INDEX_TIP, INDEX_MCP),
    (MIDDLE_TIP, MIDDLE_MCP),
    (RING_TIP, RING_MCP),
    (PINKY_TIP, PINKY_MCP),
)

_OPEN_PALM = FingerStates(True, True, True, True, True)
_PEACE_SIGN = FingerStates(False, True, True, False, False)
_FIST = FingerStates(False, False, False, False, False)

_PATTERNS = (
    (_OPEN_PALM, GestureLabel.RIGHT),
    (_PEACE_SIGN, GestureLabel.LEFT),
    (_FIST, GestureLabel.ROTATE),
)


class GestureClassifier:
    """Classifies a single frame of landmarks into a GestureLabel."""

    def get_finger_states(self, landmarks: np.ndarray) -> FingerStates:
        """Determine which fingers are extended.

        Args:
            landmarks: array of shape (21, 2) or (21, 3), normalized coordinates

        Returns:
            FingerStates (thumb, index, middle, ring, pinky)
        """
        thumb = abs(landmarks[THUMB_TIP][0] - landmarks[THUMB_MCP][0]) > THUMB_EXTENSION_THRESHOLD
        fingers = [
            landmarks[tip][1] < landmarks[mcp][1] - FINGER_EXTENSION_MARGIN
            for tip, mcp in _LONG_FINGERS
        ]
        return FingerStates(bool(thumb), *(bool(f) for f in fingers))

    def classify(self, landmarks: np.ndarray) -> GestureLabel:
        """Classify gesture from hand landmarks.

        Args:
            landmarks: array of shape (21, 2) or (21, 3), validated by the caller

        Returns:
            GestureLabel, NONE for unrecognized poses
        """
        return self.classify_states(self.get_finger_states(landmarks))

    @staticmethod
    def classify_states(states: FingerStates) -> GestureLabel:
        """Exact pattern match of an extension vector against known poses."""
        for pattern, label in _PATTERNS:
            if states == pattern:
                return label
        return GestureLabel.NONE
