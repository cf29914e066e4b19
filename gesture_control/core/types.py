"""
Shared domain types for the gesture controller.

Centralizes enums, data classes, and type definitions used across modules
to eliminate circular imports and ensure type consistency.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional


# =============================================================================
# Gesture Labels
# =============================================================================

class GestureLabel(Enum):
    """Closed set of gesture labels produced by the classifier."""
    RIGHT = "right"     # open palm
    LEFT = "left"       # peace sign
    ROTATE = "rotate"   # fist
    NONE = "none"

    @classmethod
    def from_string(cls, name: Optional[str]) -> 'GestureLabel':
        """Convert a string label to GestureLabel, safely."""
        if name is None:
            return cls.NONE
        try:
            return cls(name)
        except ValueError:
            return cls.NONE

    @property
    def is_none(self) -> bool:
        return self is GestureLabel.NONE


class FingerStates(NamedTuple):
    """Per-finger extension flags for a single frame."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def extended_count(self) -> int:
        return sum(1 for f in self if f)


# =============================================================================
# Gesture -> Action Mapping
# =============================================================================

GESTURE_ACTION_MAP: Dict[GestureLabel, str] = {
    GestureLabel.RIGHT: "move_right",
    GestureLabel.LEFT: "move_left",
    GestureLabel.ROTATE: "rotate",
}


# =============================================================================
# Status Snapshot
# =============================================================================

class PipelineState:
    """Per-frame status snapshot handed to status observers.

    Written only by the pipeline; observers must treat it as read-only.
    """

    __slots__ = (
        "hand_detected", "current_label", "last_confirmed",
        "frame_count", "confirmed_count", "timestamp",
    )

    def __init__(self):
        self.hand_detected: bool = False
        self.current_label: GestureLabel = GestureLabel.NONE
        self.last_confirmed: Optional[GestureLabel] = None
        self.frame_count: int = 0
        self.confirmed_count: int = 0
        self.timestamp: float = 0.0

    @property
    def hand_status(self) -> str:
        return "detected" if self.hand_detected else "not detected"

    @property
    def gesture_text(self) -> str:
        """Label text for display; '-' when no gesture is recognized."""
        if not self.hand_detected or self.current_label.is_none:
            return "-"
        return self.current_label.value

    def to_dict(self) -> dict:
        return {
            "hand_detected": self.hand_detected,
            "hand_status": self.hand_status,
            "gesture": self.gesture_text,
            "last_confirmed": self.last_confirmed.value if self.last_confirmed else None,
            "frame_count": self.frame_count,
            "confirmed_count": self.confirmed_count,
        }

    def __repr__(self):
        return (f"PipelineState(hand={self.hand_status}, gesture={self.gesture_text}, "
                f"frames={self.frame_count})")
