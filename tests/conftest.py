"""
Shared fixtures for the gesture controller test suite.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_control.core.events import EventBus
from gesture_control.modules.utils.config import Config

FINGERS = ("thumb", "index", "middle", "ring", "pinky")

OPEN_PALM = {f: "up" for f in FINGERS}
PEACE_SIGN = {"index": "up", "middle": "up"}
FIST = {}


def create_mock_landmarks(finger_states: dict, base_x: float = 0.5, base_y: float = 0.8) -> np.ndarray:
    """
    Create a synthetic (21, 3) hand for testing.

    Args:
        finger_states: Dict of finger -> "up" or "down" (missing = "down")

    Returns:
        np.ndarray of normalized landmarks
    """
    lm = np.zeros((21, 3), dtype=np.float32)
    lm[0] = [base_x, base_y, 0.0]  # wrist

    # Thumb (1-4): extension is judged by tip-vs-MCP horizontal distance
    thumb_up = finger_states.get("thumb", "down") == "up"
    lm[1] = [base_x - 0.05, base_y - 0.05, 0.0]   # CMC
    lm[2] = [base_x - 0.10, base_y - 0.10, 0.0]   # MCP
    tip_dx = -0.15 if thumb_up else -0.03
    lm[3] = [base_x - 0.10 + tip_dx / 2, base_y - 0.13, 0.0]  # IP
    lm[4] = [base_x - 0.10 + tip_dx, base_y - 0.15, 0.0]      # TIP

    # Long fingers: MCP at base_y - 0.2, tip well above it when extended
    for n, (finger, x_off) in enumerate(zip(FINGERS[1:], (-0.05, 0.0, 0.05, 0.10))):
        mcp = 5 + 4 * n
        up = finger_states.get(finger, "down") == "up"
        mcp_y = base_y - 0.20
        if up:
            ys = [mcp_y, mcp_y - 0.08, mcp_y - 0.14, mcp_y - 0.20]
        else:
            ys = [mcp_y, mcp_y - 0.04, mcp_y + 0.00, mcp_y + 0.02]
        for j, y in enumerate(ys):
            lm[mcp + j] = [base_x + x_off, y, 0.0]

    return lm


@pytest.fixture
def make_landmarks():
    return create_mock_landmarks


@pytest.fixture
def event_bus():
    """Singleton event bus, cleared before and after each test."""
    bus = EventBus()
    bus.reset()
    yield bus
    bus.reset()


@pytest.fixture
def fresh_config():
    Config.reset()
    yield Config()
    Config.reset()
