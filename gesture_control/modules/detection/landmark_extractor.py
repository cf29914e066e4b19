"""
21-point hand landmark conversion and validation.

Sits at the boundary with the external hand detector (MediaPipe Hands) and
turns whatever it delivers into a (21, 3) numpy array, or rejects the frame.
"""

import math
import logging
import numpy as np

logger = logging.getLogger(__name__)

# MediaPipe hand landmark indices
WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

NUM_LANDMARKS = 21


class MalformedLandmarksError(ValueError):
    """Raised when a frame does not hold exactly 21 usable landmarks."""


class LandmarkExtractor:
    """Converts detector output into normalized landmark arrays."""

    def extract(self, hand_landmarks) -> np.ndarray:
        """Convert one hand's landmarks to a numpy array of (x, y, z).

        Accepts a MediaPipe NormalizedLandmarkList (``.landmark``), a
        sequence of objects with ``x``/``y`` (and optionally ``z``)
        attributes, or a sequence of ``[x, y]`` / ``[x, y, z]`` rows.

        Returns:
            np.ndarray of shape (21, 3) with normalized coordinates

        Raises:
            MalformedLandmarksError: wrong point count or unusable values
        """
        points = getattr(hand_landmarks, "landmark", hand_landmarks)
        if isinstance(points, np.ndarray):
            return self._from_array(points)

        try:
            points = list(points)
        except TypeError:
            raise MalformedLandmarksError(
                f"Landmarks must be a sequence, got {type(points).__name__}"
            )

        if len(points) != NUM_LANDMARKS:
            raise MalformedLandmarksError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(points)}"
            )

        landmarks = np.zeros((NUM_LANDMARKS, 3), dtype=np.float32)
        for i, point in enumerate(points):
            landmarks[i] = self._point_to_row(i, point)
        return landmarks

    def _from_array(self, points: np.ndarray) -> np.ndarray:
        if points.ndim != 2 or points.shape[0] != NUM_LANDMARKS or points.shape[1] < 2:
            raise MalformedLandmarksError(
                f"Expected landmark array of shape ({NUM_LANDMARKS}, 2|3), got {points.shape}"
            )
        landmarks = np.zeros((NUM_LANDMARKS, 3), dtype=np.float32)
        width = min(points.shape[1], 3)
        try:
            landmarks[:, :width] = points[:, :width]
        except (TypeError, ValueError):
            raise MalformedLandmarksError("Landmark array has non-numeric coordinates")
        if not np.all(np.isfinite(landmarks)):
            raise MalformedLandmarksError("Landmark array contains non-finite values")
        return landmarks

    @staticmethod
    def _point_to_row(index: int, point) -> list:
        if hasattr(point, "x") and hasattr(point, "y"):
            coords = [point.x, point.y, getattr(point, "z", 0.0)]
        else:
            try:
                coords = list(point)
            except TypeError:
                raise MalformedLandmarksError(f"Landmark {index} is not a point: {point!r}")
            if len(coords) < 2:
                raise MalformedLandmarksError(
                    f"Landmark {index} needs at least x and y, got {len(coords)} values"
                )
            coords = (coords + [0.0])[:3]

        try:
            coords = [float(c) for c in coords]
        except (TypeError, ValueError):
            raise MalformedLandmarksError(f"Landmark {index} has non-numeric coordinates")
        if not all(math.isfinite(c) for c in coords):
            raise MalformedLandmarksError(f"Landmark {index} has non-finite coordinates")
        return coords

    @staticmethod
    def first_hand(results):
        """Return the first detected hand from a MediaPipe results object.

        The detector runs with max_num_hands=1, so only the first entry of
        ``multi_hand_landmarks`` is ever used. Returns None if no hand.
        """
        hands = getattr(results, "multi_hand_landmarks", None)
        if not hands:
            return None
        return hands[0]
