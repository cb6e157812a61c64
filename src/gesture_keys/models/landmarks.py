from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np

from .utils import Handedness

if TYPE_CHECKING:
    from ..mediapipe import NormalizedLandmark

NB_HAND_LANDMARKS = 21


class InvalidLandmarkSet(ValueError):
    """Raised when a set of hand landmarks cannot be used for classification."""


class HandLandmark(IntEnum):
    """MediaPipe hand landmark indices."""

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class Landmark(NamedTuple):
    """A landmark in normalized image space.

    Attributes:
        x: X coordinate (0 to 1, growing to the right)
        y: Y coordinate (0 to 1, growing downward)
        z: Depth relative to the wrist, same scale as x
    """

    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_mediapipe(cls, normalized_landmark: NormalizedLandmark, mirroring: bool = False) -> Landmark:
        """Create a Landmark from a MediaPipe normalized landmark, mirroring the X coordinate if asked."""
        return cls(
            x=normalized_landmark.x if not mirroring else 1 - normalized_landmark.x,
            y=normalized_landmark.y,
            z=normalized_landmark.z,
        )


def landmarks_array(
    landmarks: Sequence[Landmark] | Sequence[Sequence[float]] | np.ndarray[Any, Any],
) -> np.ndarray[Any, Any]:
    """Convert landmarks to a `(21, 3)` float array, validating the shape of the input."""
    if len(landmarks) < NB_HAND_LANDMARKS:
        raise InvalidLandmarkSet(f"Expected {NB_HAND_LANDMARKS} landmarks, got {len(landmarks)}")
    try:
        points = np.array([tuple(landmark)[:3] for landmark in landmarks[:NB_HAND_LANDMARKS]], dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidLandmarkSet(f"Malformed landmarks: {exc}") from exc
    if points.ndim != 2 or points.shape[1] < 2:
        raise InvalidLandmarkSet(f"Landmarks must have at least x and y coordinates, got shape {points.shape}")
    if not np.isfinite(points).all():
        raise InvalidLandmarkSet("Landmarks contain non finite coordinates")
    return points


@dataclass(frozen=True)
class LandmarkFrame:
    """One detected hand in one camera frame."""

    landmarks: Sequence[Landmark]
    handedness: Handedness
    timestamp: float  # seconds
    confidence: float = 1.0  # handedness score given by the detector

    def as_array(self) -> np.ndarray[Any, Any]:
        return landmarks_array(self.landmarks)
