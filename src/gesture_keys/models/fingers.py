from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from typing import Any, NamedTuple

import numpy as np

from .landmarks import HandLandmark, Landmark, landmarks_array


class FingerIndex(IntEnum):
    """Finger index constants for easier reference."""

    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


# (tip, PIP) landmarks of the fingers using the vertical extension test
VERTICAL_FINGERS_LANDMARKS: dict[FingerIndex, tuple[HandLandmark, HandLandmark]] = {
    FingerIndex.INDEX: (HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_PIP),
    FingerIndex.MIDDLE: (HandLandmark.MIDDLE_FINGER_TIP, HandLandmark.MIDDLE_FINGER_PIP),
    FingerIndex.RING: (HandLandmark.RING_FINGER_TIP, HandLandmark.RING_FINGER_PIP),
    FingerIndex.PINKY: (HandLandmark.PINKY_TIP, HandLandmark.PINKY_PIP),
}


class FingerState(NamedTuple):
    """Extended (True) or flexed (False) flag for each finger."""

    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def extended_count(self) -> int:
        return sum(self)

    def only(self, *fingers: FingerIndex) -> bool:
        """Check that the given fingers, and only them, are extended."""
        expected = set(fingers)
        return all(extended == (finger in expected) for finger, extended in zip(FingerIndex, self, strict=True))

    def count_extended(self, *fingers: FingerIndex) -> int:
        """Number of extended fingers among the given ones."""
        return sum(1 for finger in fingers if self[finger])


def is_thumb_extended(points: np.ndarray[Any, Any]) -> bool:
    """Thumb extension is lateral: its tip is to the right of its MCP joint."""
    return bool(points[HandLandmark.THUMB_TIP, 0] > points[HandLandmark.THUMB_MCP, 0])


def is_finger_extended(points: np.ndarray[Any, Any], finger: FingerIndex) -> bool:
    """A finger is extended when its tip is above its PIP joint (y grows downward)."""
    tip, pip = VERTICAL_FINGERS_LANDMARKS[finger]
    return bool(points[tip, 1] < points[pip, 1])


def extract_finger_state(landmarks: Sequence[Landmark] | np.ndarray[Any, Any]) -> FingerState:
    """Compute the finger state of one hand from its 21 landmarks.

    Raises:
        InvalidLandmarkSet: if there are fewer than 21 landmarks or they are malformed
    """
    points = landmarks_array(landmarks)
    return FingerState(
        thumb=is_thumb_extended(points),
        index=is_finger_extended(points, FingerIndex.INDEX),
        middle=is_finger_extended(points, FingerIndex.MIDDLE),
        ring=is_finger_extended(points, FingerIndex.RING),
        pinky=is_finger_extended(points, FingerIndex.PINKY),
    )
