"""Per-frame gesture classification from finger states and a few landmark positions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple

import numpy as np

from .config import ClassifierConfig
from .gestures import Gestures
from .models.fingers import FingerIndex, FingerState, extract_finger_state
from .models.landmarks import HandLandmark, LandmarkFrame, landmarks_array
from .models.utils import Handedness

LandmarksArray = np.ndarray[Any, Any]


@dataclass(frozen=True)
class GestureSample:
    """Classification of one hand in one frame. `gesture` is None when nothing was recognized."""

    gesture: Gestures | None
    confidence: float
    handedness: Handedness | None
    timestamp: float

    @classmethod
    def empty(cls, handedness: Handedness | None, timestamp: float) -> GestureSample:
        return cls(gesture=None, confidence=0.0, handedness=handedness, timestamp=timestamp)


class CheckResult(NamedTuple):
    detected: bool
    confidence: float


class GestureCheck:
    """Rule detecting one gesture.

    Subclasses define `gesture`, the confidences reported on a hit or a miss, and `matches`.
    """

    gesture: ClassVar[Gestures]
    hit_confidence: ClassVar[float]
    miss_confidence: ClassVar[float] = 0.3

    def __init__(self, config: ClassifierConfig) -> None:
        self.config = config

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        raise NotImplementedError

    def check(self, fingers: FingerState, points: LandmarksArray) -> CheckResult:
        detected = self.matches(fingers, points)
        return CheckResult(detected, self.hit_confidence if detected else self.miss_confidence)


class FistCheck(GestureCheck):
    gesture = Gestures.FIST
    hit_confidence = 0.95
    miss_confidence = 0.2

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        return fingers.extended_count == 0


class OpenPalmCheck(GestureCheck):
    gesture = Gestures.OPEN_PALM
    hit_confidence = 0.95
    miss_confidence = 0.2

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        return fingers.extended_count == len(FingerIndex)


class PointingCheck(GestureCheck):
    gesture = Gestures.POINTING
    hit_confidence = 0.9

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        return fingers.only(FingerIndex.INDEX)


class PeaceSignCheck(GestureCheck):
    gesture = Gestures.PEACE_SIGN
    hit_confidence = 0.9

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        return fingers.only(FingerIndex.INDEX, FingerIndex.MIDDLE)


class ThumbsUpCheck(GestureCheck):
    gesture = Gestures.THUMBS_UP
    hit_confidence = 0.9

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        # y grows downward: "up" means the tip is above the wrist
        thumb_tip_y, wrist_y = points[HandLandmark.THUMB_TIP, 1], points[HandLandmark.WRIST, 1]
        return fingers.only(FingerIndex.THUMB) and bool(thumb_tip_y < wrist_y)


class ThumbsDownCheck(GestureCheck):
    gesture = Gestures.THUMBS_DOWN
    hit_confidence = 0.9

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        thumb_tip_y, wrist_y = points[HandLandmark.THUMB_TIP, 1], points[HandLandmark.WRIST, 1]
        return fingers.only(FingerIndex.THUMB) and bool(thumb_tip_y > wrist_y)


class OkSignCheck(GestureCheck):
    gesture = Gestures.OK_SIGN
    hit_confidence = 0.85

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        distance = np.linalg.norm(points[HandLandmark.THUMB_TIP, :2] - points[HandLandmark.INDEX_FINGER_TIP, :2])
        if distance >= self.config.ok_sign_touch_distance:
            return False
        return fingers.count_extended(FingerIndex.MIDDLE, FingerIndex.RING, FingerIndex.PINKY) == 3


class RockOnCheck(GestureCheck):
    gesture = Gestures.ROCK_ON
    hit_confidence = 0.85

    def matches(self, fingers: FingerState, points: LandmarksArray) -> bool:
        return fingers.only(FingerIndex.THUMB, FingerIndex.INDEX, FingerIndex.PINKY)


# Evaluation order, first accepted check wins. Some gestures are geometric subsets of others,
# so this order decides which one is reported when several checks match.
DEFAULT_CHECKS: tuple[type[GestureCheck], ...] = (
    FistCheck,
    OpenPalmCheck,
    PointingCheck,
    PeaceSignCheck,
    ThumbsUpCheck,
    ThumbsDownCheck,
    OkSignCheck,
    RockOnCheck,
)


class GestureClassifier:
    def __init__(
        self,
        config: ClassifierConfig | None = None,
        checks: Iterable[type[GestureCheck]] = DEFAULT_CHECKS,
    ) -> None:
        self.config = config or ClassifierConfig()
        check_classes = list(checks)
        seen: set[Gestures] = set()
        for check_class in check_classes:
            if check_class.gesture in seen:
                raise ValueError(f"Gesture {check_class.gesture} has more than one check")
            seen.add(check_class.gesture)

        disabled = set(self.config.disabled_gestures)
        self.checks: list[GestureCheck] = [
            check_class(self.config) for check_class in check_classes if check_class.gesture not in disabled
        ]

    @property
    def gestures(self) -> list[Gestures]:
        """Gestures that can be reported, in priority order."""
        return [check.gesture for check in self.checks]

    def classify(
        self,
        fingers: FingerState,
        landmarks: Sequence[Any] | LandmarksArray,
        handedness: Handedness | None,
        timestamp: float,
    ) -> GestureSample:
        """Return the first gesture whose check is detected with enough confidence."""
        points = landmarks_array(landmarks)
        for check in self.checks:
            result = check.check(fingers, points)
            if result.detected and result.confidence > self.config.acceptance_threshold:
                return GestureSample(
                    gesture=check.gesture,
                    confidence=result.confidence,
                    handedness=handedness,
                    timestamp=timestamp,
                )
        return GestureSample.empty(handedness, timestamp)

    def classify_frame(self, frame: LandmarkFrame) -> GestureSample:
        """Extract the finger state of the frame's hand and classify it.

        Raises:
            InvalidLandmarkSet: if the frame landmarks are malformed
        """
        points = frame.as_array()
        return self.classify(extract_finger_state(points), points, frame.handedness, frame.timestamp)
