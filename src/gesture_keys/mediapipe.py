"""MediaPipe names used by the hand landmarks recognizer."""

import mediapipe as mp  # type: ignore[import-untyped]
from mediapipe.tasks.python import BaseOptions  # type: ignore[import-untyped]
from mediapipe.tasks.python.vision import (  # type: ignore[import-untyped]
    HandLandmarker,
    HandLandmarkerOptions,
    HandLandmarkerResult,
    RunningMode,
)

from mediapipe.tasks.python.components.containers import NormalizedLandmark  # type: ignore[import-untyped] # isort: skip

__all__ = [
    "BaseOptions",
    "HandLandmarker",
    "HandLandmarkerOptions",
    "HandLandmarkerResult",
    "RunningMode",
    "NormalizedLandmark",
    "mp",
]
