from __future__ import annotations

import logging
import os
import time
import urllib.request
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar, TypeAlias

import cv2

from .config import RecognizerConfig
from .mediapipe import (
    BaseOptions,
    HandLandmarker,
    HandLandmarkerOptions,
    HandLandmarkerResult,
    RunningMode,
    mp,
)
from .models.landmarks import Landmark, LandmarkFrame
from .models.utils import Handedness

logger = logging.getLogger("gesture_keys.recognizer")

OpenCVImage: TypeAlias = cv2.typing.MatLike  # Type alias for images (numpy arrays)


@dataclass
class RecognizerResult:
    hands: list[LandmarkFrame]
    timestamp: float  # Timestamp of the result, in seconds


class Recognizer:
    """Hand landmarks detection on a live stream of camera frames."""

    model_url: ClassVar[str] = (
        "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
    )

    def __init__(self, config: RecognizerConfig, mirroring: bool = False) -> None:
        self.last_result: RecognizerResult | None = None
        self.config = config
        self.mirroring = mirroring

        self.check_model(config.model_path)

        self.landmarker: HandLandmarker | None = HandLandmarker.create_from_options(
            HandLandmarkerOptions(
                base_options=BaseOptions(
                    model_asset_path=config.model_path,
                    delegate=BaseOptions.Delegate.GPU if config.use_gpu else BaseOptions.Delegate.CPU,
                ),
                running_mode=RunningMode.LIVE_STREAM,
                num_hands=config.num_hands,
                min_hand_detection_confidence=config.min_hand_detection_confidence,
                min_hand_presence_confidence=config.min_hand_presence_confidence,
                min_tracking_confidence=config.min_tracking_confidence,
                result_callback=self.save_result,
            )
        )

    def check_model(self, model_path: str) -> None:
        # Check if model file exists
        if not os.path.exists(model_path):
            logger.info(f"Model file '{model_path}' not found. Downloading...")
            try:
                urllib.request.urlretrieve(self.model_url, model_path)
                logger.info(f"Successfully downloaded model to '{model_path}'")
            except Exception as exc:
                logger.error(f"Failed to download model: {exc}")
                raise RuntimeError(f"Could not download model from {self.model_url}: {exc}") from exc

    @staticmethod
    def convert_image_from_opencv(frame: OpenCVImage) -> mp.Image:
        # Convert frame to RGB (opencv BGR not supported by MediaPipe)
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

    def recognize_image(self, image: mp.Image, timestamp: float) -> None:
        if self.landmarker is None:
            raise RuntimeError("Recognizer is closed")
        self.landmarker.detect_async(image, int(timestamp * 1000))  # Convert seconds to milliseconds

    def save_result(self, result: HandLandmarkerResult, input_image: mp.Image, timestamp_ms: int) -> None:
        """Save the latest hand landmarks result."""
        timestamp = timestamp_ms / 1000
        hands = []
        for hand_index, hand_landmarks in enumerate(result.hand_landmarks):
            if hand_index >= len(result.handedness) or not result.handedness[hand_index]:
                continue
            category = result.handedness[hand_index][0]
            hands.append(
                LandmarkFrame(
                    landmarks=[Landmark.from_mediapipe(landmark, self.mirroring) for landmark in hand_landmarks],
                    handedness=Handedness.from_data(category.category_name),
                    timestamp=timestamp,
                    confidence=category.score,
                )
            )
        self.last_result = RecognizerResult(hands=hands, timestamp=timestamp)

    def close(self) -> None:
        """Close the recognizer and release resources."""
        if self.landmarker:
            self.landmarker.close()
            self.landmarker = None

    def __enter__(self) -> Recognizer:
        """Enter the context manager."""
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object) -> None:
        """Exit the context manager and clean up resources."""
        self.close()

    def handle_frames_from_opencv(
        self, frames: Iterator[OpenCVImage]
    ) -> Iterator[tuple[OpenCVImage, RecognizerResult]]:
        """Feed frames to the model and yield each frame having a new result."""
        start_time = time.perf_counter()
        last_recognized_timestamp: float = -1

        for frame in frames:
            elapsed_time = time.perf_counter() - start_time
            self.recognize_image(self.convert_image_from_opencv(frame), elapsed_time)

            if self.last_result is None:
                continue
            if self.last_result.timestamp == last_recognized_timestamp:
                continue
            last_recognized_timestamp = self.last_result.timestamp

            yield frame, self.last_result

    def handle_opencv_capture(self, cap: cv2.VideoCapture) -> Iterator[tuple[OpenCVImage, RecognizerResult]]:
        """Read frames from an OpenCV VideoCapture object."""

        def frames_provider() -> Iterator[OpenCVImage]:
            while True:
                ret, frame = cap.read()
                if not ret:
                    break
                yield frame

        return self.handle_frames_from_opencv(frames_provider())
