"""Processing cycle: landmark frames to gesture samples, stable events and key actuation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from time import time

from .actuation.controller import ActuationController, ActuationStateChange
from .actuation.keys import KeyActuator
from .actuation.timer import RepeatTimer, TimerFactory
from .classifier import GestureClassifier, GestureSample
from .config import Config
from .events import Signal
from .models.bindings import Keybinding
from .models.landmarks import InvalidLandmarkSet, LandmarkFrame
from .profiles import ProfileStore
from .resolver import BindingResolver
from .stabilizer import StableGestureEvent, TemporalStabilizer

logger = logging.getLogger("gesture_keys.pipeline")


def select_focal_sample(samples: Sequence[GestureSample], timestamp: float) -> GestureSample:
    """Pick the one sample of a frame that feeds the stabilizer.

    The first hand showing a gesture wins, then the first hand, and without any hand an empty
    sample is used so that removing the hand from the camera releases the gesture.
    """
    for sample in samples:
        if sample.gesture is not None:
            return sample
    if samples:
        return samples[0]
    return GestureSample.empty(None, timestamp)


class GesturePipeline:
    """Runs one classification cycle per camera frame.

    Only one cycle runs at a time: a frame arriving while the previous one is still being
    processed is dropped, not queued.
    """

    def __init__(
        self,
        config: Config,
        actuator: KeyActuator,
        resolver: BindingResolver | None = None,
        timer_factory: TimerFactory = RepeatTimer,
    ) -> None:
        self.config = config
        self.classifier = GestureClassifier(config.classifier)
        self.stabilizer = TemporalStabilizer(
            history_size=config.stabilizer.history_size,
            consensus_size=config.stabilizer.consensus_size,
        )
        self.resolver = resolver or BindingResolver()
        self.controller = ActuationController(
            self.resolver,
            actuator,
            interval=config.actuation.repeat_interval,
            timer_factory=timer_factory,
            stop_timeout=config.actuation.stop_timeout,
        )

        self.samples: Signal[list[GestureSample]] = Signal("samples")
        self.stable_events: Signal[StableGestureEvent] = Signal("stable_events")

        self.processed_frames = 0
        self.dropped_frames = 0
        self.invalid_frames = 0

        self._in_flight = threading.Lock()
        self._disconnect_store: Callable[[], None] | None = None

    @property
    def state_changes(self) -> Signal[ActuationStateChange]:
        return self.controller.state_changes

    def process(self, frames: Iterable[LandmarkFrame], timestamp: float | None = None) -> list[GestureSample] | None:
        """Classify the hands of one camera frame and update the stable gesture.

        Returns the samples of the valid hands, or None if the frame was dropped because another
        one is still being processed.
        """
        if not self._in_flight.acquire(blocking=False):
            self.dropped_frames += 1
            logger.debug("Frame dropped, previous one still in progress")
            return None
        try:
            return self._process(list(frames), time() if timestamp is None else timestamp)
        finally:
            self._in_flight.release()

    def _process(self, frames: list[LandmarkFrame], timestamp: float) -> list[GestureSample]:
        self.processed_frames += 1
        samples: list[GestureSample] = []
        for frame in frames:
            if frame.confidence < self.config.pipeline.min_hand_confidence:
                logger.debug(f"Ignoring {frame.handedness} hand with confidence {frame.confidence:.2f}")
                continue
            try:
                samples.append(self.classifier.classify_frame(frame))
            except InvalidLandmarkSet as exc:
                self.invalid_frames += 1
                logger.warning(f"Discarding {frame.handedness} hand: {exc}")

        self.samples.emit(samples)

        event = self.stabilizer.update(select_focal_sample(samples, timestamp))
        if event is not None:
            logger.info(f"Stable gesture: {event.gesture or 'none'} ({event.handedness or 'no hand'})")
            self.stable_events.emit(event)
            self.controller.handle_event(event)

        return samples

    def apply_bindings(self, bindings: Iterable[Keybinding]) -> None:
        """Use a new active binding set, stopping the key repeat if its binding is gone."""
        self.controller.apply_bindings(bindings)

    def attach(self, store: ProfileStore) -> None:
        """Follow the active bindings of a profile store."""
        self.detach()
        self._disconnect_store = store.changed.connect(self.apply_bindings)
        self.apply_bindings(store.active_bindings)

    def detach(self) -> None:
        if self._disconnect_store is not None:
            self._disconnect_store()
            self._disconnect_store = None

    def close(self) -> None:
        """Stop any key repeat and forget the stable gesture."""
        self.detach()
        self.controller.stop("pipeline closed")
        self.stabilizer.reset()
