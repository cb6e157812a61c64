"""Temporal stabilization of per-frame gesture samples into edge-triggered events."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from .classifier import GestureSample
from .gestures import Gestures
from .models.utils import Handedness

logger = logging.getLogger("gesture_keys.stabilizer")

HISTORY_SIZE = 5  # Max number of samples kept, older ones are evicted first
CONSENSUS_SIZE = 3  # Number of most recent samples that must agree to confirm a gesture


@dataclass(frozen=True)
class StableGestureEvent:
    """A confirmed change of the stable gesture. `gesture` is None when the gesture was released."""

    gesture: Gestures | None
    handedness: Handedness | None
    timestamp: float

    @property
    def is_release(self) -> bool:
        return self.gesture is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "gesture": self.gesture.value if self.gesture else None,
            "handedness": self.handedness.value if self.handedness else None,
            "timestamp": self.timestamp,
        }


class TemporalStabilizer:
    """Confirms a gesture when the most recent samples all agree on its type.

    Only the gesture type counts for the consensus, not the handedness. "No gesture" takes part
    in the consensus like any gesture, so enough consecutive empty samples confirm a release.
    """

    def __init__(self, history_size: int = HISTORY_SIZE, consensus_size: int = CONSENSUS_SIZE) -> None:
        if consensus_size < 1:
            raise ValueError(f"Consensus size must be at least 1, got {consensus_size}")
        if history_size < consensus_size:
            raise ValueError(f"History size ({history_size}) cannot be smaller than consensus size ({consensus_size})")
        self.history_size = history_size
        self.consensus_size = consensus_size
        self.history: deque[GestureSample] = deque(maxlen=history_size)
        self._last_emitted: Gestures | None = None

    @property
    def current(self) -> Gestures | None:
        """The last confirmed gesture, None if released or never confirmed."""
        return self._last_emitted

    def reset(self) -> None:
        self.history.clear()
        self._last_emitted = None

    def update(self, sample: GestureSample) -> StableGestureEvent | None:
        """Add a sample and return an event if it confirms a different gesture than the last one."""
        self.history.append(sample)

        if len(self.history) < self.consensus_size:
            return None

        recent = list(self.history)[-self.consensus_size :]
        gesture = recent[-1].gesture
        if any(other.gesture != gesture for other in recent):
            return None

        if gesture == self._last_emitted:
            return None

        logger.debug(f"Stable gesture changed: {self._last_emitted} -> {gesture} ({sample.handedness})")
        self._last_emitted = gesture
        return StableGestureEvent(gesture=gesture, handedness=sample.handedness, timestamp=sample.timestamp)
