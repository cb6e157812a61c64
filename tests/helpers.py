"""
Builders of synthetic hands and fakes of the actuation side, shared by the test modules.
"""
from __future__ import annotations

from collections.abc import Callable

from gesture_keys.actuation.keys import ActuationFailure
from gesture_keys.gestures import Gestures
from gesture_keys.models.landmarks import HandLandmark, Landmark, LandmarkFrame
from gesture_keys.models.utils import Handedness

# x position of each vertical finger, so that the tips are apart from each other
FINGERS_X = {"index": 0.45, "middle": 0.5, "ring": 0.55, "pinky": 0.6}
FINGERS_JOINTS = {
    "index": (HandLandmark.INDEX_FINGER_MCP, HandLandmark.INDEX_FINGER_PIP,
              HandLandmark.INDEX_FINGER_DIP, HandLandmark.INDEX_FINGER_TIP),
    "middle": (HandLandmark.MIDDLE_FINGER_MCP, HandLandmark.MIDDLE_FINGER_PIP,
               HandLandmark.MIDDLE_FINGER_DIP, HandLandmark.MIDDLE_FINGER_TIP),
    "ring": (HandLandmark.RING_FINGER_MCP, HandLandmark.RING_FINGER_PIP,
             HandLandmark.RING_FINGER_DIP, HandLandmark.RING_FINGER_TIP),
    "pinky": (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP,
              HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
}


def make_landmarks(
    thumb: bool = False,
    index: bool = False,
    middle: bool = False,
    ring: bool = False,
    pinky: bool = False,
    thumb_tip: tuple[float, float] | None = None,
    index_tip: tuple[float, float] | None = None,
    wrist_y: float = 0.9,
) -> list[Landmark]:
    """Build 21 landmarks for a hand with the given fingers extended.

    Vertical fingers have their PIP at y=0.5 and their tip at y=0.3 (extended) or 0.7 (flexed).
    The thumb MCP is at x=0.5 and its tip at x=0.6 (extended) or 0.4 (flexed), above the wrist.
    """
    points = [Landmark(0.5, 0.5)] * 21
    points[HandLandmark.WRIST] = Landmark(0.5, wrist_y)
    points[HandLandmark.THUMB_MCP] = Landmark(0.5, 0.5)
    points[HandLandmark.THUMB_TIP] = Landmark(*(thumb_tip or (0.6 if thumb else 0.4, 0.4)))

    extended = {"index": index, "middle": middle, "ring": ring, "pinky": pinky}
    for finger, (mcp, pip, dip, tip) in FINGERS_JOINTS.items():
        x = FINGERS_X[finger]
        points[mcp] = Landmark(x, 0.6)
        points[pip] = Landmark(x, 0.5)
        points[dip] = Landmark(x, 0.4 if extended[finger] else 0.6)
        points[tip] = Landmark(x, 0.3 if extended[finger] else 0.7)

    if index_tip is not None:
        points[HandLandmark.INDEX_FINGER_TIP] = Landmark(*index_tip)
    return points


GESTURE_LANDMARKS: dict[Gestures, Callable[[], list[Landmark]]] = {
    Gestures.FIST: lambda: make_landmarks(),
    Gestures.OPEN_PALM: lambda: make_landmarks(thumb=True, index=True, middle=True, ring=True, pinky=True),
    Gestures.POINTING: lambda: make_landmarks(index=True),
    Gestures.PEACE_SIGN: lambda: make_landmarks(index=True, middle=True),
    Gestures.THUMBS_UP: lambda: make_landmarks(thumb=True),
    Gestures.THUMBS_DOWN: lambda: make_landmarks(thumb=True, thumb_tip=(0.6, 0.95)),
    Gestures.OK_SIGN: lambda: make_landmarks(
        middle=True, ring=True, pinky=True, thumb_tip=(0.47, 0.62), index_tip=(0.45, 0.6)
    ),
    Gestures.ROCK_ON: lambda: make_landmarks(thumb=True, index=True, pinky=True),
}


def landmarks_for(gesture: Gestures | None) -> list[Landmark]:
    """Landmarks of a hand doing the gesture, or of a hand doing no known gesture."""
    if gesture is None:
        # middle and ring only: matches no check
        return make_landmarks(middle=True, ring=True)
    return GESTURE_LANDMARKS[gesture]()


def make_frame(
    gesture: Gestures | None,
    handedness: Handedness = Handedness.RIGHT,
    timestamp: float = 0.0,
    confidence: float = 1.0,
) -> LandmarkFrame:
    return LandmarkFrame(
        landmarks=landmarks_for(gesture),
        handedness=handedness,
        timestamp=timestamp,
        confidence=confidence,
    )


class FakeActuator:
    """Records key actions, failing the ones listed in `failing`."""

    def __init__(self, failing: set[tuple[str, str]] | None = None):
        self.calls: list[tuple[str, str]] = []
        self.failing = failing or set()

    def _act(self, action: str, key: str) -> None:
        self.calls.append((action, key))
        if (action, key) in self.failing:
            raise ActuationFailure(f"{action} {key} refused")

    def press_key(self, key: str) -> None:
        self._act("press", key)

    def release_key(self, key: str) -> None:
        self._act("release", key)

    def tap_key(self, key: str) -> None:
        self._act("tap", key)


class FakeTimer:
    """Repeat handle that only ticks when the test calls `fire`.

    Joining a cancelled timer runs `on_stop` once, as the end of the real timer thread would.
    """

    def __init__(self, interval: float, callback: Callable[[], None], on_stop: Callable[[], None] | None = None):
        self.interval = interval
        self.callback = callback
        self.on_stop = on_stop
        self.started = 0
        self.cancelled = 0
        self.joined = 0
        self.stopped = False

    def start(self) -> None:
        self.started += 1

    def cancel(self) -> None:
        self.cancelled += 1

    def join(self, timeout: float | None = None) -> bool:
        self.joined += 1
        if self.cancelled and not self.stopped:
            self.stopped = True
            if self.on_stop is not None:
                self.on_stop()
        return True

    def fire(self, times: int = 1) -> None:
        """Run the callback as the timer thread would, even after a cancel."""
        for _ in range(times):
            self.callback()


class FakeTimerFactory:
    """Timer factory keeping every created timer, in creation order."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(
        self, interval: float, callback: Callable[[], None], on_stop: Callable[[], None] | None = None
    ) -> FakeTimer:
        timer = FakeTimer(interval, callback, on_stop)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]
