from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Gestures(str, Enum):
    FIST = "fist"
    OPEN_PALM = "open_palm"
    POINTING = "pointing"
    PEACE_SIGN = "peace_sign"
    THUMBS_UP = "thumbs_up"
    THUMBS_DOWN = "thumbs_down"
    OK_SIGN = "ok_sign"
    ROCK_ON = "rock_on"

    def __str__(self) -> str:
        return self.value


class GestureInfo(NamedTuple):
    name: str
    icon: str
    description: str


GESTURES_INFO: dict[Gestures, GestureInfo] = {
    Gestures.FIST: GestureInfo("Fist", "✊", "Closed fist"),
    Gestures.OPEN_PALM: GestureInfo("Open Palm", "✋", "Open hand, all fingers extended"),
    Gestures.POINTING: GestureInfo("Pointing", "👆", "Index finger extended"),
    Gestures.PEACE_SIGN: GestureInfo("Peace Sign", "✌️", "Index and middle finger extended"),
    Gestures.THUMBS_UP: GestureInfo("Thumbs Up", "👍", "Thumb pointing up"),
    Gestures.THUMBS_DOWN: GestureInfo("Thumbs Down", "👎", "Thumb pointing down"),
    Gestures.OK_SIGN: GestureInfo("OK Sign", "👌", "Thumb and index finger circle"),
    Gestures.ROCK_ON: GestureInfo("Rock On", "🤘", "Thumb, index and pinky extended"),
}


def gesture_label(gesture: Gestures | None) -> str:
    """Human readable name of a gesture, `None` meaning no gesture."""
    if gesture is None:
        return "None"
    return GESTURES_INFO[gesture].name
