from .bindings import DEFAULT_PROFILES, KeyCombo, Keybinding, Profiles
from .fingers import FingerIndex, FingerState, extract_finger_state
from .landmarks import HandLandmark, InvalidLandmarkSet, Landmark, LandmarkFrame
from .utils import HandConstraint, Handedness

__all__ = [
    "DEFAULT_PROFILES",
    "KeyCombo",
    "Keybinding",
    "Profiles",
    "FingerIndex",
    "FingerState",
    "extract_finger_state",
    "HandLandmark",
    "InvalidLandmarkSet",
    "Landmark",
    "LandmarkFrame",
    "HandConstraint",
    "Handedness",
]
