"""Hold a hand gesture in front of a camera to repeat the keys bound to it."""

from .actuation import ActuationController, ActuationState, KeyActuator, RepeatTimer
from .classifier import GestureClassifier, GestureSample
from .config import Config
from .events import Signal
from .gestures import Gestures
from .models import FingerState, HandConstraint, Handedness, Keybinding, KeyCombo, LandmarkFrame
from .pipeline import GesturePipeline
from .profiles import ProfileStore
from .resolver import BindingResolver
from .stabilizer import StableGestureEvent, TemporalStabilizer

__all__ = [
    # Core classes
    "GesturePipeline",
    "GestureClassifier",
    "GestureSample",
    "TemporalStabilizer",
    "StableGestureEvent",
    "BindingResolver",
    "ActuationController",
    "ActuationState",
    "KeyActuator",
    "RepeatTimer",
    "ProfileStore",
    "Signal",
    # Models
    "FingerState",
    "HandConstraint",
    "Handedness",
    "Keybinding",
    "KeyCombo",
    "LandmarkFrame",
    # Gesture models
    "Gestures",
    # Configuration
    "Config",
]
