from .controller import ActuationController, ActuationSession, ActuationState, ActuationStateChange
from .keys import ActuationFailure, KeyActuator, pulse, release_modifiers
from .timer import RepeatHandle, RepeatTimer, TimerFactory

__all__ = [
    "ActuationController",
    "ActuationSession",
    "ActuationState",
    "ActuationStateChange",
    "ActuationFailure",
    "KeyActuator",
    "pulse",
    "release_modifiers",
    "RepeatHandle",
    "RepeatTimer",
    "TimerFactory",
]
