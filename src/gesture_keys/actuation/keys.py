from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ..models.bindings import KeyCombo

logger = logging.getLogger("gesture_keys.actuation")


class ActuationFailure(RuntimeError):
    """Raised when the operating system refused or failed a key action."""


@runtime_checkable
class KeyActuator(Protocol):
    """Low level key actions. Each call may raise `ActuationFailure`."""

    def press_key(self, key: str) -> None:
        """Press a key down, without releasing it."""
        ...

    def release_key(self, key: str) -> None:
        """Release a pressed key."""
        ...

    def tap_key(self, key: str) -> None:
        """Press and release a key."""
        ...


def _attempt(action: Callable[[str], None], key: str, what: str) -> bool:
    try:
        action(key)
    except ActuationFailure as exc:
        logger.warning(f"Failed to {what} key {key!r}: {exc}")
        return False
    except Exception:
        # Other errors are actuator bugs, logged with their traceback and counted as failures
        logger.exception(f"Unexpected error while trying to {what} key {key!r}")
        return False
    return True


def release_modifiers(actuator: KeyActuator, combo: KeyCombo) -> int:
    """Release the modifiers of a combo in reverse order. Return the number of failed calls."""
    return sum(not _attempt(actuator.release_key, modifier, "release") for modifier in reversed(combo.modifiers))


def pulse(actuator: KeyActuator, combo: KeyCombo) -> int:
    """Send one key repeat pulse and return the number of failed calls.

    Modifiers are pressed in order, the main key is tapped, then modifiers are released in
    reverse order. A failed call does not prevent the next ones, so modifiers are always released.
    """
    failures = sum(not _attempt(actuator.press_key, modifier, "press") for modifier in combo.modifiers)
    failures += not _attempt(actuator.tap_key, combo.key, "tap")
    failures += release_modifiers(actuator, combo)
    return failures
