from __future__ import annotations

from enum import Enum


class Handedness(str, Enum):
    """Handedness enum for MediaPipe."""

    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_data(cls, handedness_str: str) -> Handedness:
        """Convert MediaPipe handedness string to Handedness enum."""
        return cls(handedness_str.strip().lower())

    def __str__(self) -> str:
        """Return the string representation of the handedness."""
        return self.value


class HandConstraint(str, Enum):
    """Which hand a keybinding accepts."""

    LEFT = "left"
    RIGHT = "right"
    ANY = "any"

    def accepts(self, handedness: Handedness | None) -> bool:
        """Check if a hand with the given handedness satisfies this constraint.

        An unknown handedness (no hand in view) only satisfies `ANY`.
        """
        if self is HandConstraint.ANY:
            return True
        return handedness is not None and handedness.value == self.value

    def __str__(self) -> str:
        return self.value
