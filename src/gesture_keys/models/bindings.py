from __future__ import annotations

from typing import NamedTuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..gestures import Gestures
from .utils import HandConstraint

KEYS_SEPARATOR = "+"

DEFAULT_PROFILES: tuple[str, ...] = ("Gaming", "Productivity", "Custom")


class KeyCombo(NamedTuple):
    """Modifier keys, in press order, followed by the main key."""

    modifiers: tuple[str, ...]
    key: str

    @classmethod
    def parse(cls, keys: str) -> KeyCombo:
        """Parse a combo like `ctrl+shift+c`: every token but the last is a modifier."""
        tokens = [token.strip().lower() for token in keys.split(KEYS_SEPARATOR)]
        if not tokens or not all(tokens):
            raise ValueError(f"Invalid key combination: {keys!r}")
        return cls(modifiers=tuple(tokens[:-1]), key=tokens[-1])

    def __str__(self) -> str:
        return KEYS_SEPARATOR.join((*self.modifiers, self.key))


def new_binding_id() -> str:
    return uuid4().hex[:12]


class Keybinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_binding_id, description="Unique identifier of the binding")
    gesture: Gestures = Field(description="Gesture triggering the binding")
    keys: str = Field(description="Key combination, modifiers first, joined with '+' (e.g. 'ctrl+c')")
    hand: HandConstraint = Field(HandConstraint.ANY, description="Hand that must perform the gesture")
    enabled: bool = Field(True, description="Disabled bindings are never resolved")
    description: str = Field("", description="Free text shown to the user")

    @field_validator("keys")
    @classmethod
    def normalize_keys(cls, value: str) -> str:
        return str(KeyCombo.parse(value))

    @property
    def combo(self) -> KeyCombo:
        return KeyCombo.parse(self.keys)

    @property
    def label(self) -> str:
        """Short text describing the binding, for logs and status lines."""
        label = f"{self.gesture.value} ({self.hand.value}) -> {self.keys}"
        if self.description:
            label += f" [{self.description}]"
        return label


class Profiles(BaseModel):
    active: str = Field(DEFAULT_PROFILES[0], description="Name of the active profile")
    profiles: dict[str, list[Keybinding]] = Field(
        default_factory=lambda: {name: [] for name in DEFAULT_PROFILES},
        description="Ordered keybindings of each profile, first match wins",
    )
