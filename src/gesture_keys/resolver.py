from __future__ import annotations

from collections.abc import Iterable

from .gestures import Gestures
from .models.bindings import Keybinding
from .models.utils import Handedness
from .stabilizer import StableGestureEvent


class BindingResolver:
    """Finds the keybinding of a stable gesture in the active binding set.

    The binding set is an immutable snapshot that is swapped as a whole, so a lookup never sees
    a partially updated set.
    """

    def __init__(self, bindings: Iterable[Keybinding] = ()) -> None:
        self._bindings: tuple[Keybinding, ...] = tuple(bindings)

    @property
    def bindings(self) -> tuple[Keybinding, ...]:
        return self._bindings

    def replace(self, bindings: Iterable[Keybinding]) -> tuple[Keybinding, ...]:
        """Replace the binding set, returning the previous one."""
        previous, self._bindings = self._bindings, tuple(bindings)
        return previous

    def resolve(self, gesture: Gestures | None, handedness: Handedness | None) -> Keybinding | None:
        """Return the first enabled binding for this gesture accepting this hand, in list order."""
        if gesture is None:
            return None
        for binding in self._bindings:
            if binding.enabled and binding.gesture == gesture and binding.hand.accepts(handedness):
                return binding
        return None

    def resolve_event(self, event: StableGestureEvent) -> Keybinding | None:
        return self.resolve(event.gesture, event.handedness)
