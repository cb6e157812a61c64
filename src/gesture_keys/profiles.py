"""Editing of keybinding profiles, notifying the active binding set on each change."""

from __future__ import annotations

import logging
from threading import RLock

from .events import Signal
from .models.bindings import DEFAULT_PROFILES, Keybinding, Profiles

logger = logging.getLogger("gesture_keys.profiles")

BindingsSnapshot = tuple[Keybinding, ...]


class ProfileStore:
    """Holds the profiles and the name of the active one.

    Each change builds a new list for the modified profile and swaps it in, then emits the new
    active binding set on `changed` if it differs from the previous one.
    """

    def __init__(self, profiles: Profiles | None = None) -> None:
        self._lock = RLock()
        self._profiles: dict[str, list[Keybinding]] = {}
        self._active = DEFAULT_PROFILES[0]
        self.changed: Signal[BindingsSnapshot] = Signal("bindings_changed")
        self.load(profiles or Profiles())

    def load(self, profiles: Profiles) -> None:
        """Replace all profiles, e.g. after reading them from the configuration."""
        with self._lock:
            previous = self.active_bindings
            loaded = {name: list(bindings) for name, bindings in profiles.profiles.items()}
            for name in DEFAULT_PROFILES:
                loaded.setdefault(name, [])
            self._profiles = loaded
            self._active = profiles.active if profiles.active in loaded else DEFAULT_PROFILES[0]
            self._notify_if_changed(previous)

    def dump(self) -> Profiles:
        with self._lock:
            return Profiles(active=self._active, profiles={name: list(b) for name, b in self._profiles.items()})

    @property
    def active_profile(self) -> str:
        return self._active

    @property
    def profile_names(self) -> list[str]:
        return list(self._profiles)

    @property
    def active_bindings(self) -> BindingsSnapshot:
        return tuple(self._profiles.get(self._active, ()))

    def bindings(self, profile: str | None = None) -> BindingsSnapshot:
        with self._lock:
            return tuple(self._profiles[self._profile_name(profile)])

    def search(self, query: str) -> list[str]:
        """Profile names containing the query, case insensitive."""
        query = query.lower()
        return [name for name in self._profiles if query in name.lower()]

    def set_active_profile(self, name: str) -> None:
        with self._lock:
            if name not in self._profiles:
                raise KeyError(f"Unknown profile {name!r}")
            previous = self.active_bindings
            self._active = name
            logger.info(f"Active profile is now {name!r}")
            self._notify_if_changed(previous)

    def add_profile(self, name: str) -> None:
        name = name.strip()
        if not name:
            raise ValueError("Profile name cannot be empty")
        with self._lock:
            if name in self._profiles:
                raise ValueError(f"Profile {name!r} already exists")
            self._profiles = {**self._profiles, name: []}

    def delete_profile(self, name: str) -> None:
        """Delete a profile. Default profiles cannot be deleted.

        Deleting the active profile activates the first default one.
        """
        if name in DEFAULT_PROFILES:
            raise ValueError(f"Default profile {name!r} cannot be deleted")
        with self._lock:
            if name not in self._profiles:
                raise KeyError(f"Unknown profile {name!r}")
            previous = self.active_bindings
            self._profiles = {key: value for key, value in self._profiles.items() if key != name}
            if self._active == name:
                self._active = DEFAULT_PROFILES[0]
            self._notify_if_changed(previous)

    def add_binding(self, binding: Keybinding, profile: str | None = None) -> Keybinding:
        with self._lock:
            name = self._profile_name(profile)
            if any(existing.id == binding.id for existing in self._profiles[name]):
                raise ValueError(f"Binding {binding.id!r} already exists in profile {name!r}")
            self._replace_profile(name, [*self._profiles[name], binding])
        return binding

    def update_binding(self, binding: Keybinding, profile: str | None = None) -> Keybinding:
        with self._lock:
            name = self._profile_name(profile)
            self._find(name, binding.id)
            self._replace_profile(name, [binding if b.id == binding.id else b for b in self._profiles[name]])
        return binding

    def delete_binding(self, binding_id: str, profile: str | None = None) -> Keybinding:
        with self._lock:
            name = self._profile_name(profile)
            binding = self._find(name, binding_id)
            self._replace_profile(name, [b for b in self._profiles[name] if b.id != binding_id])
        return binding

    def toggle_binding(self, binding_id: str, profile: str | None = None) -> Keybinding:
        with self._lock:
            name = self._profile_name(profile)
            binding = self._find(name, binding_id)
            toggled = binding.model_copy(update={"enabled": not binding.enabled})
            self._replace_profile(name, [toggled if b.id == binding_id else b for b in self._profiles[name]])
        return toggled

    def _profile_name(self, profile: str | None) -> str:
        name = self._active if profile is None else profile
        if name not in self._profiles:
            raise KeyError(f"Unknown profile {name!r}")
        return name

    def _find(self, profile: str, binding_id: str) -> Keybinding:
        for binding in self._profiles[profile]:
            if binding.id == binding_id:
                return binding
        raise KeyError(f"Unknown binding {binding_id!r} in profile {profile!r}")

    def _replace_profile(self, name: str, bindings: list[Keybinding]) -> None:
        previous = self.active_bindings
        self._profiles = {**self._profiles, name: bindings}
        self._notify_if_changed(previous)

    def _notify_if_changed(self, previous: BindingsSnapshot) -> None:
        current = self.active_bindings
        if current != previous:
            self.changed.emit(current)
