from __future__ import annotations

from pathlib import Path

import typer

from ..classifier import GestureClassifier
from ..config import Config
from ..gestures import GESTURES_INFO, Gestures
from ..models.bindings import Keybinding
from ..models.utils import HandConstraint
from . import options
from .common import app, fail, open_store, save_store

profiles_app = typer.Typer(help="Manage keybinding profiles.")
bindings_app = typer.Typer(help="Manage the keybindings of a profile.")
app.add_typer(profiles_app, name="profiles")
app.add_typer(bindings_app, name="bindings")


def format_binding(binding: Keybinding) -> str:
    status = "on " if binding.enabled else "off"
    line = f"  [{binding.id}] {status} {binding.gesture.value:<12} {binding.hand.value:<5} -> {binding.keys}"
    if binding.description:
        line += f"  # {binding.description}"
    return line


@app.command("gestures")
def list_gestures_cmd(config_path: Path | None = options.config) -> None:
    """List the gestures that can be bound, in detection priority order. Disabled ones come last."""
    config = Config.load(config_path)
    enabled = GestureClassifier(config.classifier).gestures
    disabled = [gesture for gesture in GESTURES_INFO if gesture not in enabled]
    for gesture in [*enabled, *disabled]:
        info = GESTURES_INFO[gesture]
        status = "" if gesture in enabled else " (disabled)"
        print(f"  {info.icon}  {gesture.value:<12} {info.name}: {info.description}{status}")


@profiles_app.command("list")
def list_profiles_cmd(
    search: str | None = typer.Option(None, "--search", "-s", help="Only show profiles containing this text"),
    config_path: Path | None = options.config,
) -> None:
    """List profiles, the active one marked with a star."""
    _config, store = open_store(config_path)
    names = store.search(search) if search else store.profile_names
    for name in names:
        marker = "*" if name == store.active_profile else " "
        print(f"{marker} {name} ({len(store.bindings(name))} bindings)")


@profiles_app.command("use")
def use_profile_cmd(
    name: str = typer.Argument(..., help="Profile to activate"),
    config_path: Path | None = options.config,
) -> None:
    """Make a profile the active one."""
    config, store = open_store(config_path)
    try:
        store.set_active_profile(name)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    save_store(config, store, config_path)


@profiles_app.command("add")
def add_profile_cmd(
    name: str = typer.Argument(..., help="Name of the new profile"),
    config_path: Path | None = options.config,
) -> None:
    """Create an empty profile."""
    config, store = open_store(config_path)
    try:
        store.add_profile(name)
    except ValueError as exc:
        raise fail(str(exc)) from exc
    save_store(config, store, config_path)


@profiles_app.command("remove")
def remove_profile_cmd(
    name: str = typer.Argument(..., help="Profile to delete"),
    config_path: Path | None = options.config,
) -> None:
    """Delete a profile and its bindings. Default profiles cannot be deleted."""
    config, store = open_store(config_path)
    try:
        store.delete_profile(name)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    except ValueError as exc:
        raise fail(str(exc)) from exc
    save_store(config, store, config_path)


@bindings_app.command("list")
def list_bindings_cmd(
    profile: str | None = options.profile,
    config_path: Path | None = options.config,
) -> None:
    """List the bindings of a profile, in resolution order."""
    _config, store = open_store(config_path)
    try:
        bindings = store.bindings(profile)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    print(f"{profile or store.active_profile}:")
    if not bindings:
        print("  No bindings")
    for binding in bindings:
        print(format_binding(binding))


@bindings_app.command("add")
def add_binding_cmd(
    gesture: Gestures = typer.Argument(..., help="Gesture triggering the keys"),
    keys: str = typer.Argument(..., help="Key combination, e.g. 'space' or 'ctrl+shift+tab'"),
    hand: HandConstraint = typer.Option(HandConstraint.ANY, "--hand", help="Hand that must do the gesture"),
    description: str = typer.Option("", "--description", "-d", help="Description of the binding"),
    disabled: bool = typer.Option(False, "--disabled", help="Create the binding disabled"),
    profile: str | None = options.profile,
    config_path: Path | None = options.config,
) -> None:
    """Bind a gesture to a key combination."""
    config, store = open_store(config_path)
    try:
        binding = Keybinding(gesture=gesture, keys=keys, hand=hand, description=description, enabled=not disabled)
        store.add_binding(binding, profile)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    except ValueError as exc:
        raise fail(str(exc)) from exc
    save_store(config, store, config_path)
    print(f"Added binding {binding.id}")


@bindings_app.command("update")
def update_binding_cmd(
    binding_id: str = typer.Argument(..., help="Identifier of the binding"),
    gesture: Gestures | None = typer.Option(None, "--gesture", help="New gesture"),
    keys: str | None = typer.Option(None, "--keys", help="New key combination"),
    hand: HandConstraint | None = typer.Option(None, "--hand", help="New hand constraint"),
    description: str | None = typer.Option(None, "--description", "-d", help="New description"),
    profile: str | None = options.profile,
    config_path: Path | None = options.config,
) -> None:
    """Change some fields of a binding."""
    config, store = open_store(config_path)
    changes = {
        field: value
        for field, value in (("gesture", gesture), ("keys", keys), ("hand", hand), ("description", description))
        if value is not None
    }
    try:
        current = next((b for b in store.bindings(profile) if b.id == binding_id), None)
        if current is None:
            raise fail(f"Unknown binding {binding_id!r}")
        # Validate the merged fields again, model_copy alone would skip the keys normalization
        store.update_binding(Keybinding.model_validate({**current.model_dump(), **changes}), profile)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    except ValueError as exc:
        raise fail(str(exc)) from exc
    save_store(config, store, config_path)


@bindings_app.command("remove")
def remove_binding_cmd(
    binding_id: str = typer.Argument(..., help="Identifier of the binding"),
    profile: str | None = options.profile,
    config_path: Path | None = options.config,
) -> None:
    """Delete a binding."""
    config, store = open_store(config_path)
    try:
        store.delete_binding(binding_id, profile)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    save_store(config, store, config_path)


@bindings_app.command("toggle")
def toggle_binding_cmd(
    binding_id: str = typer.Argument(..., help="Identifier of the binding"),
    profile: str | None = options.profile,
    config_path: Path | None = options.config,
) -> None:
    """Enable a disabled binding, or disable an enabled one."""
    config, store = open_store(config_path)
    try:
        binding = store.toggle_binding(binding_id, profile)
    except KeyError as exc:
        raise fail(str(exc.args[0])) from exc
    save_store(config, store, config_path)
    print(f"Binding {binding.id} is now {'enabled' if binding.enabled else 'disabled'}")
