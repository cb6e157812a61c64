from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from ..actuation.controller import ActuationStateChange
from ..config import Config
from ..gestures import gesture_label
from ..pipeline import GesturePipeline
from ..profiles import ProfileStore
from ..stabilizer import StableGestureEvent
from . import options
from .common import app, setup_logging


def print_stable_event(event: StableGestureEvent) -> None:
    gesture = gesture_label(event.gesture)
    hand = event.handedness.value if event.handedness else "no hand"
    print(f"Gesture: {gesture} ({hand})")


def print_state_change(change: ActuationStateChange) -> None:
    print(f"Actuation {change.description}")


def print_stable_event_json(event: StableGestureEvent) -> None:
    print(json.dumps({"type": "gesture", **event.to_dict()}), flush=True)


def print_state_change_json(change: ActuationStateChange) -> None:
    print(json.dumps({"type": "actuation", **change.to_dict()}), flush=True)


def run_gestures(config: Config, camera: int, mirror: bool, as_json: bool = False) -> None:
    """Run the gesture pipeline on a camera until it stops or the user interrupts it.

    With `as_json`, events are printed as JSON lines instead of text.
    """
    # Imported here so that configuration commands work without a display or a camera stack
    import cv2  # type: ignore[import-untyped]

    from ..actuation.desktop import PyAutoGUIKeyActuator
    from ..recognizer import Recognizer

    store = ProfileStore(config.profiles)
    pipeline = GesturePipeline(config, PyAutoGUIKeyActuator())
    pipeline.attach(store)
    pipeline.stable_events.connect(print_stable_event_json if as_json else print_stable_event)
    pipeline.state_changes.connect(print_state_change_json if as_json else print_state_change)

    print(f"Active profile: {store.active_profile} ({len(store.active_bindings)} bindings)")

    cap = cv2.VideoCapture(camera)
    if not cap.isOpened():
        print(f"Error: Could not open camera {camera}", file=sys.stderr)
        raise typer.Exit(1)

    print("Loading hand landmarker model...")
    try:
        with Recognizer(config.recognizer, mirroring=mirror) as recognizer:
            print("Hand landmarker loaded successfully, press Ctrl+C to quit")
            for _frame, result in recognizer.handle_opencv_capture(cap):
                pipeline.process(result.hands, result.timestamp)
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        pipeline.close()
        cap.release()


@app.command("run")
def run_gestures_cmd(
    camera: int | None = typer.Option(None, "--camera", "--cam", help="Index of the camera to open"),
    mirror: bool | None = typer.Option(None, "--mirror/--no-mirror", help="Mirror the landmarks horizontally"),
    model: str | None = typer.Option(None, "--model", help="Path of the hand landmarker model"),
    as_json: bool = typer.Option(False, "--json", help="Print gesture and actuation events as JSON lines"),
    config_path: Path | None = options.config,
    verbose: bool = options.verbose,
) -> None:
    """Run gesture recognition on a camera and repeat the keys bound to the held gesture."""
    setup_logging(verbose)
    config = Config.load(config_path)

    # Use config values as defaults, but CLI options take precedence
    final_camera = camera if camera is not None else config.cli.camera
    final_mirror = mirror if mirror is not None else config.cli.mirror
    if model is not None:
        config.recognizer.model_path = model

    run_gestures(config, camera=final_camera, mirror=final_mirror, as_json=as_json)
