#!/usr/bin/env python3

"""Command line interface: run the recognition loop and edit the keybinding profiles."""


from .common import app
from .profiles import add_binding_cmd  # noqa: F401
from .run import run_gestures_cmd  # noqa: F401


def main() -> None:
    """Entry point for the application."""
    app()


if __name__ == "__main__":
    main()
