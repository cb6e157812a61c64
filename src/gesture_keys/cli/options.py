"""Shared CLI option definitions."""

from __future__ import annotations

import typer

from .common import DEFAULT_USER_CONFIG_PATH

config = typer.Option(None, "--config", "-c", help=f"Path to config file. Default: {DEFAULT_USER_CONFIG_PATH}")

profile = typer.Option(None, "--profile", "-p", help="Profile to edit. Default: the active profile")

verbose = typer.Option(False, "--verbose", "-v", help="Show debug logs")
