from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from ..config import Config
from ..profiles import ProfileStore

app = typer.Typer(help="Hold a hand gesture in front of the camera to repeat keys.")

DEFAULT_USER_CONFIG_PATH = Config.get_user_path()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Send the library logs to stderr."""
    logger = logging.getLogger("gesture_keys")
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    # Configure handler if logger doesn't have one
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False  # Don't propagate to root logger
    for handler in logger.handlers:
        handler.setLevel(level)


def fail(message: str) -> typer.Exit:
    """Print an error and return the exception to raise to exit the CLI."""
    print(f"Error: {message}", file=sys.stderr)
    return typer.Exit(1)


def open_store(config_path: Path | None) -> tuple[Config, ProfileStore]:
    config = Config.load(config_path)
    return config, ProfileStore(config.profiles)


def save_store(config: Config, store: ProfileStore, config_path: Path | None) -> None:
    config.profiles = store.dump()
    config.save(config_path)
