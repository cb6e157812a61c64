from __future__ import annotations

import pyautogui

from .keys import ActuationFailure


class PyAutoGUIKeyActuator:
    """Key actions sent to the desktop session with pyautogui."""

    def __init__(self) -> None:
        # The key repeat timer sets the pace, no pause after each call
        pyautogui.PAUSE = 0

    def press_key(self, key: str) -> None:
        try:
            pyautogui.keyDown(key, _pause=False)
        except Exception as exc:
            raise ActuationFailure(f"keyDown({key!r}) failed: {exc}") from exc

    def release_key(self, key: str) -> None:
        try:
            pyautogui.keyUp(key, _pause=False)
        except Exception as exc:
            raise ActuationFailure(f"keyUp({key!r}) failed: {exc}") from exc

    def tap_key(self, key: str) -> None:
        try:
            pyautogui.press(key, _pause=False)
        except Exception as exc:
            raise ActuationFailure(f"press({key!r}) failed: {exc}") from exc
