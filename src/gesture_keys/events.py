from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

logger = logging.getLogger("gesture_keys.events")

T = TypeVar("T")

Listener = Callable[[T], None]


class Signal(Generic[T]):
    """Fire-and-forget notifications to a list of listeners.

    A failing listener is logged and never stops the emitter nor the other listeners.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener[T]] = []
        self._lock = Lock()

    def connect(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener and return a function removing it."""
        with self._lock:
            self._listeners.append(listener)

        def disconnect() -> None:
            self.disconnect(listener)

        return disconnect

    def disconnect(self, listener: Listener[T]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

    def emit(self, payload: T) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception(f"Listener {listener!r} of signal {self.name!r} failed")
