from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger("gesture_keys.actuation.timer")


class RepeatHandle(Protocol):
    """A started periodic task that can be cancelled."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...

    def join(self, timeout: float | None = None) -> bool: ...


# (interval, callback, on_stop) -> handle
TimerFactory = Callable[[float, Callable[[], None], Callable[[], None]], RepeatHandle]


class RepeatTimer:
    """Calls `callback` right away when started, then every `interval` seconds until cancelled.

    `on_stop` is called once on the timer thread after the last call of `callback`.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        on_stop: Callable[[], None] | None = None,
        name: str | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        self.interval = interval
        self.callback = callback
        self.on_stop = on_stop
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name or "gesture-keys-repeat", daemon=True)

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.callback()
            except Exception:
                logger.exception("Repeat callback failed")
            if self._stop_event.wait(self.interval):
                break
        if self.on_stop is not None:
            try:
                self.on_stop()
            except Exception:
                logger.exception("Repeat stop callback failed")

    def cancel(self) -> None:
        """Stop the timer. No new call starts after this returns, one in progress may still finish."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread to end. Return False if it is still running after `timeout`.

        Called from the timer thread itself, e.g. by a callback that cancels its own timer, it
        cannot wait: it returns whether the timer is cancelled, the thread ending right after.
        """
        if threading.current_thread() is self._thread:
            return self.cancelled
        if self._thread.is_alive():
            self._thread.join(timeout)
        return not self._thread.is_alive()
