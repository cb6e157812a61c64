"""State machine repeating the keys of the binding of the currently held gesture."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..events import Signal
from ..gestures import Gestures
from ..models.bindings import Keybinding
from ..models.utils import Handedness
from ..resolver import BindingResolver
from ..stabilizer import StableGestureEvent
from .keys import KeyActuator, pulse, release_modifiers
from .timer import RepeatHandle, RepeatTimer, TimerFactory

logger = logging.getLogger("gesture_keys.actuation.controller")

REPEAT_INTERVAL = 0.1  # seconds between two key pulses
STOP_TIMEOUT = 0.5  # max seconds to wait for a cancelled repeat thread


class ActuationState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"

    def __str__(self) -> str:
        return self.value


@dataclass
class ActuationSession:
    gesture: Gestures
    handedness: Handedness | None
    binding: Keybinding
    timer: RepeatHandle | None = None
    stopped: threading.Event = field(default_factory=threading.Event, repr=False)
    ticks: int = 0
    failed_ticks: int = 0
    consecutive_failed_ticks: int = field(default=0, repr=False)

    @property
    def binding_id(self) -> str:
        return self.binding.id


@dataclass(frozen=True)
class ActuationStateChange:
    state: ActuationState
    binding: Keybinding | None
    reason: str

    @property
    def description(self) -> str:
        if self.binding is None:
            return f"{self.state}: {self.reason}"
        return f"{self.state}: {self.binding.label} ({self.reason})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "binding": self.binding.model_dump(mode="json") if self.binding else None,
            "reason": self.reason,
        }


class ActuationController:
    """Starts and stops the key repeat of the binding matching the stable gesture.

    At most one session exists at a time and the controller is the only owner of the repeat
    timer. Transitions are serialized by a lock that key actions never take: ticks run on the
    timer thread and only check their session's `stopped` flag. An outgoing session is flagged,
    its timer cancelled and joined (at most `stop_timeout` seconds) before a new one starts.
    Modifiers of a stopped session are released on its timer thread, never on the caller's.
    """

    def __init__(
        self,
        resolver: BindingResolver,
        actuator: KeyActuator,
        interval: float = REPEAT_INTERVAL,
        timer_factory: TimerFactory = RepeatTimer,
        stop_timeout: float = STOP_TIMEOUT,
    ) -> None:
        self.resolver = resolver
        self.actuator = actuator
        self.interval = interval
        self.timer_factory = timer_factory
        self.stop_timeout = stop_timeout
        self.state_changes: Signal[ActuationStateChange] = Signal("state_changes")

        self._lock = threading.RLock()
        self._session: ActuationSession | None = None
        self._held: StableGestureEvent | None = None

    @property
    def session(self) -> ActuationSession | None:
        return self._session

    @property
    def state(self) -> ActuationState:
        return ActuationState.IDLE if self._session is None else ActuationState.ACTIVE

    def handle_event(self, event: StableGestureEvent) -> None:
        """React to a change of the stable gesture."""
        with self._lock:
            self._held = event
            changes = self._transition(event, self.resolver.resolve_event(event), "gesture changed")
        self._notify(changes)

    def apply_bindings(self, bindings: Iterable[Keybinding]) -> None:
        """Replace the binding set and resolve the held gesture again against it.

        A session whose binding disappeared, was disabled or changed is stopped. If the held
        gesture resolves to a binding of the new set, a session starts for it, even from Idle.
        """
        changes: list[ActuationStateChange] = []
        with self._lock:
            self.resolver.replace(bindings)
            if (held := self._held) is not None:
                binding = self.resolver.resolve_event(held)
                session = self._session
                if session is not None and binding != session.binding:
                    logger.info(f"Binding {session.binding_id} no longer applies, forcing stop")
                changes = self._transition(held, binding, "bindings changed")
        self._notify(changes)

    def stop(self, reason: str = "stopped") -> None:
        """Stop the active session, if any, and forget the held gesture."""
        changes: list[ActuationStateChange] = []
        with self._lock:
            self._held = None
            if self._session is not None:
                self._stop_session(changes, reason)
        self._notify(changes)

    def _transition(
        self, event: StableGestureEvent, binding: Keybinding | None, reason: str
    ) -> list[ActuationStateChange]:
        changes: list[ActuationStateChange] = []
        session = self._session
        if session is not None and binding is not None and binding == session.binding:
            return changes

        if session is not None:
            self._stop_session(changes, reason)
        if binding is not None and event.gesture is not None:
            self._start_session(event.gesture, event.handedness, binding, changes, reason)
        return changes

    def _start_session(
        self,
        gesture: Gestures,
        handedness: Handedness | None,
        binding: Keybinding,
        changes: list[ActuationStateChange],
        reason: str,
    ) -> None:
        session = ActuationSession(gesture=gesture, handedness=handedness, binding=binding)
        session.timer = self.timer_factory(
            self.interval, lambda: self._tick(session), lambda: self._release(session)
        )
        self._session = session
        logger.info(f"Start repeating {binding.label}")
        changes.append(ActuationStateChange(ActuationState.ACTIVE, binding, reason))
        # The first tick runs right away on the timer thread
        session.timer.start()

    def _stop_session(self, changes: list[ActuationStateChange], reason: str) -> None:
        session = self._session
        assert session is not None
        self._session = None
        session.stopped.set()
        if session.timer is not None:
            session.timer.cancel()
            # A tick in progress may still be sending keys, wait for it before anything else starts
            if not session.timer.join(self.stop_timeout):
                logger.warning(f"Repeat timer still running {self.stop_timeout}s after being cancelled")
        logger.info(f"Stop repeating {session.binding.label} after {session.ticks} ticks ({reason})")
        changes.append(ActuationStateChange(ActuationState.IDLE, session.binding, reason))

    def _tick(self, session: ActuationSession) -> None:
        if session.stopped.is_set():
            return
        failures = pulse(self.actuator, session.binding.combo)
        session.ticks += 1
        if failures:
            session.failed_ticks += 1
            session.consecutive_failed_ticks += 1
            logger.debug(
                f"Tick {session.ticks} of {session.binding_id} had {failures} failed calls "
                f"({session.consecutive_failed_ticks} failing ticks in a row)"
            )
        elif session.consecutive_failed_ticks:
            logger.info(
                f"Key actuation of {session.binding_id} recovered "
                f"after {session.consecutive_failed_ticks} failing ticks"
            )
            session.consecutive_failed_ticks = 0

    def _release(self, session: ActuationSession) -> None:
        # Runs on the timer thread once it stopped ticking
        release_modifiers(self.actuator, session.binding.combo)

    def _notify(self, changes: list[ActuationStateChange]) -> None:
        for change in changes:
            self.state_changes.emit(change)
