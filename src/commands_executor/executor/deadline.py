"""Shared cancellation signal driven by a fixed timeout or an early trigger."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from commands_executor.executor.models import CancelCause

logger = logging.getLogger(__name__)

Listener = Callable[[CancelCause], None]


class ExecutionSignal:
    """One-shot broadcast signal observed by every task supervisor.

    Once fired the signal stays fired and its cause never changes. Readers can
    check ``fired``/``cause``, block on ``wait()``, or ``subscribe()`` a
    listener that is called exactly once with the cause.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._cause: CancelCause | None = None
        self._listeners: dict[int, Listener] = {}
        self._next_token = 0

    @property
    def fired(self) -> bool:
        return self._event.is_set()

    @property
    def cause(self) -> CancelCause | None:
        with self._lock:
            return self._cause

    def wait(self, timeout: float | None = None) -> bool:
        """Block until fired or ``timeout`` elapsed; return whether it fired."""

        return self._event.wait(timeout)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it.

        A listener registered after the signal fired is called immediately.
        """

        with self._lock:
            cause = self._cause
            if cause is None:
                token = self._next_token
                self._next_token += 1
                self._listeners[token] = listener
            else:
                token = -1
        if cause is not None:
            listener(cause)
            return lambda: None

        def _unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return _unsubscribe

    def fire(self, cause: CancelCause) -> bool:
        """Fire with ``cause``; return False when already fired."""

        with self._lock:
            if self._cause is not None:
                return False
            self._cause = cause
            self._event.set()
            listeners = list(self._listeners.values())
            self._listeners.clear()
        for listener in listeners:
            try:
                listener(cause)
            except Exception:
                logger.exception("Execution signal listener failed")
        return True


class DeadlineController:
    """Owns the execution signal and the timer that fires it on timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        if timeout_seconds < 0:
            raise ValueError("Deadline timeout must be >= 0.")
        self.timeout_seconds = timeout_seconds
        self.signal = ExecutionSignal()
        self._timer = threading.Timer(timeout_seconds, self._on_timeout)
        self._timer.daemon = True
        self._timer.name = "deadline-timer"
        self._timer.start()

    def cancel(self) -> None:
        """Fire the signal early. Idempotent, no-op once the signal fired."""

        if self.signal.fire(CancelCause.CANCELLED_EXTERNALLY):
            logger.info("Execution cancellation requested")
            self._timer.cancel()

    def close(self) -> None:
        """Release the timer without firing the signal."""

        self._timer.cancel()

    def _on_timeout(self) -> None:
        if self.signal.fire(CancelCause.TIMEOUT_EXCEEDED):
            logger.info("Execution timeout of %s secs reached", self.timeout_seconds)


def new_deadline(timeout_seconds: float) -> tuple[ExecutionSignal, Callable[[], None]]:
    """Create a deadline and return its signal with the cancel trigger."""

    controller = DeadlineController(timeout_seconds)
    return controller.signal, controller.cancel
