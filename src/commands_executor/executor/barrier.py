"""Countdown rendezvous that waits for every task supervisor."""

from __future__ import annotations

import threading


class CompletionBarrier:
    """Blocks ``wait()`` until every added supervisor called ``done()``."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._pending = 0
        self._finished = 0
        self._waiting = False

    @property
    def pending(self) -> int:
        with self._condition:
            return self._pending

    @property
    def finished(self) -> int:
        with self._condition:
            return self._finished

    def add(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("Barrier count increment must be >= 0.")
        with self._condition:
            if self._waiting:
                raise RuntimeError("Cannot add supervisors once the barrier is awaited.")
            self._pending += count

    def done(self) -> None:
        with self._condition:
            if self._pending <= 0:
                raise ValueError("Barrier done() called more times than supervisors added.")
            self._pending -= 1
            self._finished += 1
            if self._pending == 0:
                self._condition.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Return True once all supervisors are done, False on ``timeout``."""

        with self._condition:
            self._waiting = True
            return self._condition.wait_for(lambda: self._pending == 0, timeout=timeout)
