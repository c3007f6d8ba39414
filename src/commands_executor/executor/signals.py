"""Bridge host termination signals into the execution cancellation trigger."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable
from types import FrameType

logger = logging.getLogger(__name__)

TERMINATION_SIGNAL_NAMES: tuple[str, ...] = ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")


class SignalBridge:
    """Fires ``cancel`` once on the first termination signal, then stops listening.

    Use as a context manager around a run. Handlers can only be installed from
    the main thread; elsewhere the bridge stays inactive and ``notify()`` is
    the only way to trigger it.
    """

    def __init__(
        self,
        cancel: Callable[[], None],
        *,
        signal_names: tuple[str, ...] = TERMINATION_SIGNAL_NAMES,
    ) -> None:
        self._cancel = cancel
        self._signals = tuple(
            getattr(signal, name) for name in signal_names if hasattr(signal, name)
        )
        self._originals: dict[signal.Signals, object] = {}
        self._lock = threading.RLock()
        self._triggered = False
        self.received_signal: str | None = None

    @property
    def triggered(self) -> bool:
        return self._triggered

    @property
    def installed(self) -> bool:
        return bool(self._originals)

    def install(self) -> None:
        for signum in self._signals:
            try:
                original = signal.getsignal(signum)
                signal.signal(signum, self._handle)
            except (OSError, ValueError):
                # Signal handlers can only be installed in main thread.
                logger.debug("Cannot install handler for %s", signum, exc_info=True)
                continue
            self._originals[signum] = original

    def restore(self) -> None:
        originals, self._originals = self._originals, {}
        for signum, original in originals.items():
            try:
                signal.signal(signum, original)
            except (OSError, ValueError, TypeError):
                logger.debug("Cannot restore handler for %s", signum, exc_info=True)

    def notify(self, signal_name: str) -> bool:
        """Forward one termination request; return False if already forwarded."""

        with self._lock:
            if self._triggered:
                return False
            self._triggered = True
            self.received_signal = signal_name
        logger.warning("Received %s - cancelling all running tasks", signal_name)
        self._cancel()
        return True

    def _handle(self, signum: int, _frame: FrameType | None) -> None:
        try:
            name = signal.Signals(signum).name
        except ValueError:
            name = str(signum)
        self.restore()
        self.notify(name)

    def __enter__(self) -> SignalBridge:
        self.install()
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.restore()
