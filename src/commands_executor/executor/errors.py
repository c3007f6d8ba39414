"""Error taxonomy for task execution."""

from __future__ import annotations


class ExecutorError(RuntimeError):
    """Base error for executor failures."""


class StartFailedError(ExecutorError):
    """Process could not be spawned."""

    def __init__(self, message: str, *, index: int) -> None:
        super().__init__(message)
        self.index = index


class KillFailedError(ExecutorError):
    """Forced termination of a running process did not succeed."""

    def __init__(self, message: str, *, index: int, pid: int | None) -> None:
        super().__init__(message)
        self.index = index
        self.pid = pid


class SinkUnavailableError(ExecutorError):
    """Per-task output destination could not be opened."""

    def __init__(self, message: str, *, index: int) -> None:
        super().__init__(message)
        self.index = index


class DirectoryUnavailableError(ExecutorError):
    """Shared output directory cannot be created or used. Aborts the run."""
