"""Process handle over one spawned shell invocation."""

from __future__ import annotations

import os
import signal
import subprocess
import threading
from enum import Enum
from typing import BinaryIO

from commands_executor.executor.errors import KillFailedError, StartFailedError

DEFAULT_POSIX_SHELL = "/bin/sh"


class ProcessState(str, Enum):
    """Lifecycle of a process handle."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    EXITED = "exited"
    KILLED = "killed"


def build_invocation(
    command: str,
    *,
    os_name: str | None = None,
    shell: str | None = None,
) -> list[str]:
    """Translate a task string into a single shell invocation."""

    current_os_name = os_name or os.name
    if current_os_name == "nt":
        return ["cmd", "/C", command]
    return [shell or os.getenv("SHELL") or DEFAULT_POSIX_SHELL, "-c", command]


class ProcessHandle:
    """Owns one OS process: start, wait for exit, forced kill."""

    def __init__(self, *, index: int, argv: list[str], os_name: str | None = None) -> None:
        self.index = index
        self.argv = argv
        self.os_name = os_name or os.name
        self.state = ProcessState.NOT_STARTED
        self._process: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process is not None else None

    def start(self, sink: BinaryIO) -> int:
        """Spawn the process writing stdout and stderr to ``sink``; return its pid."""

        if self.state is not ProcessState.NOT_STARTED:
            raise RuntimeError(f"Process handle {self.index} was already started.")
        try:
            self._process = subprocess.Popen(  # noqa: S603
                self.argv,
                stdin=subprocess.DEVNULL,
                stdout=sink,
                stderr=sink,
                start_new_session=self.os_name != "nt",
            )
        except (OSError, ValueError) as error:
            raise StartFailedError(str(error), index=self.index) from error
        self.state = ProcessState.RUNNING
        return self._process.pid

    def wait(self, timeout: float | None = None) -> int:
        """Block until the process exits and return its exit status."""

        process = self._require_process()
        returncode = process.wait(timeout=timeout)
        with self._lock:
            if self.state is ProcessState.RUNNING:
                self.state = ProcessState.EXITED
        return returncode

    def kill(self) -> None:
        """Terminate the process outright, including its process group on POSIX."""

        process = self._require_process()
        with self._lock:
            if self.state is not ProcessState.RUNNING:
                raise KillFailedError(
                    f"process already {self.state.value}",
                    index=self.index,
                    pid=process.pid,
                )
            if process.poll() is not None:
                self.state = ProcessState.EXITED
                raise KillFailedError(
                    "process already exited",
                    index=self.index,
                    pid=process.pid,
                )
            try:
                if self.os_name == "nt":
                    process.kill()
                else:
                    os.killpg(process.pid, signal.SIGKILL)
            except OSError as error:
                raise KillFailedError(str(error), index=self.index, pid=process.pid) from error
            self.state = ProcessState.KILLED

    def _require_process(self) -> subprocess.Popen[bytes]:
        if self._process is None:
            raise RuntimeError(f"Process handle {self.index} was not started.")
        return self._process
