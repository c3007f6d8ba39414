"""Supervise one task process against the shared execution signal."""

from __future__ import annotations

import logging
import threading
import time
from typing import BinaryIO

from commands_executor.executor.deadline import ExecutionSignal
from commands_executor.executor.errors import KillFailedError, StartFailedError
from commands_executor.executor.models import CancelCause, OutcomeKind, Task, TaskOutcome
from commands_executor.executor.process import ProcessHandle, build_invocation

logger = logging.getLogger(__name__)


class TaskSupervisor:
    """Starts a task process and decides between natural exit and forced kill.

    The supervisor suspends on a single wake event set either by the waiter
    thread reaping the process or by the execution signal firing. Exactly one
    of the natural-exit path and the kill path runs: a reaped process always
    takes the natural-exit path.
    """

    def __init__(
        self,
        *,
        shell: str | None = None,
        os_name: str | None = None,
        kill_wait_seconds: float = 5.0,
    ) -> None:
        self.shell = shell
        self.os_name = os_name
        self.kill_wait_seconds = kill_wait_seconds

    def run(self, task: Task, signal: ExecutionSignal, sink: BinaryIO) -> TaskOutcome:
        started = time.monotonic()
        handle = ProcessHandle(
            index=task.index,
            argv=build_invocation(task.command, os_name=self.os_name, shell=self.shell),
            os_name=self.os_name,
        )
        try:
            pid = handle.start(sink)
        except StartFailedError as error:
            logger.error("%s failed to start - errmsg : %s", task.label, error)
            return TaskOutcome(
                task=task,
                kind=OutcomeKind.START_FAILED,
                error=str(error),
                duration_seconds=time.monotonic() - started,
            )
        logger.info(
            "%s execution successfully started under process id [%d]",
            task.label,
            pid,
        )

        wake = threading.Event()
        exited = threading.Event()
        exit_status: list[int | Exception] = []

        def _wait_for_exit() -> None:
            try:
                exit_status.append(handle.wait())
            except Exception as error:  # noqa: BLE001
                exit_status.append(error)
            finally:
                exited.set()
                wake.set()

        waiter = threading.Thread(
            target=_wait_for_exit,
            daemon=True,
            name=f"task-{task.index:02d}-waiter",
        )
        waiter.start()
        unsubscribe = signal.subscribe(lambda _cause: wake.set())
        try:
            wake.wait()
        finally:
            unsubscribe()

        if exited.is_set():
            return self._natural_exit(task, pid, exit_status[0], started)

        cause = signal.cause or CancelCause.CANCELLED_EXTERNALLY
        return self._kill(task, handle, cause, waiter, started)

    def _natural_exit(
        self,
        task: Task,
        pid: int,
        status: int | Exception,
        started: float,
    ) -> TaskOutcome:
        duration = time.monotonic() - started
        if isinstance(status, Exception):
            logger.error(
                "%s execution completed under process id [%d] with failure - errmsg : %s",
                task.label,
                pid,
                status,
            )
            return TaskOutcome(
                task=task,
                kind=OutcomeKind.COMPLETED_WITH_ERROR,
                pid=pid,
                error=str(status),
                duration_seconds=duration,
            )
        if status != 0:
            logger.warning(
                "%s execution completed under process id [%d] with failure - exit status %d",
                task.label,
                pid,
                status,
            )
            return TaskOutcome(
                task=task,
                kind=OutcomeKind.COMPLETED_WITH_ERROR,
                pid=pid,
                exit_code=status,
                error=f"exit status {status}",
                duration_seconds=duration,
            )
        logger.info("%s execution completed under process id [%d] with success", task.label, pid)
        return TaskOutcome(
            task=task,
            kind=OutcomeKind.COMPLETED,
            pid=pid,
            exit_code=0,
            duration_seconds=duration,
        )

    def _kill(
        self,
        task: Task,
        handle: ProcessHandle,
        cause: CancelCause,
        waiter: threading.Thread,
        started: float,
    ) -> TaskOutcome:
        pid = handle.pid
        if cause is CancelCause.TIMEOUT_EXCEEDED:
            logger.warning(
                "%s execution timeout reached - killing the process id [%s]",
                task.label,
                pid,
            )
        else:
            logger.warning(
                "%s execution cancellation requested - killing the process id [%s]",
                task.label,
                pid,
            )

        kill_error: str | None = None
        try:
            handle.kill()
        except KillFailedError as error:
            kill_error = str(error)
            logger.error(
                "%s execution - failed to kill process id [%s] - errmsg: %s",
                task.label,
                pid,
                error,
            )
        else:
            logger.info("%s execution - succeeded to kill process id [%s]", task.label, pid)

        waiter.join(timeout=self.kill_wait_seconds)
        if waiter.is_alive():
            logger.warning(
                "%s process id [%s] not reaped within %s secs after kill",
                task.label,
                pid,
                self.kill_wait_seconds,
            )

        return TaskOutcome(
            task=task,
            kind=OutcomeKind.KILLED,
            pid=pid,
            exit_code=handle.returncode,
            cause=cause,
            kill_error=kill_error,
            duration_seconds=time.monotonic() - started,
        )
