"""Controllers for executor CLI commands."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from commands_executor.config import Settings
from commands_executor.executor import (
    DirectoryUnavailableError,
    OutputLayout,
    TaskSupervisor,
    execute,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOWS_TASKS: tuple[str, ...] = (
    "systeminfo",
    "tasklist",
    "netstat -n 5",
    "ping 8.8.8.8 -t",
    "ipconfig /all",
)
DEFAULT_POSIX_TASKS: tuple[str, ...] = (
    "hostnamectl",
    "lscpu && lsmem && lsusb && lspci && lshw && lsblk",
    "uname -r",
    "df -h",
    "sysinfo",
    "du | less",
    "/bin/ps -aux",
    "netstat -c 5",
    "ping 8.8.8.8",
    "tail -f /var/log/messages",
)


def default_tasks(os_name: str | None = None) -> tuple[str, ...]:
    """Demo task list for the host platform."""

    if (os_name or os.name) == "nt":
        return DEFAULT_WINDOWS_TASKS
    return DEFAULT_POSIX_TASKS


@dataclass(slots=True)
class RunCommand:
    """CLI input for one concurrent run."""

    tasks: tuple[str, ...]
    timeout_seconds: int | None = None
    output_root: Path | None = None
    shell: str | None = None


@dataclass(slots=True)
class RunResult:
    """Run report to render in CLI."""

    lines: list[str]
    success: bool


class ExecutorCliController:
    """Coordinates settings, output layout, and the execution engine."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def settings(self, command: RunCommand) -> Settings:
        settings = self._settings or Settings.from_env()
        overrides: dict[str, object] = {}
        if command.timeout_seconds is not None:
            overrides["timeout_seconds"] = command.timeout_seconds
        if command.output_root is not None:
            overrides["output_root"] = command.output_root
        if command.shell is not None:
            overrides["shell"] = command.shell
        settings = replace(settings, **overrides)
        settings.validate()
        return settings

    def run(self, command: RunCommand, settings: Settings | None = None) -> RunResult:
        started_at = datetime.now()
        if settings is None:
            settings = self.settings(command)
        timeout_seconds = settings.effective_timeout_seconds
        if settings.timeout_seconds <= 0:
            logger.info(
                "all tasks will be executed with a default timeout value of %d secs",
                timeout_seconds,
            )
        else:
            logger.info(
                "all tasks will be executed with a timeout value of %d secs",
                timeout_seconds,
            )

        tasks = command.tasks
        if not tasks:
            tasks = default_tasks()
            logger.info(
                "no tasks provided for execution - default demo %r tasks will be used",
                os.name,
            )
        else:
            logger.info("detected [%d] tasks to execute", len(tasks))

        layout = OutputLayout(settings.output_root, started_at=started_at)
        try:
            directory = layout.ensure_directory()
        except DirectoryUnavailableError as error:
            logger.error("Program aborted. %s", error)
            return RunResult(lines=[f"Program aborted. {error}"], success=False)

        report = execute(
            tasks,
            timeout_seconds,
            open_sink=layout.open_sink,
            supervisor=TaskSupervisor(
                shell=settings.shell,
                kill_wait_seconds=settings.kill_wait_seconds,
            ),
            handle_signals=settings.handle_signals,
        )

        lines = [f"Outputs folder: {directory}"]
        for outcome in report.outcomes:
            line = outcome.describe()
            if outcome.pid is not None:
                line += f" output={layout.sink_path(outcome.task.index)}"
            lines.append(line)
        lines.append(report.summary_line())
        return RunResult(lines=lines, success=True)
