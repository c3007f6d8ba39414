"""CLI entrypoint for commands-executor."""

import logging
from pathlib import Path

import rich_click as click

from commands_executor import __version__
from commands_executor.controllers import ExecutorCliController, RunCommand

click.rich_click.USE_MARKDOWN = True
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="commands-executor")
def commands_executor() -> None:
    """Run shell commands concurrently under one shared timeout.

    Each command output is streamed to its own file inside a daily
    `outputs-YYYYMMDD` folder.
    """


@commands_executor.command("run")
@click.option(
    "--timeout",
    "timeout_seconds",
    type=int,
    default=None,
    help=(
        "Execution deadline in seconds shared by all tasks. Values <= 0 use the default "
        "of 180. If omitted, COMMANDS_EXECUTOR_TIMEOUT_SECONDS is used."
    ),
)
@click.option(
    "--output-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory where the daily outputs folder is created.",
)
@click.option("--shell", default=None, help="Shell used to run tasks on POSIX platforms.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level. If omitted, COMMANDS_EXECUTOR_LOG_LEVEL is used.",
)
@click.argument("tasks", nargs=-1)
def run(
    timeout_seconds: int | None,
    output_root: Path | None,
    shell: str | None,
    log_level: str | None,
    tasks: tuple[str, ...],
) -> None:
    """Execute TASKS concurrently. Quote each task, for example "ping 8.8.8.8".

    Without TASKS a default demo list for the host platform is used.
    """

    controller = ExecutorCliController()
    command = RunCommand(
        tasks=tasks,
        timeout_seconds=timeout_seconds,
        output_root=output_root,
        shell=shell,
    )
    try:
        settings = controller.settings(command)
    except ValueError as error:
        raise click.UsageError(str(error)) from error
    _configure_logging(log_level or settings.log_level)

    result = controller.run(command, settings)
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Execution aborted.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    commands_executor()
