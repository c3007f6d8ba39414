"""Run every task concurrently under one deadline and wait for all of them."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from contextlib import nullcontext
from typing import BinaryIO

from commands_executor.executor.barrier import CompletionBarrier
from commands_executor.executor.deadline import DeadlineController, ExecutionSignal
from commands_executor.executor.errors import SinkUnavailableError
from commands_executor.executor.models import ExecutionReport, OutcomeKind, Task, TaskOutcome
from commands_executor.executor.signals import SignalBridge
from commands_executor.executor.supervisor import TaskSupervisor

logger = logging.getLogger(__name__)

SinkOpener = Callable[[int], BinaryIO]


def execute(  # noqa: PLR0913
    tasks: Sequence[str],
    timeout_seconds: float,
    *,
    open_sink: SinkOpener,
    supervisor: TaskSupervisor | None = None,
    handle_signals: bool = True,
    on_controller: Callable[[DeadlineController], None] | None = None,
) -> ExecutionReport:
    """Block until every task completed, was killed, or failed to start.

    Args:
        tasks: Command strings; the position in the list is the task index.
        timeout_seconds: Shared deadline for the whole run.
        open_sink: Opens the output destination of one task index.
        supervisor: Supervisor used for every task.
        handle_signals: Bridge host termination signals into cancellation.
        on_controller: Receives the deadline controller before any task
            starts, for callers that cancel the run themselves.
    """

    started = time.monotonic()
    supervisor = supervisor or TaskSupervisor()
    controller = DeadlineController(timeout_seconds)
    if on_controller is not None:
        on_controller(controller)

    submitted = [Task(index=index, command=command) for index, command in enumerate(tasks)]
    outcomes: dict[int, TaskOutcome] = {}
    outcomes_lock = threading.Lock()
    barrier = CompletionBarrier()

    def _record(outcome: TaskOutcome) -> None:
        with outcomes_lock:
            outcomes[outcome.task.index] = outcome

    bridge = SignalBridge(controller.cancel) if handle_signals else nullcontext()
    with bridge:
        launches: list[tuple[Task, BinaryIO, threading.Thread]] = []
        try:
            for task in submitted:
                try:
                    sink = open_sink(task.index)
                except (SinkUnavailableError, OSError) as error:
                    logger.error("%s %s", task.label, error)
                    _record(
                        TaskOutcome(task=task, kind=OutcomeKind.SINK_UNAVAILABLE, error=str(error)),
                    )
                    continue
                barrier.add()
                thread = threading.Thread(
                    target=_supervise,
                    kwargs={
                        "supervisor": supervisor,
                        "task": task,
                        "signal": controller.signal,
                        "sink": sink,
                        "record": _record,
                        "barrier": barrier,
                    },
                    name=f"task-{task.index:02d}",
                )
                launches.append((task, sink, thread))
        except BaseException:
            # No process is running yet.
            for _task, sink, _thread in launches:
                sink.close()
            controller.close()
            raise

        launched = 0
        try:
            for position, (task, sink, thread) in enumerate(launches):
                try:
                    thread.start()
                except RuntimeError as error:
                    sink.close()
                    logger.error("%s failed to start supervisor - errmsg : %s", task.label, error)
                    _record(
                        TaskOutcome(task=task, kind=OutcomeKind.START_FAILED, error=str(error)),
                    )
                    barrier.done()
                launched = position + 1
            barrier.wait()
        except BaseException:
            # Running processes must not outlive an interrupted run.
            logger.warning("Execution interrupted - cancelling all running tasks")
            controller.cancel()
            for task, sink, _thread in launches[launched:]:
                sink.close()
                _record(
                    TaskOutcome(task=task, kind=OutcomeKind.START_FAILED, error="interrupted"),
                )
                barrier.done()
            barrier.wait()
            raise
        finally:
            controller.close()

    report = ExecutionReport(
        outcomes=[outcomes[task.index] for task in submitted],
        elapsed_seconds=time.monotonic() - started,
    )
    logger.info("%s", report.summary_line())
    return report


def _supervise(  # noqa: PLR0913
    *,
    supervisor: TaskSupervisor,
    task: Task,
    signal: ExecutionSignal,
    sink: BinaryIO,
    record: Callable[[TaskOutcome], None],
    barrier: CompletionBarrier,
) -> None:
    try:
        outcome = supervisor.run(task, signal, sink)
    except Exception as error:
        logger.exception("%s supervisor crashed", task.label)
        outcome = TaskOutcome(task=task, kind=OutcomeKind.COMPLETED_WITH_ERROR, error=str(error))
    try:
        record(outcome)
        sink.close()
    except OSError:
        logger.warning("%s failed to close output file", task.label, exc_info=True)
    finally:
        barrier.done()
