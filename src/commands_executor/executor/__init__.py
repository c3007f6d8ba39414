"""Concurrent process supervision under a shared deadline."""

from commands_executor.executor.barrier import CompletionBarrier
from commands_executor.executor.deadline import DeadlineController, ExecutionSignal, new_deadline
from commands_executor.executor.engine import execute
from commands_executor.executor.errors import (
    DirectoryUnavailableError,
    ExecutorError,
    KillFailedError,
    SinkUnavailableError,
    StartFailedError,
)
from commands_executor.executor.models import (
    CancelCause,
    ExecutionReport,
    OutcomeKind,
    Task,
    TaskOutcome,
)
from commands_executor.executor.outputs import OutputLayout
from commands_executor.executor.process import ProcessHandle, ProcessState, build_invocation
from commands_executor.executor.signals import SignalBridge
from commands_executor.executor.supervisor import TaskSupervisor

__all__ = [
    "CancelCause",
    "CompletionBarrier",
    "DeadlineController",
    "DirectoryUnavailableError",
    "ExecutionReport",
    "ExecutionSignal",
    "ExecutorError",
    "KillFailedError",
    "OutcomeKind",
    "OutputLayout",
    "ProcessHandle",
    "ProcessState",
    "SignalBridge",
    "SinkUnavailableError",
    "StartFailedError",
    "Task",
    "TaskOutcome",
    "TaskSupervisor",
    "build_invocation",
    "execute",
    "new_deadline",
]
