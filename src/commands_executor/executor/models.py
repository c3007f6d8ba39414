"""Domain models for task execution and outcomes."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class CancelCause(str, Enum):
    """Why the shared execution signal fired."""

    TIMEOUT_EXCEEDED = "timeout_exceeded"
    CANCELLED_EXTERNALLY = "cancelled_externally"


class OutcomeKind(str, Enum):
    """Terminal state recorded for one task."""

    COMPLETED = "completed"
    COMPLETED_WITH_ERROR = "completed_with_error"
    KILLED = "killed"
    START_FAILED = "start_failed"
    SINK_UNAVAILABLE = "sink_unavailable"


@dataclass(frozen=True, slots=True)
class Task:
    """One external command identified by its position in the task list."""

    index: int
    command: str

    @property
    def label(self) -> str:
        return f"task [{self.index:02d}]"


@dataclass(slots=True)
class TaskOutcome:
    """Terminal state of one task with execution details."""

    task: Task
    kind: OutcomeKind
    pid: int | None = None
    exit_code: int | None = None
    cause: CancelCause | None = None
    error: str | None = None
    kill_error: str | None = None
    duration_seconds: float = 0.0

    @property
    def killed(self) -> bool:
        return self.kind is OutcomeKind.KILLED

    def describe(self) -> str:
        """Render a single CLI line for this outcome."""

        parts = [f"{self.task.label} {self.kind.value}"]
        if self.pid is not None:
            parts.append(f"pid={self.pid}")
        if self.exit_code is not None:
            parts.append(f"exit_code={self.exit_code}")
        if self.cause is not None:
            parts.append(f"cause={self.cause.value}")
        parts.append(f"duration={self.duration_seconds:.2f}s")
        if self.error:
            parts.append(f"error={self.error}")
        if self.kill_error:
            parts.append(f"kill_error={self.kill_error}")
        return " ".join(parts)


@dataclass(slots=True)
class ExecutionReport:
    """Outcomes of one run, one per task index."""

    outcomes: list[TaskOutcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def counts(self) -> dict[OutcomeKind, int]:
        counter = Counter(outcome.kind for outcome in self.outcomes)
        return {kind: counter.get(kind, 0) for kind in OutcomeKind}

    def outcome_for(self, index: int) -> TaskOutcome:
        for outcome in self.outcomes:
            if outcome.task.index == index:
                return outcome
        raise KeyError(index)

    def summary_line(self) -> str:
        counts = self.counts()
        rendered = " ".join(f"{kind.value}={counts[kind]}" for kind in OutcomeKind)
        return (
            f"Execution summary: tasks={len(self.outcomes)} {rendered} "
            f"elapsed={self.elapsed_seconds:.2f}s"
        )
