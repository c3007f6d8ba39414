"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

import pytest

from commands_executor.executor import TaskSupervisor


@pytest.fixture()
def supervisor() -> TaskSupervisor:
    return TaskSupervisor(shell="/bin/sh", kill_wait_seconds=5.0)


@pytest.fixture()
def sink_opener(tmp_path: Path) -> Callable[[int], BinaryIO]:
    """Open ``<tmp_path>/<index>.txt`` sinks for append."""

    def _open(index: int) -> BinaryIO:
        return (tmp_path / f"{index}.txt").open("ab")

    return _open
