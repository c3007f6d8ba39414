"""Daily output directory and per-task output files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from commands_executor.executor.errors import DirectoryUnavailableError, SinkUnavailableError


class OutputLayout:
    """Names the daily outputs folder and one output file per task index.

    Files are named ``<index>.<HHMMSS>.txt`` from the run start time inside
    ``outputs-<YYYYMMDD>``, so several runs on the same day share one folder.
    """

    def __init__(self, root_dir: Path, started_at: datetime | None = None) -> None:
        self.root_dir = root_dir
        self.started_at = started_at or datetime.now()

    @property
    def directory(self) -> Path:
        return self.root_dir / f"outputs-{self.started_at:%Y%m%d}"

    @property
    def file_suffix(self) -> str:
        return f"{self.started_at:%H%M%S}.txt"

    def ensure_directory(self) -> Path:
        directory = self.directory
        try:
            directory.mkdir(parents=True)
        except FileExistsError as error:
            if not directory.is_dir():
                raise DirectoryUnavailableError(
                    f"Failed to create the outputs folder {directory}: name already in use.",
                ) from error
        except OSError as error:
            raise DirectoryUnavailableError(
                f"Failed to create the outputs folder {directory}: {error}",
            ) from error
        return directory

    def sink_path(self, index: int) -> Path:
        return self.directory / f"{index}.{self.file_suffix}"

    def open_sink(self, index: int) -> BinaryIO:
        """Open the output file of task ``index`` for appending."""

        path = self.sink_path(index)
        try:
            return path.open("ab")
        except OSError as error:
            raise SinkUnavailableError(
                f"failed to create or open output file {path} - errmsg : {error}",
                index=index,
            ) from error
