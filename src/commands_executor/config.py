"""Runtime configuration for the commands executor."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TIMEOUT_SECONDS = 180
DEFAULT_KILL_WAIT_SECONDS = 5.0


@dataclass(slots=True)
class Settings:
    """Executor settings loaded from environment with CLI overrides on top."""

    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    output_root: Path = Path(".")
    shell: str | None = None
    kill_wait_seconds: float = DEFAULT_KILL_WAIT_SECONDS
    log_level: str = "INFO"
    handle_signals: bool = True

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with sane defaults for local usage."""

        return cls(
            timeout_seconds=int(
                os.getenv("COMMANDS_EXECUTOR_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)),
            ),
            output_root=Path(os.getenv("COMMANDS_EXECUTOR_OUTPUT_ROOT", ".")),
            shell=os.getenv("COMMANDS_EXECUTOR_SHELL") or os.getenv("SHELL") or None,
            kill_wait_seconds=float(
                os.getenv("COMMANDS_EXECUTOR_KILL_WAIT_SECONDS", str(DEFAULT_KILL_WAIT_SECONDS)),
            ),
            log_level=os.getenv("COMMANDS_EXECUTOR_LOG_LEVEL", "INFO"),
            handle_signals=_env_bool("COMMANDS_EXECUTOR_HANDLE_SIGNALS", default=True),
        )

    @property
    def effective_timeout_seconds(self) -> int:
        """Non-positive timeouts fall back to the default."""

        if self.timeout_seconds <= 0:
            return DEFAULT_TIMEOUT_SECONDS
        return self.timeout_seconds

    def validate(self) -> None:
        """Raise configuration error for unusable values."""

        if self.kill_wait_seconds < 0:
            raise ValueError("COMMANDS_EXECUTOR_KILL_WAIT_SECONDS must be >= 0.")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log level: {self.log_level!r}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
