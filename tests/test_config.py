from __future__ import annotations

from pathlib import Path

import allure
import pytest

from commands_executor.config import DEFAULT_TIMEOUT_SECONDS, Settings

pytestmark = [
    allure.epic("Process Supervision"),
    allure.feature("Configuration"),
]


def test_from_env_reads_executor_variables(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COMMANDS_EXECUTOR_TIMEOUT_SECONDS", "42")
    monkeypatch.setenv("COMMANDS_EXECUTOR_OUTPUT_ROOT", str(tmp_path))
    monkeypatch.setenv("COMMANDS_EXECUTOR_SHELL", "/bin/bash")
    monkeypatch.setenv("COMMANDS_EXECUTOR_KILL_WAIT_SECONDS", "1.5")
    monkeypatch.setenv("COMMANDS_EXECUTOR_LOG_LEVEL", "debug")
    monkeypatch.setenv("COMMANDS_EXECUTOR_HANDLE_SIGNALS", "off")

    settings = Settings.from_env()

    assert settings.timeout_seconds == 42
    assert settings.output_root == tmp_path
    assert settings.shell == "/bin/bash"
    assert settings.kill_wait_seconds == 1.5
    assert settings.log_level == "debug"
    assert settings.handle_signals is False
    settings.validate()


def test_from_env_falls_back_to_shell_variable(monkeypatch) -> None:
    monkeypatch.delenv("COMMANDS_EXECUTOR_SHELL", raising=False)
    monkeypatch.setenv("SHELL", "/usr/bin/fish")

    assert Settings.from_env().shell == "/usr/bin/fish"


@pytest.mark.parametrize("timeout", [0, -5])
def test_non_positive_timeout_uses_default(timeout: int) -> None:
    assert Settings(timeout_seconds=timeout).effective_timeout_seconds == DEFAULT_TIMEOUT_SECONDS


def test_positive_timeout_is_kept() -> None:
    assert Settings(timeout_seconds=7).effective_timeout_seconds == 7


def test_validate_rejects_negative_kill_wait() -> None:
    with pytest.raises(ValueError, match="KILL_WAIT_SECONDS"):
        Settings(kill_wait_seconds=-1).validate()


def test_validate_rejects_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="Invalid log level"):
        Settings(log_level="chatty").validate()


def test_invalid_boolean_env_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("COMMANDS_EXECUTOR_HANDLE_SIGNALS", "maybe")

    with pytest.raises(ValueError, match="Invalid boolean value"):
        Settings.from_env()
