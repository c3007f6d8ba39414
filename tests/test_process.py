from __future__ import annotations

import os
import time
from pathlib import Path

import allure
import pytest

from commands_executor.executor import ProcessHandle, ProcessState, build_invocation
from commands_executor.executor.errors import KillFailedError, StartFailedError

pytestmark = [
    allure.epic("Process Supervision"),
    allure.feature("Process Handle"),
]

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX shell required")


def test_build_invocation_windows_uses_cmd() -> None:
    assert build_invocation("ipconfig /all", os_name="nt") == ["cmd", "/C", "ipconfig /all"]


def test_build_invocation_posix_uses_explicit_shell() -> None:
    assert build_invocation("df -h", os_name="posix", shell="/bin/bash") == [
        "/bin/bash",
        "-c",
        "df -h",
    ]


def test_build_invocation_posix_falls_back_to_shell_env(monkeypatch) -> None:
    monkeypatch.setenv("SHELL", "/usr/bin/zsh")
    assert build_invocation("uname -r", os_name="posix")[0] == "/usr/bin/zsh"

    monkeypatch.delenv("SHELL")
    assert build_invocation("uname -r", os_name="posix") == ["/bin/sh", "-c", "uname -r"]


@posix_only
def test_handle_runs_to_exit_and_writes_combined_output(tmp_path: Path) -> None:
    output = tmp_path / "out.txt"
    handle = ProcessHandle(index=0, argv=["/bin/sh", "-c", "echo out; echo err 1>&2; exit 3"])
    assert handle.state is ProcessState.NOT_STARTED

    with output.open("ab") as sink:
        pid = handle.start(sink)
        assert pid == handle.pid
        assert handle.state is ProcessState.RUNNING
        assert handle.wait() == 3

    assert handle.state is ProcessState.EXITED
    assert handle.returncode == 3
    assert output.read_bytes().split() == [b"out", b"err"]


@posix_only
def test_kill_terminates_running_process(tmp_path: Path) -> None:
    handle = ProcessHandle(index=1, argv=["/bin/sh", "-c", "sleep 30"])
    with (tmp_path / "out.txt").open("ab") as sink:
        handle.start(sink)
        handle.kill()
        returncode = handle.wait(timeout=5)

    assert handle.state is ProcessState.KILLED
    assert returncode != 0


@posix_only
def test_kill_after_exit_raises_kill_failed(tmp_path: Path) -> None:
    handle = ProcessHandle(index=2, argv=["/bin/sh", "-c", "exit 0"])
    with (tmp_path / "out.txt").open("ab") as sink:
        handle.start(sink)
        handle.wait(timeout=5)

    with pytest.raises(KillFailedError, match="already exited") as error:
        handle.kill()
    assert error.value.index == 2
    assert error.value.pid == handle.pid
    assert handle.state is ProcessState.EXITED


def test_start_failure_raises_start_failed(tmp_path: Path) -> None:
    handle = ProcessHandle(index=3, argv=[str(tmp_path / "missing-binary"), "-c", "true"])

    with (tmp_path / "out.txt").open("ab") as sink, pytest.raises(StartFailedError) as error:
        handle.start(sink)

    assert error.value.index == 3
    assert handle.state is ProcessState.NOT_STARTED
    assert handle.pid is None


@posix_only
def test_start_twice_is_rejected(tmp_path: Path) -> None:
    handle = ProcessHandle(index=4, argv=["/bin/sh", "-c", "exit 0"])
    with (tmp_path / "out.txt").open("ab") as sink:
        handle.start(sink)
        with pytest.raises(RuntimeError, match="already started"):
            handle.start(sink)
        handle.wait(timeout=5)


def test_wait_before_start_is_rejected() -> None:
    with pytest.raises(RuntimeError, match="not started"):
        ProcessHandle(index=5, argv=["true"]).wait()


@posix_only
def test_kill_of_exited_but_unreaped_process_reports_exit(tmp_path: Path) -> None:
    handle = ProcessHandle(index=6, argv=["/bin/sh", "-c", "exit 0"])
    with (tmp_path / "out.txt").open("ab") as sink:
        handle.start(sink)
        time.sleep(1)

        with pytest.raises(KillFailedError, match="already exited"):
            handle.kill()

    assert handle.state is ProcessState.EXITED
    assert handle.wait(timeout=5) == 0
