from __future__ import annotations

import threading
import time

import allure
import pytest

from commands_executor.executor import CompletionBarrier

pytestmark = [
    allure.epic("Process Supervision"),
    allure.feature("Completion Barrier"),
]


def test_wait_returns_immediately_without_supervisors() -> None:
    barrier = CompletionBarrier()

    assert barrier.wait(timeout=0)
    assert barrier.finished == 0


def test_wait_unblocks_only_after_every_done() -> None:
    barrier = CompletionBarrier()
    barrier.add(3)

    barrier.done()
    barrier.done()
    assert not barrier.wait(timeout=0.05)
    assert barrier.pending == 1

    barrier.done()
    assert barrier.wait(timeout=0)
    assert barrier.finished == 3


def test_done_from_many_threads() -> None:
    barrier = CompletionBarrier()
    barrier.add(20)

    def _finish(delay: float) -> None:
        time.sleep(delay)
        barrier.done()

    for index in range(20):
        threading.Thread(target=_finish, args=(index * 0.005,)).start()

    assert barrier.wait(timeout=5)
    assert barrier.finished == 20


def test_done_more_than_added_raises() -> None:
    barrier = CompletionBarrier()
    barrier.add()
    barrier.done()

    with pytest.raises(ValueError, match="more times"):
        barrier.done()


def test_add_after_wait_began_raises() -> None:
    barrier = CompletionBarrier()
    barrier.wait(timeout=0)

    with pytest.raises(RuntimeError, match="awaited"):
        barrier.add()


def test_negative_add_is_rejected() -> None:
    with pytest.raises(ValueError, match=">= 0"):
        CompletionBarrier().add(-1)
