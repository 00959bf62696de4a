import threading
import time

import pytest

from qas.core.inflight import InFlightGuard


def test_concurrent_callers_share_one_computation() -> None:
    guard = InFlightGuard()
    calls = []
    barrier = threading.Barrier(4)
    results = []

    def compute() -> str:
        calls.append(1)
        time.sleep(0.1)
        return "value"

    def worker() -> None:
        barrier.wait()
        results.append(guard.run("key", compute))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["value"] * 4
    assert len(calls) == 1
    assert guard.pending() == 0


def test_followers_receive_the_leaders_exception() -> None:
    guard = InFlightGuard()
    started = threading.Event()
    release = threading.Event()
    errors: list[Exception] = []

    def failing() -> None:
        started.set()
        release.wait(1)
        raise RuntimeError("boom")

    def follower() -> None:
        try:
            guard.run("key", lambda: None)
        except RuntimeError as e:
            errors.append(e)

    leader = threading.Thread(target=lambda: pytest.raises(RuntimeError, guard.run, "key", failing))
    leader.start()
    started.wait(1)
    other = threading.Thread(target=follower)
    other.start()
    time.sleep(0.05)
    release.set()
    leader.join()
    other.join()

    assert len(errors) == 1
    assert str(errors[0]) == "boom"


def test_key_is_released_after_completion() -> None:
    guard = InFlightGuard()

    assert guard.run("key", lambda: 1) == 1
    assert guard.run("key", lambda: 2) == 2
    assert guard.pending() == 0
