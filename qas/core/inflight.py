"""Request coalescing for concurrent cache misses on the same key."""

import logging
from collections.abc import Callable, Hashable
from concurrent.futures import Future
from threading import Lock
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


class InFlightGuard:
    """Share one in-progress computation among concurrent callers of a key.

    The first caller for a key runs ``fn`` in its own thread; callers arriving
    while it runs block on the same ``Future`` and receive its result or
    exception. The entry is dropped as soon as the computation settles, so
    later callers go back through the cache.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._inflight: dict[Hashable, Future[Any]] = {}

    def run(self, key: Hashable, fn: Callable[[], R]) -> R:
        with self._lock:
            future = self._inflight.get(key)
            leader = future is None
            if future is None:
                future = Future()
                self._inflight[key] = future

        if not leader:
            logger.debug(f"Joining in-flight computation for {key}")
            return future.result()

        try:
            result = fn()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def pending(self) -> int:
        """Number of keys currently being computed."""
        with self._lock:
            return len(self._inflight)
