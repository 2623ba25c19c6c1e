"""Single-flight in-memory cache for the answers dataset.

Lifecycle:
- empty -> fetching -> populated
- empty -> fetching -> failed -> empty (the next call retries)

Concurrent callers that arrive while a load is in flight wait on that load
instead of starting their own.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Generic, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY = "empty"
FETCHING = "fetching"
POPULATED = "populated"


class DatasetCache(Generic[T]):
    """Cache the result of `loader` with single-flight semantics.

    Args:
        loader: Zero-argument callable that retrieves the dataset. It runs on
            the thread of the first caller that finds the cache empty.
    """

    def __init__(self, loader: Callable[[], T]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._value: T | None = None
        self._populated = False
        self._inflight: Future[T] | None = None

    @property
    def state(self) -> str:
        with self._lock:
            if self._populated:
                return POPULATED
            if self._inflight is not None:
                return FETCHING
            return EMPTY

    def get(self) -> T:
        """Return the dataset, loading it once if needed.

        Raises:
            BaseException: whatever the loader raised; every caller waiting on
                the failed load sees the same error and the cache resets.
        """
        with self._lock:
            if self._populated:
                return self._value  # type: ignore[return-value]
            waiting = self._inflight
            if waiting is None:
                fut: Future[T] = Future()
                self._inflight = fut

        if waiting is not None:
            return waiting.result()

        try:
            value = self._loader()
        except BaseException as e:
            # interrupts included: waiters must never be left on an unresolved future
            with self._lock:
                self._inflight = None
            log.warning("Dataset load failed; cache reset: %r", e)
            fut.set_exception(e)
            raise

        with self._lock:
            self._value = value
            self._populated = True
            self._inflight = None
        fut.set_result(value)
        return value

    def invalidate(self) -> None:
        """Drop a populated dataset so the next `get` reloads it."""
        with self._lock:
            self._value = None
            self._populated = False
