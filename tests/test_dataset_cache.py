from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from sentiment_analytics.ingest.dataset_cache import EMPTY, POPULATED, DatasetCache


def test_concurrent_callers_share_one_load() -> None:
    release = threading.Event()
    started = threading.Event()
    calls = 0

    def loader() -> list[int]:
        nonlocal calls
        calls += 1
        started.set()
        release.wait(timeout=5)
        return [1, 2, 3]

    cache: DatasetCache[list[int]] = DatasetCache(loader)
    with ThreadPoolExecutor(max_workers=4) as pool:
        first = pool.submit(cache.get)
        assert started.wait(timeout=5)
        others = [pool.submit(cache.get) for _ in range(3)]
        release.set()
        results = [first.result(timeout=5)] + [f.result(timeout=5) for f in others]

    assert calls == 1
    assert all(r == [1, 2, 3] for r in results)
    assert cache.state == POPULATED


def test_failure_resets_and_next_call_retries() -> None:
    attempts = 0

    def loader() -> str:
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise RuntimeError("network down")
        return "ok"

    cache: DatasetCache[str] = DatasetCache(loader)
    with pytest.raises(RuntimeError):
        cache.get()
    assert cache.state == EMPTY

    assert cache.get() == "ok"
    assert cache.get() == "ok"
    assert attempts == 2


def test_failure_reaches_waiting_callers() -> None:
    release = threading.Event()
    started = threading.Event()

    def loader() -> str:
        started.set()
        release.wait(timeout=5)
        raise RuntimeError("boom")

    cache: DatasetCache[str] = DatasetCache(loader)
    with ThreadPoolExecutor(max_workers=2) as pool:
        owner = pool.submit(cache.get)
        assert started.wait(timeout=5)
        waiter = pool.submit(cache.get)
        release.set()
        with pytest.raises(RuntimeError):
            owner.result(timeout=5)
        with pytest.raises(RuntimeError):
            waiter.result(timeout=5)


def test_invalidate_forces_reload() -> None:
    values = iter(["a", "b"])
    cache: DatasetCache[str] = DatasetCache(lambda: next(values))
    assert cache.get() == "a"
    cache.invalidate()
    assert cache.state == EMPTY
    assert cache.get() == "b"


class _Abort(BaseException):
    pass


def test_base_exception_resets_cache_and_releases_waiters() -> None:
    release = threading.Event()
    started = threading.Event()
    failing = True

    def loader() -> str:
        if not failing:
            return "ok"
        started.set()
        release.wait(timeout=5)
        raise _Abort()

    cache: DatasetCache[str] = DatasetCache(loader)
    with ThreadPoolExecutor(max_workers=2) as pool:
        owner = pool.submit(cache.get)
        assert started.wait(timeout=5)
        waiter = pool.submit(cache.get)
        release.set()
        with pytest.raises(_Abort):
            owner.result(timeout=5)
        with pytest.raises(_Abort):
            waiter.result(timeout=5)

    assert cache.state == EMPTY
    failing = False
    assert cache.get() == "ok"
    assert cache.state == POPULATED
