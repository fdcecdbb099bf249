"""Tests for one-time background model loading."""

import asyncio
import threading
import time

import pytest

from concept_graph.lazy import LazyModel


async def test_concurrent_callers_share_one_load():
    def loader():
        time.sleep(0.05)
        return object()

    lazy = LazyModel(loader, name="slow model")
    results = await asyncio.gather(*(lazy.get() for _ in range(5)))

    assert lazy.load_count == 1
    assert all(result is results[0] for result in results)
    assert lazy.loaded


async def test_later_callers_reuse_loaded_value():
    lazy = LazyModel(lambda: ["model"])
    first = await lazy.get()
    second = await lazy.get()
    assert first is second
    assert lazy.load_count == 1


async def test_failed_load_is_retried():
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("download interrupted")
        return "model"

    lazy = LazyModel(flaky)
    with pytest.raises(RuntimeError, match="download interrupted"):
        await lazy.get()
    assert not lazy.loaded

    assert await lazy.get() == "model"
    assert lazy.load_count == 2


async def test_cancelled_caller_does_not_abort_load():
    release = threading.Event()

    def loader():
        release.wait(timeout=5)
        return "model"

    lazy = LazyModel(loader)
    waiting = asyncio.create_task(lazy.get())
    await asyncio.sleep(0.01)
    waiting.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiting

    release.set()
    assert await lazy.get() == "model"
    assert lazy.load_count == 1
