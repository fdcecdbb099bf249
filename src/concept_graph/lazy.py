"""One-time, thread-backed initialization of expensive process-wide resources."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyModel(Generic[T]):
    """Load a value once, on first request, and hand the same value to every caller.

    The load runs as a single ``concurrent.futures.Future``; callers await it
    through ``asyncio.shield`` so abandoning one call never aborts the load
    for the others. A failed load is forgotten so the next caller starts over.
    """

    def __init__(self, loader: Callable[[], T], name: str = "model") -> None:
        self._loader = loader
        self._name = name
        self._lock = threading.Lock()
        self._future: Future[T] | None = None
        self._executor: ThreadPoolExecutor | None = None
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        future = self._future
        return future is not None and future.done() and future.exception() is None

    def _load(self) -> T:
        logger.info("Loading %s", self._name)
        self.load_count += 1
        value = self._loader()
        logger.info("Loaded %s", self._name)
        return value

    def _start(self) -> Future[T]:
        with self._lock:
            if self._future is None:
                if self._executor is None:
                    self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lazy-model")
                self._future = self._executor.submit(self._load)
            return self._future

    async def get(self) -> T:
        future = self._start()
        try:
            return await asyncio.shield(asyncio.wrap_future(future))
        except Exception:
            with self._lock:
                if self._future is future:
                    self._future = None
            raise


__all__ = ["LazyModel"]
