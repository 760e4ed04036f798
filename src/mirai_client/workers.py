"""
Worker pool owned by a Session for caller-driven workloads.

The Session never schedules its own requests here. Destroying the pool is a
cooperative drain: it blocks until every submitted task has finished.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class WorkerPool:
    def __init__(self) -> None:
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def running(self) -> bool:
        return self._executor is not None

    def start(self, workers: Optional[int] = None) -> None:
        """Start the pool. No-op if it is already running."""
        if self._executor is not None:
            return
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mirai-worker")
        logger.info("Worker pool started (workers=%s)", workers or "default")

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        if self._executor is None:
            raise RuntimeError("Worker pool is not running")
        return self._executor.submit(fn, *args, **kwargs)

    def destroy(self) -> None:
        """Wait for all submitted work to finish, then release the threads.

        Safe to call on a pool that was never started or is already destroyed.
        """
        executor, self._executor = self._executor, None
        if executor is None:
            return
        executor.shutdown(wait=True)
        logger.info("Worker pool drained and released")
