"""Detached execution for best-effort writes."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


class BackgroundWriter:
    """Run callables on a worker pool without making the caller wait.

    Failures are logged and never reach the submitter. ``shutdown`` waits for
    queued work, so writes submitted before shutdown are not dropped.
    """

    def __init__(self, max_workers: int = 2) -> None:
        self._max_workers = max_workers
        self._executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._pending: set[concurrent.futures.Future] = set()
        self._lock = threading.Lock()

    def submit(self, description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> concurrent.futures.Future:
        with self._lock:
            if self._executor is None:
                self._executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="bg-writer",
                )
            future = self._executor.submit(self._run, description, fn, *args, **kwargs)
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def drain(self, timeout: float | None = None) -> None:
        """Block until everything submitted so far has finished."""
        with self._lock:
            pending = list(self._pending)
        concurrent.futures.wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
            logger.info("Background writer stopped")

    def _forget(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _run(description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        try:
            fn(*args, **kwargs)
        except Exception:
            logger.exception("Background write failed: %s", description)
