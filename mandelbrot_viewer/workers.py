"""
Persistent render worker pool.

The pool spawns a fixed number of worker threads once at startup and reuses
them for every frame. Each worker owns a private task queue and result
queue and runs the same loop forever:

    wait for a task -> compute its rows -> publish the result -> repeat

Workers share nothing mutable. The only data they read besides their task
is the kernel and max_iter given at construction.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .compute import compute_task
from .view import ViewState

logger = logging.getLogger(__name__)

_STOP = object()  # Sentinel telling a worker to exit its loop


class WorkerError(RuntimeError):
    """A render cycle could not be completed by the workers."""


@dataclass(frozen=True)
class RenderTask:
    """One contiguous block of rows to compute under a single view snapshot."""

    rows: range
    view: ViewState
    width: int
    height: int


@dataclass(frozen=True)
class RenderResult:
    """
    Iteration counts for the rows of one RenderTask.

    iterations has shape (len(rows), width). When the worker failed,
    iterations is None and error holds the exception.
    """

    rows: range
    iterations: Optional[np.ndarray]
    error: Optional[BaseException] = None

    @property
    def ok(self):
        return self.error is None


class _WorkerHandle:
    """A worker thread and its task/result channel pair."""

    def __init__(self, index, target):
        self.index = index
        self.tasks = queue.Queue(maxsize=1)
        self.results = queue.Queue(maxsize=1)
        self.thread = threading.Thread(
            target=target, args=(self,), name=f"render-worker-{index}"
        )
        self.thread.daemon = True


class WorkerPool:
    """
    Fixed-size pool of persistent render workers.

    Usage:
        with WorkerPool(4, max_iter=100) as pool:
            results = pool.submit_and_collect(tasks)  # one task per worker

    Args:
        size: Number of workers (>= 1)
        max_iter: Iteration cap handed to the kernel
        kernel: Callable (task, max_iter) -> iterations array
    """

    def __init__(self, size, max_iter, kernel=compute_task):
        if size < 1:
            raise ValueError(f"worker pool size must be >= 1, got {size}")
        self.max_iter = max_iter
        self._kernel = kernel
        self._closed = False
        self._lock = threading.Lock()

        self._handles = [_WorkerHandle(i, self._worker_loop) for i in range(size)]
        for handle in self._handles:
            handle.thread.start()
        logger.info("Started %d render workers", size)

    @property
    def size(self):
        return len(self._handles)

    def __len__(self):
        return len(self._handles)

    @property
    def closed(self):
        return self._closed

    def _worker_loop(self, handle):
        """Entry point of a worker thread."""
        logger.debug("Worker %d running", handle.index)
        while True:
            task = handle.tasks.get()
            if task is _STOP:
                break
            try:
                iterations = self._kernel(task, self.max_iter)
                result = RenderResult(task.rows, iterations)
            except Exception as err:
                logger.error(
                    "Worker %d failed on rows [%d, %d)",
                    handle.index, task.rows.start, task.rows.stop, exc_info=True
                )
                result = RenderResult(task.rows, None, error=err)
            handle.results.put(result)
        logger.debug("Worker %d stopping", handle.index)

    def submit_and_collect(self, tasks):
        """
        Hand one task to each worker and block until all of them answer.

        Results are returned in worker order, which is the order of tasks.
        Every result is drained even if some workers fail, so the channels
        stay in step for the next cycle.

        Raises:
            ValueError if len(tasks) != pool size
            WorkerError if the pool is shut down or any worker failed
        """
        tasks = list(tasks)
        if len(tasks) != len(self._handles):
            raise ValueError(
                f"expected {len(self._handles)} tasks (one per worker), got {len(tasks)}"
            )

        with self._lock:
            if self._closed:
                raise WorkerError("worker pool has been shut down")

            for handle, task in zip(self._handles, tasks):
                handle.tasks.put(task)
            results = [handle.results.get() for handle in self._handles]

        failed = [r for r in results if not r.ok]
        if failed:
            ranges = ", ".join(f"[{r.rows.start}, {r.rows.stop})" for r in failed)
            raise WorkerError(
                f"{len(failed)} of {len(results)} workers failed (rows {ranges})"
            ) from failed[0].error
        return results

    def shutdown(self, timeout=None):
        """Stop every worker and wait for the threads to exit. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for handle in self._handles:
                handle.tasks.put(_STOP)
        for handle in self._handles:
            handle.thread.join(timeout)
        logger.info("Render workers stopped")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
