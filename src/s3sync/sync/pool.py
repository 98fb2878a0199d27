"""Worker pool for concurrent resource actions.

This module provides:
- WorkerPool: Applies resources with a fixed number of worker threads
- WorkerTask: Represents a queued resource for the pool
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from s3sync.sync.types import ActionError

if TYPE_CHECKING:
    from collections.abc import Callable

    from s3sync.sync.executor import ActionExecutor
    from s3sync.sync.resource import Resource
    from s3sync.sync.types import ActionResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class PoolState(Enum):
    """State of the worker pool."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()


@dataclass
class WorkerTask:
    """A resource to be applied by the worker pool.

    Attributes:
        resource: The resource to apply.
        on_complete: Callback when the action succeeds.
        on_error: Callback when the action fails.
    """

    resource: Resource
    on_complete: Callable[[ActionResult], None] | None = None
    on_error: Callable[[ActionError], None] | None = None


class WorkerPool:
    """Pool of worker threads applying resources.

    Each task is owned by exactly one worker thread, so a Resource is never
    processed concurrently. Paths have no ordering dependency, so tasks run
    in whatever order workers pick them up. A failing task never stops the
    pool.

    Usage:
        pool = WorkerPool(executor, max_workers=4)
        pool.start()

        # Submit tasks
        pool.submit(resource, on_complete=callback, on_error=errback)

        # Wait for all submitted tasks, then stop
        pool.join()
        pool.stop()
    """

    def __init__(self, executor: ActionExecutor, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        """Initialize the worker pool.

        Args:
            executor: Executor applied to every resource.
            max_workers: Number of worker threads.
        """
        self._executor = executor
        self._max_workers = max(max_workers, 1)

        # Pool state
        self._pool_state = PoolState.STOPPED
        self._lock = threading.Lock()

        # Task queue
        self._task_queue: queue.Queue[WorkerTask | None] = queue.Queue()

        # Worker threads
        self._workers: list[threading.Thread] = []

        # Statistics
        self._active_count = 0
        self._completed_count = 0
        self._error_count = 0

    @property
    def state(self) -> PoolState:
        """Get current pool state."""
        return self._pool_state

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def active_count(self) -> int:
        """Get number of tasks being processed."""
        with self._lock:
            return self._active_count

    @property
    def queue_size(self) -> int:
        """Get number of queued tasks."""
        return self._task_queue.qsize()

    @property
    def completed_count(self) -> int:
        """Get number of completed tasks."""
        with self._lock:
            return self._completed_count

    @property
    def error_count(self) -> int:
        """Get number of failed tasks."""
        with self._lock:
            return self._error_count

    def start(self) -> None:
        """Start the worker pool."""
        with self._lock:
            if self._pool_state != PoolState.STOPPED:
                logger.warning("Worker pool already running")
                return

            self._pool_state = PoolState.RUNNING

            # Start worker threads
            for i in range(self._max_workers):
                thread = threading.Thread(
                    target=self._worker_loop,
                    name=f"WorkerPool-{i}",
                    daemon=True,
                )
                thread.start()
                self._workers.append(thread)

            logger.info(f"Worker pool started with {self._max_workers} workers")

    def stop(self, timeout: float = 10.0) -> None:
        """Stop the worker pool.

        Tasks already queued are processed before the workers exit.

        Args:
            timeout: Maximum time to wait for workers to finish.
        """
        with self._lock:
            if self._pool_state == PoolState.STOPPED:
                return

            self._pool_state = PoolState.STOPPING
            logger.info("Worker pool stopping...")

            # Send poison pills to stop workers
            for _ in self._workers:
                self._task_queue.put(None)

        # Wait for workers to finish
        for worker in self._workers:
            worker.join(timeout=timeout / len(self._workers))

        with self._lock:
            self._pool_state = PoolState.STOPPED
            self._workers.clear()
            logger.info("Worker pool stopped")

    def submit(
        self,
        resource: Resource,
        on_complete: Callable[[ActionResult], None] | None = None,
        on_error: Callable[[ActionError], None] | None = None,
    ) -> bool:
        """Submit a resource to the pool.

        Args:
            resource: The resource to apply.
            on_complete: Callback when the action succeeds.
            on_error: Callback when the action fails.

        Returns:
            True if task was submitted, False if pool is not running.
        """
        if self._pool_state != PoolState.RUNNING:
            logger.warning("Cannot submit task: pool not running")
            return False

        self._task_queue.put(WorkerTask(resource=resource, on_complete=on_complete, on_error=on_error))
        logger.debug(f"Task submitted: {resource.path}")
        return True

    def join(self) -> None:
        """Block until every submitted task has been processed."""
        self._task_queue.join()

    def _worker_loop(self) -> None:
        """Main loop for worker threads."""
        while True:
            task = self._task_queue.get()
            try:
                if task is None:
                    # Poison pill - stop worker
                    break
                self._process_task(task)
            except Exception:
                logger.exception("Unexpected error in worker loop")
            finally:
                self._task_queue.task_done()

    def _process_task(self, task: WorkerTask) -> None:
        """Apply a single resource.

        Args:
            task: The task to process.
        """
        path = task.resource.path
        with self._lock:
            self._active_count += 1

        try:
            result = self._executor.apply(task.resource)
        except ActionError as e:
            self._record_error(task, e)
        except Exception as e:
            logger.exception(f"Task error: {path}")
            self._record_error(task, ActionError(path, None, e))
        else:
            with self._lock:
                self._completed_count += 1
            if task.on_complete:
                task.on_complete(result)
        finally:
            with self._lock:
                self._active_count -= 1

    def _record_error(self, task: WorkerTask, error: ActionError) -> None:
        with self._lock:
            self._error_count += 1
        if task.on_error:
            task.on_error(error)
