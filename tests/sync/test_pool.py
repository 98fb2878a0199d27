"""Tests for the worker pool."""

import threading
from unittest.mock import MagicMock

import pytest

from s3sync.core.types import ActionKind, ResourceStatus
from s3sync.storage import TransportError
from s3sync.sync.pool import PoolState, WorkerPool
from s3sync.sync.types import ActionError, ActionResult


def make_resource(path: str) -> MagicMock:
    resource = MagicMock()
    resource.path = path
    return resource


def make_executor(fail: set[str] | None = None, crash: set[str] | None = None) -> MagicMock:
    """Executor that creates every path, failing or crashing on some."""
    fail = fail or set()
    crash = crash or set()

    def apply(resource: MagicMock) -> ActionResult:
        if resource.path in fail:
            raise ActionError(resource.path, ResourceStatus.NEW, TransportError("down"))
        if resource.path in crash:
            raise RuntimeError("boom")
        return ActionResult(resource.path, ResourceStatus.NEW, ActionKind.CREATE)

    executor = MagicMock()
    executor.apply.side_effect = apply
    return executor


class TestWorkerPool:
    """Tests for WorkerPool."""

    @pytest.fixture
    def pool(self) -> WorkerPool:
        """A pool that is stopped after the test."""
        pool = WorkerPool(make_executor(), max_workers=3)
        yield pool
        pool.stop()

    def test_initial_state(self) -> None:
        """A new pool is stopped and empty."""
        pool = WorkerPool(make_executor(), max_workers=2)

        assert pool.state == PoolState.STOPPED
        assert pool.max_workers == 2
        assert pool.active_count == 0
        assert pool.queue_size == 0

    def test_max_workers_at_least_one(self) -> None:
        """max_workers is clamped to 1."""
        assert WorkerPool(make_executor(), max_workers=0).max_workers == 1

    def test_submit_requires_running_pool(self) -> None:
        """Tasks can't be submitted to a stopped pool."""
        pool = WorkerPool(make_executor())

        assert pool.submit(make_resource("a.txt")) is False

    def test_start_stop(self, pool: WorkerPool) -> None:
        """start() and stop() move through the pool states."""
        pool.start()
        assert pool.state == PoolState.RUNNING

        pool.stop()
        assert pool.state == PoolState.STOPPED

    def test_all_tasks_complete(self, pool: WorkerPool) -> None:
        """Every submitted resource is applied once."""
        results: list[ActionResult] = []
        lock = threading.Lock()

        def on_complete(result: ActionResult) -> None:
            with lock:
                results.append(result)

        pool.start()
        for i in range(20):
            assert pool.submit(make_resource(f"{i}.txt"), on_complete=on_complete)
        pool.join()

        assert sorted(r.path for r in results) == sorted(f"{i}.txt" for i in range(20))
        assert pool.completed_count == 20
        assert pool.error_count == 0

    def test_failure_does_not_stop_others(self) -> None:
        """A failing task is reported and the remaining tasks still run."""
        pool = WorkerPool(make_executor(fail={"b.txt"}), max_workers=2)
        completed: list[str] = []
        errors: list[ActionError] = []

        pool.start()
        for path in ("a.txt", "b.txt", "c.txt"):
            pool.submit(
                make_resource(path),
                on_complete=lambda r: completed.append(r.path),
                on_error=errors.append,
            )
        pool.join()
        pool.stop()

        assert sorted(completed) == ["a.txt", "c.txt"]
        assert [e.path for e in errors] == ["b.txt"]
        assert pool.error_count == 1

    def test_unexpected_exception_wrapped(self) -> None:
        """Unexpected exceptions become unclassified ActionErrors."""
        pool = WorkerPool(make_executor(crash={"a.txt"}), max_workers=1)
        errors: list[ActionError] = []

        pool.start()
        pool.submit(make_resource("a.txt"), on_error=errors.append)
        pool.join()
        pool.stop()

        assert len(errors) == 1
        assert errors[0].status is None
        assert isinstance(errors[0].cause, RuntimeError)
