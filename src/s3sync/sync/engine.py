"""Sync engine: one reconciliation run from enumeration to summary.

This module provides:
- SyncEngine: Plans resources with PathScanner and applies them with a
  WorkerPool, collecting a SyncResult
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from s3sync.sync.executor import ActionExecutor
from s3sync.sync.pool import WorkerPool
from s3sync.sync.report import Reporter
from s3sync.sync.scanner import PathScanner
from s3sync.sync.types import SyncResult

if TYPE_CHECKING:
    from s3sync.core.config import SyncOptions
    from s3sync.storage import ObjectStore
    from s3sync.sync.resource import Resource
    from s3sync.sync.types import ActionError, ActionResult

logger = logging.getLogger(__name__)


class SyncEngine:
    """Runs a reconciliation of the build directory against the store.

    Usage:
        engine = SyncEngine(store, options)
        result = engine.run()
        if result.has_errors:
            ...
    """

    def __init__(
        self,
        store: ObjectStore,
        options: SyncOptions,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Target object store.
            options: Sync options.
            reporter: Action reporter. Defaults to one built from options.
        """
        self._store = store
        self._options = options
        self._reporter = reporter or Reporter(verbose=options.verbose, dry_run=options.dry_run)
        self._scanner = PathScanner(store, options)
        self._executor = ActionExecutor(store, options, self._reporter)

    @property
    def executor(self) -> ActionExecutor:
        return self._executor

    def plan(self) -> list[Resource]:
        """Enumerate every logical path as an unclassified Resource.

        Raises:
            SyncError: If the build directory doesn't exist.
            TransportError: If the bucket listing fails.
        """
        return self._scanner.resources()

    def run(self, resources: list[Resource] | None = None) -> SyncResult:
        """Apply every resource and collect the results.

        A failing resource is recorded in SyncResult.errors; the others
        are still applied.

        Args:
            resources: Resources to apply. Defaults to plan().

        Returns:
            SyncResult with per-action path lists and errors.
        """
        if resources is None:
            resources = self.plan()

        result = SyncResult(dry_run=self._options.dry_run)
        result_lock = threading.Lock()

        def on_complete(action_result: ActionResult) -> None:
            with result_lock:
                result.record(action_result)

        def on_error(error: ActionError) -> None:
            with result_lock:
                result.errors.append(error)

        pool = WorkerPool(self._executor, max_workers=self._options.max_workers)
        pool.start()
        try:
            for resource in resources:
                pool.submit(resource, on_complete=on_complete, on_error=on_error)
            pool.join()
        finally:
            pool.stop()

        for path_list in (result.created, result.updated, result.deleted, result.ignored, result.identical):
            path_list.sort()
        result.errors.sort(key=lambda e: e.path)

        logger.info(
            f"Sync finished: {len(result.created)} created, {len(result.updated)} updated, "
            f"{len(result.deleted)} deleted, {len(result.errors)} errors"
        )
        return result
