"""Action executor: applies a classified resource to the store.

This module provides:
- ActionExecutor: create / update / destroy / ignore, and apply() dispatch

Every store mutation of a sync goes through this class. Failures are not
retried here; they are raised as ActionError with the path and status
attached, and the caller decides whether to go on with other resources.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from s3sync.core.hashing import HashComputationError
from s3sync.core.types import ActionKind, ResourceStatus
from s3sync.storage import StoreError
from s3sync.sync.local import LocalFileNotFoundError
from s3sync.sync.report import Reporter
from s3sync.sync.types import ActionError, ActionResult

if TYPE_CHECKING:
    from s3sync.core.config import SyncOptions
    from s3sync.storage import ObjectStore
    from s3sync.sync.resource import Resource

logger = logging.getLogger(__name__)

# Errors that make a single action fail
ACTION_EXCEPTIONS: tuple[type[Exception], ...] = (
    StoreError,
    HashComputationError,
    LocalFileNotFoundError,
    OSError,
)


class ActionExecutor:
    """Applies resources to the object store.

    Usage:
        executor = ActionExecutor(store, options, reporter)
        result = executor.apply(resource)
    """

    def __init__(
        self,
        store: ObjectStore,
        options: SyncOptions,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            store: Target object store.
            options: Sync options (ACL, gzip, storage flags, delete/force/dry_run).
            reporter: Action reporter. Defaults to a Reporter built from options.
        """
        self._store = store
        self._options = options
        self._reporter = reporter or Reporter(verbose=options.verbose, dry_run=options.dry_run)

    @property
    def dry_run(self) -> bool:
        return self._options.dry_run

    def apply(self, resource: Resource) -> ActionResult:
        """Perform the action matching the resource's status.

        - NEW: create
        - UPDATED: update
        - DELETED: destroy (ignored when deletion is disabled)
        - IDENTICAL, ALTERNATE_ENCODING: nothing, unless force is set
        - IGNORED: ignore

        Args:
            resource: Resource to apply.

        Returns:
            ActionResult describing what was done.

        Raises:
            ActionError: If the resource cannot be classified or the
                store operation fails.
        """
        try:
            status = resource.status
        except ACTION_EXCEPTIONS as e:
            logger.error(f"Cannot classify {resource.path}: {e}")
            raise ActionError(resource.path, None, e) from e

        if status == ResourceStatus.NEW:
            self.create(resource)
            action = ActionKind.CREATE
        elif status == ResourceStatus.UPDATED:
            self.update(resource)
            action = ActionKind.UPDATE
        elif status == ResourceStatus.DELETED:
            if self._options.delete:
                self.destroy(resource)
                action = ActionKind.DELETE
            else:
                self.ignore(resource, reason="deletion disabled")
                action = ActionKind.IGNORE
        elif self._options.force and status in (
            ResourceStatus.IDENTICAL,
            ResourceStatus.ALTERNATE_ENCODING,
        ):
            self.update(resource)
            action = ActionKind.UPDATE
        elif status == ResourceStatus.IDENTICAL:
            self._reporter.identical(resource)
            action = ActionKind.SKIP
        else:
            self.ignore(resource)
            action = ActionKind.IGNORE

        return ActionResult(
            path=resource.path,
            status=status,
            action=action,
            dry_run=self.dry_run,
        )

    def create(self, resource: Resource) -> None:
        """Upload a local file as a new object at the resource's key.

        Raises:
            ActionError: If reading the body or the upload fails.
        """
        try:
            self._reporter.creating(resource)
            if self.dry_run:
                return
            attributes = resource.attributes()
            with resource.open_body() as body:
                self._store.put(resource.remote_key, body, attributes)
        except ACTION_EXCEPTIONS as e:
            logger.error(f"Failed to create {resource.path}: {e}")
            raise ActionError(resource.path, ResourceStatus.NEW, e) from e
        logger.info(f"Created {resource.remote_key}")

    def update(self, resource: Resource) -> None:
        """Replace the body and attributes of the existing remote object.

        The object is saved back under the key recorded on its remote
        descriptor, not under a key rebuilt from the logical path.

        Raises:
            ActionError: If reading the body or the upload fails.
        """
        status: ResourceStatus | None = None
        try:
            status = resource.status
            self._reporter.updating(resource)
            if self.dry_run:
                return
            attributes = resource.attributes()
            with resource.open_body() as body:
                self._store.put(resource.remote_key, body, attributes)
        except ACTION_EXCEPTIONS as e:
            logger.error(f"Failed to update {resource.path}: {e}")
            raise ActionError(resource.path, status, e) from e
        logger.info(f"Updated {resource.remote_key}")

    def destroy(self, resource: Resource) -> None:
        """Delete the remote object.

        Deletes by the key on the remote descriptor, or by the prefixed
        logical path when there is none.

        Raises:
            ActionError: If the deletion fails.
        """
        try:
            self._reporter.deleting(resource)
            if self.dry_run:
                return
            self._store.delete(resource.remote_key)
        except ACTION_EXCEPTIONS as e:
            logger.error(f"Failed to delete {resource.path}: {e}")
            raise ActionError(resource.path, ResourceStatus.DELETED, e) from e
        logger.info(f"Deleted {resource.remote_key}")

    def ignore(self, resource: Resource, reason: str | None = None) -> None:
        """Report an ignored resource. Never touches the store."""
        self._reporter.ignoring(resource, reason)
