"""Shared types and dataclasses for sync operations.

This module provides:
- SyncError, ActionError: Exception classes
- ActionResult: Result of applying one resource
- SyncResult: Overall sync operation result
"""

from __future__ import annotations

from dataclasses import dataclass, field

from s3sync.core.types import ActionKind, ResourceStatus


class SyncError(Exception):
    """Base exception for sync errors."""


class ActionError(SyncError):
    """A create, update or delete failed for a single resource.

    Attributes:
        path: Logical path of the resource.
        status: Status the resource was classified as (None if
            classification itself failed).
        cause: The underlying exception.
    """

    def __init__(
        self,
        path: str,
        status: ResourceStatus | None,
        cause: Exception,
    ) -> None:
        self.path = path
        self.status = status
        self.cause = cause
        status_name = status.value if status else "unclassified"
        super().__init__(f"{path} ({status_name}): {cause}")


@dataclass
class ActionResult:
    """Result of applying the executor to one resource."""

    path: str
    status: ResourceStatus
    action: ActionKind
    dry_run: bool = False

    @property
    def mutated(self) -> bool:
        """Whether the store was (or, in a dry run, would be) changed."""
        return self.action in (ActionKind.CREATE, ActionKind.UPDATE, ActionKind.DELETE)


@dataclass
class SyncResult:
    """Result of a sync operation."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    identical: list[str] = field(default_factory=list)
    errors: list[ActionError] = field(default_factory=list)
    dry_run: bool = False

    def record(self, result: ActionResult) -> None:
        """Add an action result to the matching list."""
        if result.action == ActionKind.CREATE:
            self.created.append(result.path)
        elif result.action == ActionKind.UPDATE:
            self.updated.append(result.path)
        elif result.action == ActionKind.DELETE:
            self.deleted.append(result.path)
        elif result.action == ActionKind.IGNORE:
            self.ignored.append(result.path)
        else:
            self.identical.append(result.path)

    @property
    def mutation_count(self) -> int:
        """Number of store mutations performed (or planned in a dry run)."""
        return len(self.created) + len(self.updated) + len(self.deleted)

    @property
    def has_errors(self) -> bool:
        """Check if any resource failed."""
        return len(self.errors) > 0
