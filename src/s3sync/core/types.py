"""Shared types for s3sync.

This module defines the enums used by the reconciler, the executor
and the reporting layer.
"""

from __future__ import annotations

from enum import Enum


class ResourceStatus(str, Enum):
    """Reconciliation status of a single logical path.

    Computed once per resource from the local and remote snapshots.
    """

    NEW = "new"
    UPDATED = "updated"
    IDENTICAL = "identical"
    DELETED = "deleted"
    IGNORED = "ignored"
    ALTERNATE_ENCODING = "alternate_encoding"


class ActionKind(str, Enum):
    """Action actually taken for a resource."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    IGNORE = "ignore"
    SKIP = "skip"  # identical, nothing to do
