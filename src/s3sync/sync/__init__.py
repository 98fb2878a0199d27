"""Reconciliation of a local build directory against a bucket.

Architecture:
    PathScanner → Resource (classify) → WorkerPool → ActionExecutor → ObjectStore

Components:
- **LocalFileView / RemoteObjectView**: Local and remote state of a logical path
- **Resource**: Pairs both views and classifies the path once (domain.status)
- **ActionExecutor**: Creates, updates, deletes or ignores a resource
- **WorkerPool**: Applies resources concurrently
- **SyncEngine**: Runs a whole reconciliation and collects a SyncResult
"""

from s3sync.sync.domain import ResourceFacts, StatusFacts, classify
from s3sync.sync.engine import SyncEngine
from s3sync.sync.executor import ActionExecutor
from s3sync.sync.ignore import IGNORE_FILE_NAME, IgnorePatterns, IgnoreRule
from s3sync.sync.local import LocalFileNotFoundError, LocalFileView
from s3sync.sync.pool import PoolState, WorkerPool, WorkerTask
from s3sync.sync.remote import RemoteObjectView
from s3sync.sync.report import Reporter
from s3sync.sync.resource import Resource, guess_content_type
from s3sync.sync.scanner import PathScanner
from s3sync.sync.types import ActionError, ActionResult, SyncError, SyncResult

__all__ = [
    # Types and errors
    "ActionError",
    "ActionResult",
    "SyncError",
    "SyncResult",
    # Views
    "LocalFileNotFoundError",
    "LocalFileView",
    "RemoteObjectView",
    # Reconciliation
    "Resource",
    "ResourceFacts",
    "StatusFacts",
    "classify",
    "guess_content_type",
    # Execution
    "ActionExecutor",
    "PoolState",
    "Reporter",
    "WorkerPool",
    "WorkerTask",
    # Enumeration
    "IGNORE_FILE_NAME",
    "IgnorePatterns",
    "IgnoreRule",
    "PathScanner",
    # Engine
    "SyncEngine",
]
