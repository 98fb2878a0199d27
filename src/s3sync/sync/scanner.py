"""Path enumeration for a sync run.

This module provides:
- PathScanner: Builds one Resource per logical path from the union of the
  local build directory and the remote listing

Architecture:
    PathScanner is the "resource producer" of a run:
    1. Lists the bucket under the configured prefix (partial descriptors)
    2. Walks the build directory, folding ".gz" variants onto their
       logical path when gzip is preferred
    3. Pairs both sides into Resources, sorted by path

    Flow: PathScanner → SyncEngine → WorkerPool → ActionExecutor
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from s3sync.sync.ignore import IGNORE_FILE_NAME, IgnorePatterns
from s3sync.sync.local import GZIP_SUFFIX, LocalFileView
from s3sync.sync.remote import RemoteObjectView
from s3sync.sync.resource import Resource
from s3sync.sync.types import SyncError

if TYPE_CHECKING:
    from s3sync.core.config import SyncOptions
    from s3sync.storage import ObjectStore, ObjectSummary

logger = logging.getLogger(__name__)


class PathScanner:
    """Enumerates logical paths and builds Resources.

    Usage:
        scanner = PathScanner(store, options)
        for resource in scanner.resources():
            executor.apply(resource)
    """

    def __init__(
        self,
        store: ObjectStore,
        options: SyncOptions,
        ignore: IgnorePatterns | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            store: Store to list.
            options: Sync options (build_dir, prefix, prefer_gzip, exclude).
            ignore: Ignore patterns. Defaults to options.exclude plus the
                build directory's .s3syncignore file.
        """
        self._store = store
        self._options = options
        self._local = LocalFileView(options.build_dir, prefer_gzip=options.prefer_gzip)
        if ignore is None:
            ignore = IgnorePatterns(options.exclude)
            ignore.load_from_file(Path(options.build_dir) / IGNORE_FILE_NAME)
        self._ignore = ignore

    @property
    def local_view(self) -> LocalFileView:
        return self._local

    def logical_path(self, rel_path: str) -> str:
        """Map a file path relative to the build directory to its logical path."""
        if self._options.prefer_gzip and rel_path.endswith(GZIP_SUFFIX):
            return rel_path[: -len(GZIP_SUFFIX)]
        return rel_path

    def scan_local(self) -> set[str]:
        """Walk the build directory.

        Returns:
            Logical paths of all local files (symlinks and ignored files skipped).

        Raises:
            SyncError: If the build directory doesn't exist.
        """
        build_dir = Path(self._options.build_dir)
        if not build_dir.is_dir():
            raise SyncError(f"Build directory not found: {build_dir}")

        paths: set[str] = set()
        for root, dirs, files in os.walk(build_dir):
            root_path = Path(root)
            dirs.sort()
            for name in sorted(files):
                file_path = root_path / name
                # Symlinks are never followed
                if file_path.is_symlink():
                    continue
                rel_path = file_path.relative_to(build_dir).as_posix()
                logical = self.logical_path(rel_path)
                # Remote keys are matched by logical path too
                if self._ignore.should_ignore(rel_path) or self._ignore.should_ignore(logical):
                    logger.debug(f"Ignoring (from rules): {rel_path}")
                    continue
                paths.add(logical)

        logger.info(f"Found {len(paths)} local paths in {build_dir}")
        return paths

    def scan_remote(self) -> dict[str, ObjectSummary]:
        """List the bucket under the configured prefix.

        Returns:
            Dictionary mapping logical path to its listing entry.

        Raises:
            TransportError: If the listing fails.
        """
        prefix = self._options.prefix
        remote: dict[str, ObjectSummary] = {}
        for summary in self._store.list(prefix):
            path = summary.key[len(prefix):]
            if not path:
                continue
            if self._ignore.should_ignore(path):
                logger.debug(f"Ignoring remote (from rules): {path}")
                continue
            remote[path] = summary

        logger.info(f"Found {len(remote)} remote objects in {self._store.location}")
        return remote

    def resources(self) -> list[Resource]:
        """Build one Resource per logical path, sorted by path.

        The remote listing is fetched first so a transport failure aborts
        the run before the (slower) local walk.
        """
        remote = self.scan_remote()
        local = self.scan_local()

        resources: list[Resource] = []
        for path in sorted(local | set(remote)):
            view = RemoteObjectView(
                self._store,
                f"{self._options.prefix}{path}",
                remote.get(path),
            )
            resources.append(Resource(path, self._local, view, self._options))
        return resources
