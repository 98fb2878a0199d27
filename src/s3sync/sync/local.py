"""Local filesystem view of the build directory.

This module provides:
- LocalFileView: Resolves logical paths to local files, plain or gzipped
- LocalFileNotFoundError: Raised when a logical path has no local file
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from s3sync.core.hashing import (
    HashComputationError,
    compute_file_hash,
    compute_gzip_content_hash,
)

logger = logging.getLogger(__name__)

GZIP_SUFFIX = ".gz"


class LocalFileNotFoundError(Exception):
    """Raised when a logical path has no local file."""


class LocalFileView:
    """Resolves logical paths against the build directory.

    With ``prefer_gzip`` enabled, a sibling ``<path>.gz`` file takes the place
    of the plain file: it is what gets hashed and uploaded, while the plain
    file (or the decompressed .gz stream) provides the original content hash.

    The view holds no per-path state; caching belongs to the Resource.
    """

    def __init__(self, build_dir: Path, prefer_gzip: bool = True) -> None:
        """Initialize the view.

        Args:
            build_dir: Root of the local tree.
            prefer_gzip: Whether to use ".gz" variants when present.
        """
        self._build_dir = Path(build_dir)
        self._prefer_gzip = prefer_gzip

    @property
    def build_dir(self) -> Path:
        """Root of the local tree."""
        return self._build_dir

    @property
    def prefer_gzip(self) -> bool:
        """Whether ".gz" variants are preferred."""
        return self._prefer_gzip

    def original_path(self, path: str) -> Path:
        """Get the path of the uncompressed file for a logical path."""
        return self._build_dir / path

    def _gzip_path(self, path: str) -> Path:
        return self._build_dir / f"{path}{GZIP_SUFFIX}"

    def is_directory(self, path: str) -> bool:
        """Check if the logical path is a local directory."""
        return self.original_path(path).is_dir()

    def exists(self, path: str) -> bool:
        """Check if a local file exists for the logical path."""
        try:
            self.resolve(path)
        except LocalFileNotFoundError:
            return False
        return True

    def resolve(self, path: str) -> tuple[Path, bool]:
        """Resolve a logical path to the local file to upload.

        Args:
            path: Logical path relative to the build directory.

        Returns:
            (file path, gzipped) tuple.

        Raises:
            LocalFileNotFoundError: If neither variant exists.
        """
        if self._prefer_gzip:
            gzip_path = self._gzip_path(path)
            if gzip_path.is_file():
                return gzip_path, True

        original = self.original_path(path)
        if original.is_file():
            return original, False
        raise LocalFileNotFoundError(f"No local file for {path}")

    def body_hash(self, path: str) -> str:
        """Hash the bytes that would be uploaded (possibly compressed).

        Raises:
            LocalFileNotFoundError: If no local file exists.
            HashComputationError: If the file cannot be read.
        """
        file_path, _ = self.resolve(path)
        return compute_file_hash(file_path)

    def original_content_hash(self, path: str) -> str:
        """Hash the uncompressed content, whichever variant is resolved.

        When only the ".gz" file exists on disk, its decompressed stream
        is hashed instead.

        Raises:
            LocalFileNotFoundError: If no local file exists.
            HashComputationError: If the file cannot be read.
        """
        file_path, gzipped = self.resolve(path)
        original = self.original_path(path)
        if not gzipped or original.is_file():
            return compute_file_hash(original)

        logger.debug(f"No uncompressed original for {path}, hashing {file_path.name} content")
        return compute_gzip_content_hash(file_path)

    def open_body(self, path: str) -> BinaryIO:
        """Open the resolved local file for reading.

        Raises:
            LocalFileNotFoundError: If no local file exists.
            HashComputationError: If the file cannot be opened.
        """
        file_path, _ = self.resolve(path)
        try:
            return open(file_path, "rb")
        except OSError as e:
            raise HashComputationError(file_path, e) from e
