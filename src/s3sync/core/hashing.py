"""Content hashing for local files.

This module provides:
- compute_md5: MD5 of an in-memory byte string
- compute_file_hash: MD5 of a file, read in blocks
- compute_gzip_content_hash: MD5 of the decompressed content of a .gz file

MD5 is used because it is what S3 reports as the ETag of a single-part upload,
so a local hash can be compared to a listing entry without a HEAD request.
"""

from __future__ import annotations

import gzip
import hashlib
from pathlib import Path
from typing import BinaryIO

BLOCK_SIZE = 64 * 1024


class HashComputationError(Exception):
    """Raised when a local file cannot be read for hashing."""

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot hash {path}: {cause}")


def compute_md5(data: bytes) -> str:
    """Compute MD5 hash of data.

    Args:
        data: Raw bytes to hash.

    Returns:
        Hex-encoded MD5 hash string (32 characters).
    """
    return hashlib.md5(data).hexdigest()


def _hash_stream(stream: BinaryIO) -> str:
    hasher = hashlib.md5()
    for block in iter(lambda: stream.read(BLOCK_SIZE), b""):
        hasher.update(block)
    return hasher.hexdigest()


def compute_file_hash(path: Path) -> str:
    """Compute MD5 hash of a file.

    Reads the file in blocks to handle large files efficiently.

    Args:
        path: Path to the file to hash.

    Returns:
        Hexadecimal MD5 hash string.

    Raises:
        HashComputationError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            return _hash_stream(f)
    except OSError as e:
        raise HashComputationError(path, e) from e


def compute_gzip_content_hash(path: Path) -> str:
    """Compute MD5 hash of the decompressed content of a gzip file.

    Args:
        path: Path to a gzip-compressed file.

    Returns:
        Hexadecimal MD5 hash of the uncompressed bytes.

    Raises:
        HashComputationError: If the file cannot be read or is not valid gzip.
    """
    try:
        with gzip.open(path, "rb") as f:
            return _hash_stream(f)
    except (OSError, EOFError) as e:
        raise HashComputationError(path, e) from e
