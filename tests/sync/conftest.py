"""Shared fixtures for sync tests."""

import gzip
import io
from collections.abc import Callable
from pathlib import Path

import pytest

from s3sync.core.config import SyncOptions
from s3sync.core.hashing import compute_md5
from s3sync.storage import CONTENT_MD5_KEY, LocalFSStore, ObjectAttributes


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Create an empty build directory."""
    path = tmp_path / "build"
    path.mkdir()
    return path


@pytest.fixture
def store(tmp_path: Path) -> LocalFSStore:
    """Create an empty local store."""
    return LocalFSStore(tmp_path / "bucket")


@pytest.fixture
def options(build_dir: Path, tmp_path: Path) -> SyncOptions:
    """Options for a local-store sync of build_dir with one worker."""
    return SyncOptions(
        store="local",
        local_store_path=str(tmp_path / "bucket"),
        build_dir=build_dir,
        max_workers=1,
    )


@pytest.fixture
def write_gzip() -> Callable[[Path, bytes], None]:
    """Write gzip files with a fixed header so their bytes are reproducible."""

    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(gzip.compress(content, mtime=0))

    return _write


@pytest.fixture
def put_object(store: LocalFSStore) -> Callable[..., None]:
    """Store objects the way a previous sync would have (content md5 attached)."""

    def _put(
        key: str,
        body: bytes,
        content: bytes | None = None,
        redirect: str | None = None,
    ) -> None:
        metadata = {CONTENT_MD5_KEY: compute_md5(body if content is None else content)}
        store.put(
            key,
            io.BytesIO(body),
            ObjectAttributes(metadata=metadata, website_redirect_location=redirect),
        )

    return _put
