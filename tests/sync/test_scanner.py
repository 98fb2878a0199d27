"""Tests for path enumeration."""

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from s3sync.core.config import SyncOptions
from s3sync.storage import LocalFSStore, TransportError
from s3sync.sync.ignore import IgnorePatterns
from s3sync.sync.scanner import PathScanner
from s3sync.sync.types import SyncError


class TestScanLocal:
    """Tests for PathScanner.scan_local()."""

    def test_walks_nested_files(self, build_dir: Path, store: LocalFSStore, options: SyncOptions) -> None:
        """Files in subdirectories use '/' separated logical paths."""
        (build_dir / "index.html").write_text("home")
        (build_dir / "css").mkdir()
        (build_dir / "css" / "site.css").write_text("body {}")

        paths = PathScanner(store, options).scan_local()

        assert paths == {"index.html", "css/site.css"}

    def test_gzip_folds_onto_logical_path(
        self, build_dir: Path, store: LocalFSStore, options: SyncOptions, write_gzip: Callable
    ) -> None:
        """A .gz variant and its original are one logical path."""
        (build_dir / "app.js").write_text("var x;")
        write_gzip(build_dir / "app.js.gz", b"var x;")
        write_gzip(build_dir / "only.css.gz", b"body {}")

        paths = PathScanner(store, options).scan_local()

        assert paths == {"app.js", "only.css"}

    def test_gzip_kept_when_not_preferred(
        self, build_dir: Path, store: LocalFSStore, options: SyncOptions, write_gzip: Callable
    ) -> None:
        """Without prefer_gzip, .gz files are ordinary files."""
        options.prefer_gzip = False
        write_gzip(build_dir / "data.gz", b"raw")

        assert PathScanner(store, options).scan_local() == {"data.gz"}

    def test_ignore_patterns(self, build_dir: Path, store: LocalFSStore, options: SyncOptions) -> None:
        """Excluded and default-ignored files are skipped."""
        options.exclude = ["*.map"]
        (build_dir / "app.js").write_text("x")
        (build_dir / "app.js.map").write_text("{}")
        (build_dir / ".DS_Store").write_text("")

        assert PathScanner(store, options).scan_local() == {"app.js"}

    def test_ignore_matches_logical_path_of_gzip(
        self, build_dir: Path, store: LocalFSStore, options: SyncOptions, write_gzip: Callable
    ) -> None:
        """A rule matching the logical path also excludes its .gz variant."""
        options.exclude = ["*.map"]
        (build_dir / "app.js.map").write_text("{}")
        write_gzip(build_dir / "app.js.map.gz", b"{}")
        write_gzip(build_dir / "only.map.gz", b"{}")
        (build_dir / "app.js").write_text("x")

        assert PathScanner(store, options).scan_local() == {"app.js"}

    def test_ignore_file_in_build_dir(self, build_dir: Path, store: LocalFSStore, options: SyncOptions) -> None:
        """Patterns from .s3syncignore are honored, and the file itself is skipped."""
        (build_dir / ".s3syncignore").write_text("# drafts\ndrafts/\n")
        (build_dir / "drafts").mkdir()
        (build_dir / "drafts" / "post.html").write_text("wip")
        (build_dir / "index.html").write_text("home")

        assert PathScanner(store, options).scan_local() == {"index.html"}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinks_skipped(self, build_dir: Path, tmp_path: Path, store: LocalFSStore, options: SyncOptions) -> None:
        """Symlinked files are never uploaded."""
        target = tmp_path / "outside.txt"
        target.write_text("secret")
        (build_dir / "link.txt").symlink_to(target)
        (build_dir / "a.txt").write_text("a")

        assert PathScanner(store, options).scan_local() == {"a.txt"}

    def test_missing_build_dir(self, tmp_path: Path, store: LocalFSStore) -> None:
        """A missing build directory is a SyncError."""
        options = SyncOptions(store="local", build_dir=tmp_path / "nope")

        with pytest.raises(SyncError, match="Build directory not found"):
            PathScanner(store, options).scan_local()


class TestScanRemote:
    """Tests for PathScanner.scan_remote()."""

    def test_strips_prefix(self, store: LocalFSStore, options: SyncOptions, put_object: Callable) -> None:
        """Remote keys map to logical paths without the prefix."""
        options.prefix = "site/"
        put_object("site/a.txt", b"a")
        put_object("site/css/b.css", b"b")
        put_object("other/c.txt", b"c")

        remote = PathScanner(store, options).scan_remote()

        assert sorted(remote) == ["a.txt", "css/b.css"]
        assert remote["a.txt"].key == "site/a.txt"

    def test_ignored_remote_keys_untouched(
        self, store: LocalFSStore, options: SyncOptions, put_object: Callable
    ) -> None:
        """Excluded paths are left alone remotely too."""
        options.exclude = ["uploads/"]
        put_object("uploads/photo.jpg", b"jpg")
        put_object("a.txt", b"a")

        assert set(PathScanner(store, options).scan_remote()) == {"a.txt"}

    def test_listing_failure_propagates(self, options: SyncOptions) -> None:
        """A failing listing aborts enumeration."""
        store = MagicMock()
        store.list.side_effect = TransportError("denied")

        with pytest.raises(TransportError):
            PathScanner(store, options, ignore=IgnorePatterns()).resources()


class TestResources:
    """Tests for PathScanner.resources()."""

    def test_union_sorted(
        self, build_dir: Path, store: LocalFSStore, options: SyncOptions, put_object: Callable
    ) -> None:
        """Every local or remote path yields exactly one resource, sorted."""
        (build_dir / "b.txt").write_text("b")
        (build_dir / "a.txt").write_text("a")
        put_object("a.txt", b"a")
        put_object("z.txt", b"z")

        resources = PathScanner(store, options).resources()

        assert [r.path for r in resources] == ["a.txt", "b.txt", "z.txt"]

    def test_remote_key_from_listing(
        self, build_dir: Path, store: LocalFSStore, options: SyncOptions, put_object: Callable
    ) -> None:
        """Resources carry the prefixed remote key."""
        options.prefix = "site/"
        (build_dir / "a.txt").write_text("a")
        put_object("site/z.txt", b"z")

        resources = {r.path: r for r in PathScanner(store, options).resources()}

        assert resources["a.txt"].remote_key == "site/a.txt"
        assert resources["z.txt"].remote_key == "site/z.txt"
