"""Tests for configuration handling."""

import json
from datetime import datetime
from pathlib import Path

import pytest

from s3sync.core.config import (
    CachingPolicy,
    ConfigError,
    SyncOptions,
    load_options,
    save_options,
)


class TestCachingPolicy:
    """Tests for CachingPolicy."""

    def test_empty_policy_has_no_header(self) -> None:
        """A policy without directives should produce no Cache-Control."""
        assert CachingPolicy().cache_control is None

    def test_cache_control_directives(self) -> None:
        """Directives should be joined in a stable order."""
        policy = CachingPolicy(max_age=3600, public=True, must_revalidate=True)

        assert policy.cache_control == "max-age=3600, public, must-revalidate"

    def test_from_dict_parses_expires(self) -> None:
        """ISO expires strings should become datetimes."""
        policy = CachingPolicy.from_dict({"max_age": 60, "expires": "2030-01-01T00:00:00"})

        assert policy.max_age == 60
        assert policy.expires == datetime(2030, 1, 1)

    def test_from_dict_rejects_unknown_keys(self) -> None:
        """Unknown keys should raise ConfigError."""
        with pytest.raises(ConfigError, match="Unknown caching policy keys"):
            CachingPolicy.from_dict({"maxage": 60})

    def test_from_dict_rejects_bad_expires(self) -> None:
        """An unparseable expires should raise ConfigError."""
        with pytest.raises(ConfigError, match="expires"):
            CachingPolicy.from_dict({"expires": "next tuesday"})


class TestSyncOptions:
    """Tests for SyncOptions."""

    def test_defaults(self) -> None:
        """Defaults should match the documented behavior."""
        options = SyncOptions(bucket="b")

        assert options.acl == "public-read"
        assert options.prefer_gzip is True
        assert options.delete is True
        assert options.force is False
        assert options.dry_run is False
        assert options.max_workers == 4

    def test_prefix_gets_trailing_slash(self) -> None:
        """A non-empty prefix should end with '/'."""
        assert SyncOptions(bucket="b", prefix="site").prefix == "site/"
        assert SyncOptions(bucket="b", prefix="site/").prefix == "site/"
        assert SyncOptions(bucket="b").prefix == ""

    def test_s3_requires_bucket(self) -> None:
        """The S3 store should require a bucket."""
        with pytest.raises(ConfigError, match="bucket"):
            SyncOptions()

    def test_local_store_needs_no_bucket(self) -> None:
        """The local store should work without a bucket."""
        options = SyncOptions(store="local")

        assert options.bucket is None

    def test_unknown_store_type(self) -> None:
        """Unknown store types should be rejected."""
        with pytest.raises(ConfigError, match="Unknown store type"):
            SyncOptions(store="ftp")

    def test_max_workers_must_be_positive(self) -> None:
        """max_workers below 1 should be rejected."""
        with pytest.raises(ConfigError, match="max_workers"):
            SyncOptions(bucket="b", max_workers=0)

    def test_caching_policy_for_content_type(self) -> None:
        """The content type's own policy should win over the default."""
        html = CachingPolicy(max_age=60)
        default = CachingPolicy(max_age=3600)
        options = SyncOptions(
            bucket="b",
            caching_policies={"text/html": html, "default": default},
        )

        assert options.caching_policy_for("text/html") is html
        assert options.caching_policy_for("text/css") is default

    def test_caching_policy_for_without_default(self) -> None:
        """Without a default policy, unknown types get None."""
        options = SyncOptions(bucket="b")

        assert options.caching_policy_for("text/css") is None

    def test_store_config(self) -> None:
        """store_config() should carry what create_store() needs."""
        options = SyncOptions(bucket="b", region="eu-west-1", max_retries=3)

        config = options.store_config()

        assert config["type"] == "s3"
        assert config["bucket"] == "b"
        assert config["region"] == "eu-west-1"
        assert config["max_retries"] == "3"

    def test_from_dict_rejects_unknown_keys(self) -> None:
        """Unknown config keys should raise ConfigError."""
        with pytest.raises(ConfigError, match="Unknown configuration keys"):
            SyncOptions.from_dict({"bucket": "b", "bukket": "c"})

    def test_from_dict_builds_policies(self) -> None:
        """caching_policies entries should become CachingPolicy objects."""
        options = SyncOptions.from_dict(
            {"bucket": "b", "caching_policies": {"default": {"max_age": 10}}}
        )

        assert isinstance(options.caching_policies["default"], CachingPolicy)
        assert options.caching_policies["default"].max_age == 10


class TestLoadSaveOptions:
    """Tests for load_options and save_options."""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing config file should raise ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_options(tmp_path / ".s3sync.json")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        """Broken JSON should raise ConfigError."""
        config_file = tmp_path / ".s3sync.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigError, match="Cannot read"):
            load_options(config_file)

    def test_relative_paths_resolved_against_config(self, tmp_path: Path) -> None:
        """build_dir and local_store_path should be relative to the file."""
        config_file = tmp_path / ".s3sync.json"
        config_file.write_text(
            json.dumps({"store": "local", "build_dir": "public", "local_store_path": "bucket"})
        )

        options = load_options(config_file)

        assert options.build_dir == (tmp_path / "public").resolve()
        assert options.local_store_path == str((tmp_path / "bucket").resolve())

    def test_overrides_take_precedence(self, tmp_path: Path) -> None:
        """Overrides should win over the file, None overrides are skipped."""
        config_file = tmp_path / ".s3sync.json"
        config_file.write_text(json.dumps({"bucket": "b", "delete": True, "max_workers": 2}))

        options = load_options(config_file, delete=False, max_workers=None)

        assert options.delete is False
        assert options.max_workers == 2

    def test_save_then_load(self, tmp_path: Path) -> None:
        """Saved options should load back with the same values."""
        config_file = tmp_path / "conf" / ".s3sync.json"
        options = SyncOptions(
            bucket="b",
            prefix="site",
            build_dir=tmp_path / "public",
            local_store_path=str(tmp_path / "bucket"),
            caching_policies={"default": CachingPolicy(max_age=5, expires=datetime(2030, 1, 1))},
        )

        save_options(options, config_file)
        loaded = load_options(config_file)

        assert loaded.bucket == "b"
        assert loaded.prefix == "site/"
        assert loaded.build_dir == tmp_path / "public"
        assert loaded.caching_policies["default"].expires == datetime(2030, 1, 1)
