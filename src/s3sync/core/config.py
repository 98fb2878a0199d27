"""Configuration classes for s3sync.

This module defines:
- CachingPolicy: Browser caching directives attached to uploaded objects
- SyncOptions: All recognized options of a sync run
- load_options / save_options: JSON config file handling
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_FILE = ".s3sync.json"
DEFAULT_CACHING_POLICY_KEY = "default"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

STORE_TYPES = ("s3", "local")


class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


@dataclass
class CachingPolicy:
    """Browser cache policy for one content type.

    Attributes:
        max_age: max-age directive in seconds.
        s_maxage: s-maxage directive in seconds (shared caches).
        public: Add the public directive.
        private: Add the private directive.
        no_cache: Add the no-cache directive.
        no_store: Add the no-store directive.
        must_revalidate: Add the must-revalidate directive.
        proxy_revalidate: Add the proxy-revalidate directive.
        expires: Absolute expiry sent as the Expires header.
    """

    max_age: int | None = None
    s_maxage: int | None = None
    public: bool = False
    private: bool = False
    no_cache: bool = False
    no_store: bool = False
    must_revalidate: bool = False
    proxy_revalidate: bool = False
    expires: datetime | None = None

    @property
    def cache_control(self) -> str | None:
        """Build the Cache-Control header value.

        Returns:
            Comma-separated directives, or None if no directive is set.
        """
        directives: list[str] = []
        if self.max_age is not None:
            directives.append(f"max-age={self.max_age}")
        if self.s_maxage is not None:
            directives.append(f"s-maxage={self.s_maxage}")
        if self.public:
            directives.append("public")
        if self.private:
            directives.append("private")
        if self.no_cache:
            directives.append("no-cache")
        if self.no_store:
            directives.append("no-store")
        if self.must_revalidate:
            directives.append("must-revalidate")
        if self.proxy_revalidate:
            directives.append("proxy-revalidate")
        return ", ".join(directives) or None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CachingPolicy:
        """Create a policy from its JSON representation.

        Raises:
            ConfigError: On unknown keys or an unparseable expires value.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown caching policy keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        expires = values.get("expires")
        if isinstance(expires, str):
            try:
                values["expires"] = datetime.fromisoformat(expires)
            except ValueError as e:
                raise ConfigError(f"Invalid caching policy expires: {expires!r}") from e
        return cls(**values)


@dataclass
class SyncOptions:
    """Options recognized by a sync run.

    Attributes:
        bucket: Target bucket name.
        region: AWS region of the bucket.
        endpoint_url: Custom endpoint for S3-compatible services.
        aws_access_key_id: Access key (falls back to the boto3 credential chain).
        aws_secret_access_key: Secret key.
        store: Store backend, "s3" or "local".
        local_store_path: Root directory of the local store backend.
        prefix: Key prefix prepended to every logical path.
        build_dir: Local directory whose contents are synced.
        acl: Access control value attached to every upload.
        prefer_gzip: Upload the ".gz" variant of a file when it exists.
        reduced_redundancy_storage: Upload with the REDUCED_REDUNDANCY class.
        encryption: Request AES256 server-side encryption.
        delete: Delete remote objects that no longer exist locally.
        force: Re-upload objects even if unchanged.
        dry_run: Report actions without touching the bucket.
        verbose: Report hashes and paths for every action.
        max_workers: Number of concurrent workers.
        max_retries: Transport-level retries for transient store errors.
        exclude: Ignore patterns for local files.
        caching_policies: Content type (or "default") to caching policy.
    """

    bucket: str | None = None
    region: str = "us-east-1"
    endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    store: str = "s3"
    local_store_path: str = "./bucket"
    prefix: str = ""
    build_dir: Path = Path("build")
    acl: str = "public-read"
    prefer_gzip: bool = True
    reduced_redundancy_storage: bool = False
    encryption: bool = False
    delete: bool = True
    force: bool = False
    dry_run: bool = False
    verbose: bool = False
    max_workers: int = 4
    max_retries: int = 2
    exclude: list[str] = field(default_factory=list)
    caching_policies: dict[str, CachingPolicy] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize paths and validate values."""
        self.build_dir = Path(self.build_dir).expanduser()
        if self.prefix and not self.prefix.endswith("/"):
            self.prefix += "/"
        if self.store not in STORE_TYPES:
            raise ConfigError(f"Unknown store type: {self.store}")
        if self.store == "s3" and not self.bucket:
            raise ConfigError("S3 store requires 'bucket' configuration")
        if self.max_workers < 1:
            raise ConfigError("max_workers must be at least 1")
        if self.max_retries < 0:
            raise ConfigError("max_retries cannot be negative")

    def caching_policy_for(self, content_type: str | None) -> CachingPolicy | None:
        """Get the caching policy for a content type.

        Args:
            content_type: MIME type of the object.

        Returns:
            The policy registered for the content type, the default policy,
            or None if neither exists.
        """
        if content_type and content_type in self.caching_policies:
            return self.caching_policies[content_type]
        return self.caching_policies.get(DEFAULT_CACHING_POLICY_KEY)

    def store_config(self) -> dict[str, str | None]:
        """Build the configuration dict consumed by create_store()."""
        return {
            "type": self.store,
            "bucket": self.bucket,
            "region": self.region,
            "endpoint_url": self.endpoint_url,
            "access_key": self.aws_access_key_id,
            "secret_key": self.aws_secret_access_key,
            "local_path": self.local_store_path,
            "max_retries": str(self.max_retries),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncOptions:
        """Create options from the JSON representation of a config file.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        policies = values.pop("caching_policies", None) or {}
        if not isinstance(policies, dict):
            raise ConfigError("caching_policies must be an object")
        values["caching_policies"] = {
            content_type: CachingPolicy.from_dict(policy)
            for content_type, policy in policies.items()
        }
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize options back to their JSON representation."""
        data = asdict(self)
        data["build_dir"] = str(self.build_dir)
        for policy in data["caching_policies"].values():
            if policy["expires"] is not None:
                policy["expires"] = policy["expires"].isoformat()
        return data


def load_options(config_file: Path, **overrides: Any) -> SyncOptions:
    """Load options from a JSON config file.

    Args:
        config_file: Path to the config file.
        **overrides: Values that take precedence over the file (None is skipped).

    Returns:
        Parsed SyncOptions.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_file}")
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a JSON object")

    data.update({key: value for key, value in overrides.items() if value is not None})
    options = SyncOptions.from_dict(data)

    # Relative paths are resolved against the config file location
    if not options.build_dir.is_absolute():
        options.build_dir = (config_file.parent / options.build_dir).resolve()
    if not Path(options.local_store_path).expanduser().is_absolute():
        options.local_store_path = str((config_file.parent / options.local_store_path).resolve())
    return options


def save_options(options: SyncOptions, config_file: Path) -> None:
    """Save options to a JSON config file."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(options.to_dict(), indent=2))
