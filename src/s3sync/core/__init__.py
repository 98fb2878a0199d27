"""Core module - Hashing, configuration and shared types."""

from s3sync.core.config import (
    DEFAULT_CONFIG_FILE,
    CachingPolicy,
    ConfigError,
    SyncOptions,
    load_options,
    save_options,
)
from s3sync.core.hashing import (
    HashComputationError,
    compute_file_hash,
    compute_gzip_content_hash,
    compute_md5,
)
from s3sync.core.types import ActionKind, ResourceStatus

__all__ = [
    # Config
    "DEFAULT_CONFIG_FILE",
    "CachingPolicy",
    "ConfigError",
    "SyncOptions",
    "load_options",
    "save_options",
    # Hashing
    "HashComputationError",
    "compute_file_hash",
    "compute_gzip_content_hash",
    "compute_md5",
    # Types
    "ActionKind",
    "ResourceStatus",
]
