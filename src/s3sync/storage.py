"""Object storage abstraction for the sync target.

This module provides:
- Abstract interface for object storage (list, head, put, delete)
- LocalFSStore for development/testing
- S3Store for production (AWS, OVH, MinIO)
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from s3sync.retry import RetryPolicy, retry_with_backoff

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from typing import Any

logger = logging.getLogger(__name__)

USER_METADATA_PREFIX = "x-amz-meta-"
CONTENT_MD5_KEY = "x-amz-meta-content-md5"
REDIRECT_KEY = "x-amz-website-redirect-location"


class StoreError(Exception):
    """Base exception for object store errors."""


class ObjectNotFoundError(StoreError):
    """Raised when an object does not exist in the store."""


class TransportError(StoreError):
    """Raised when the store cannot be reached or refuses an operation."""


@dataclass(frozen=True)
class ObjectSummary:
    """A listing entry: the partial view of a remote object."""

    key: str
    etag: str


@dataclass(frozen=True)
class ObjectHead:
    """A HEAD result: the full view of a remote object.

    Attributes:
        key: Object key.
        etag: Unquoted ETag (MD5 of the body for single-part uploads).
        metadata: Header-style metadata, e.g. "x-amz-meta-content-md5"
            and "x-amz-website-redirect-location".
        content_type: Stored Content-Type.
        content_encoding: Stored Content-Encoding.
        cache_control: Stored Cache-Control.
    """

    key: str
    etag: str
    metadata: dict[str, str] = field(default_factory=dict)
    content_type: str | None = None
    content_encoding: str | None = None
    cache_control: str | None = None


@dataclass
class ObjectAttributes:
    """Attributes attached to an object on upload."""

    acl: str | None = None
    content_type: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    cache_control: str | None = None
    expires: datetime | None = None
    content_encoding: str | None = None
    storage_class: str | None = None
    encryption: str | None = None
    website_redirect_location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the attributes that are set, JSON-serializable."""
        data: dict[str, Any] = {}
        for name in (
            "acl",
            "content_type",
            "cache_control",
            "content_encoding",
            "storage_class",
            "encryption",
            "website_redirect_location",
        ):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.expires is not None:
            data["expires"] = self.expires.isoformat()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    def header_metadata(self) -> dict[str, str]:
        """Metadata as returned by head(), including the redirect marker."""
        metadata = dict(self.metadata)
        if self.website_redirect_location:
            metadata[REDIRECT_KEY] = self.website_redirect_location
        return metadata


def _strip_etag(etag: str) -> str:
    return etag.strip('"')


def _user_metadata(metadata: dict[str, str]) -> dict[str, str]:
    """Convert header-style metadata keys to S3 user metadata names."""
    return {
        key[len(USER_METADATA_PREFIX):]: value
        for key, value in metadata.items()
        if key.startswith(USER_METADATA_PREFIX)
    }


class ObjectStore(ABC):
    """Abstract interface for the remote object store."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of where objects are stored."""

    @abstractmethod
    def list(self, prefix: str = "") -> Iterator[ObjectSummary]:
        """List objects under a key prefix.

        Args:
            prefix: Key prefix to filter on.

        Yields:
            ObjectSummary for every object (key + etag).
        """

    @abstractmethod
    def head(self, key: str) -> ObjectHead:
        """Fetch the full metadata of an object.

        Args:
            key: Object key.

        Returns:
            ObjectHead with etag and metadata.

        Raises:
            ObjectNotFoundError: If the object doesn't exist.
            TransportError: If the store cannot be reached.
        """

    @abstractmethod
    def put(self, key: str, body: BinaryIO, attributes: ObjectAttributes) -> None:
        """Store an object, replacing any existing one.

        Args:
            key: Object key.
            body: Readable binary stream with the object body.
            attributes: Attributes to attach to the object.

        Raises:
            TransportError: If the upload fails.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete an object in a single request.

        Deleting a missing key is not an error.

        Args:
            key: Object key.

        Raises:
            TransportError: If the deletion fails.
        """


class LocalFSStore(ObjectStore):
    """Local filesystem store for development and testing.

    Object bodies live under ``objects/<key>`` and their metadata as JSON
    under ``meta/<key>.json``, so keys can contain slashes.
    """

    def __init__(self, base_path: Path | str) -> None:
        """Initialize local storage.

        Args:
            base_path: Base directory for object storage.
        """
        self._base_path = Path(base_path).resolve()
        self._objects = self._base_path / "objects"
        self._meta = self._base_path / "meta"
        self._objects.mkdir(parents=True, exist_ok=True)
        self._meta.mkdir(parents=True, exist_ok=True)

    @property
    def location(self) -> str:
        """Return the local storage path."""
        return f"Local filesystem: {self._base_path}"

    def _object_path(self, key: str) -> Path:
        path = (self._objects / key).resolve()
        if not path.is_relative_to(self._objects):
            raise TransportError(f"Invalid object key: {key}")
        return path

    def _meta_path(self, key: str) -> Path:
        return self._meta / f"{key}.json"

    def _read_meta(self, key: str) -> dict[str, Any]:
        meta_path = self._meta_path(key)
        if meta_path.exists():
            return dict(json.loads(meta_path.read_text(encoding="utf-8")))
        # Body written without metadata (e.g. copied in by hand)
        data = self._object_path(key).read_bytes()
        return {"etag": hashlib.md5(data).hexdigest(), "metadata": {}, "attributes": {}}

    def list(self, prefix: str = "") -> Iterator[ObjectSummary]:
        """List objects under a key prefix."""
        for path in sorted(self._objects.rglob("*")):
            if not path.is_file():
                continue
            key = path.relative_to(self._objects).as_posix()
            if key.startswith(prefix):
                yield ObjectSummary(key=key, etag=self._read_meta(key)["etag"])

    def head(self, key: str) -> ObjectHead:
        """Fetch the full metadata of an object."""
        if not self._object_path(key).is_file():
            raise ObjectNotFoundError(f"Object not found: {key}")
        meta = self._read_meta(key)
        attributes = meta.get("attributes", {})
        return ObjectHead(
            key=key,
            etag=meta["etag"],
            metadata=dict(meta.get("metadata", {})),
            content_type=attributes.get("content_type"),
            content_encoding=attributes.get("content_encoding"),
            cache_control=attributes.get("cache_control"),
        )

    def put(self, key: str, body: BinaryIO, attributes: ObjectAttributes) -> None:
        """Store an object."""
        path = self._object_path(key)
        try:
            data = body.read()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            meta_path = self._meta_path(key)
            meta_path.parent.mkdir(parents=True, exist_ok=True)
            meta_path.write_text(
                json.dumps(
                    {
                        "etag": hashlib.md5(data).hexdigest(),
                        "metadata": attributes.header_metadata(),
                        "attributes": attributes.to_dict(),
                    },
                    indent=2,
                ),
                encoding="utf-8",
            )
        except OSError as e:
            raise TransportError(f"Cannot store {key}: {e}") from e
        logger.debug(f"Stored {key} ({len(data)} bytes)")

    def delete(self, key: str) -> None:
        """Delete an object."""
        path = self._object_path(key)
        try:
            path.unlink(missing_ok=True)
            self._meta_path(key).unlink(missing_ok=True)
        except OSError as e:
            raise TransportError(f"Cannot delete {key}: {e}") from e


class S3Store(ObjectStore):
    """S3-compatible store for production (AWS, OVH, MinIO, etc.)."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
        max_retries: int = 2,
    ) -> None:
        """Initialize S3 storage.

        Args:
            bucket: S3 bucket name.
            endpoint_url: Custom endpoint URL (for OVH, MinIO, etc.).
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: AWS region (default: us-east-1).
            max_retries: Retries on transient connection errors.
        """
        import boto3

        self._bucket = bucket
        self._endpoint_url = endpoint_url
        self._retry_policy = RetryPolicy(max_retries=max_retries)
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def location(self) -> str:
        """Return the S3 bucket location."""
        if self._endpoint_url:
            return f"S3: {self._endpoint_url}/{self._bucket}"
        return f"S3: s3://{self._bucket}"

    def _call(self, description: str, func: Callable[[], Any]) -> Any:
        """Run a boto3 call with retry, translating botocore errors.

        Raises:
            ObjectNotFoundError: On a 404 answer.
            TransportError: On any other client or connection error.
        """
        from botocore.exceptions import (
            BotoCoreError,
            ClientError,
            HTTPClientError,
        )
        from botocore.exceptions import ConnectionError as BotoConnectionError

        try:
            return retry_with_backoff(
                func,
                self._retry_policy,
                retryable=(BotoConnectionError, HTTPClientError),
                description=description,
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise ObjectNotFoundError(f"Object not found: {description}") from e
            raise TransportError(f"{description} failed: {e}") from e
        except BotoCoreError as e:
            raise TransportError(f"{description} failed: {e}") from e

    def list(self, prefix: str = "") -> Iterator[ObjectSummary]:
        """List objects under a key prefix."""
        paginator = self._client.get_paginator("list_objects_v2")
        pages = self._call(
            f"list s3://{self._bucket}/{prefix}",
            lambda: list(paginator.paginate(Bucket=self._bucket, Prefix=prefix)),
        )
        for page in pages:
            for entry in page.get("Contents", []):
                yield ObjectSummary(key=entry["Key"], etag=_strip_etag(entry["ETag"]))

    def head(self, key: str) -> ObjectHead:
        """Fetch the full metadata of an object."""
        response = self._call(
            f"head {key}",
            lambda: self._client.head_object(Bucket=self._bucket, Key=key),
        )
        metadata = {
            f"{USER_METADATA_PREFIX}{name}": value
            for name, value in response.get("Metadata", {}).items()
        }
        if response.get("WebsiteRedirectLocation"):
            metadata[REDIRECT_KEY] = response["WebsiteRedirectLocation"]
        return ObjectHead(
            key=key,
            etag=_strip_etag(response["ETag"]),
            metadata=metadata,
            content_type=response.get("ContentType"),
            content_encoding=response.get("ContentEncoding"),
            cache_control=response.get("CacheControl"),
        )

    def put(self, key: str, body: BinaryIO, attributes: ObjectAttributes) -> None:
        """Store an object."""
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Metadata": _user_metadata(attributes.metadata),
        }
        if attributes.acl:
            kwargs["ACL"] = attributes.acl
        if attributes.content_type:
            kwargs["ContentType"] = attributes.content_type
        if attributes.cache_control:
            kwargs["CacheControl"] = attributes.cache_control
        if attributes.expires:
            kwargs["Expires"] = attributes.expires
        if attributes.content_encoding:
            kwargs["ContentEncoding"] = attributes.content_encoding
        if attributes.storage_class:
            kwargs["StorageClass"] = attributes.storage_class
        if attributes.encryption:
            kwargs["ServerSideEncryption"] = attributes.encryption
        if attributes.website_redirect_location:
            kwargs["WebsiteRedirectLocation"] = attributes.website_redirect_location

        def _put() -> None:
            # Rewind so a retried attempt sends the whole body again
            body.seek(0)
            self._client.put_object(Body=body, **kwargs)

        self._call(f"put {key}", _put)
        logger.debug(f"Uploaded s3://{self._bucket}/{key}")

    def delete(self, key: str) -> None:
        """Delete an object (DeleteObject succeeds for missing keys too)."""
        self._call(
            f"delete {key}",
            lambda: self._client.delete_object(Bucket=self._bucket, Key=key),
        )
        logger.debug(f"Deleted s3://{self._bucket}/{key}")


def create_store(config: dict[str, str | None]) -> ObjectStore:
    """Factory function to create a store from configuration.

    Args:
        config: Store configuration dict with keys:
            - type: "local" or "s3"
            - For local: local_path
            - For S3: bucket, endpoint_url, access_key, secret_key, region,
              max_retries

    Returns:
        Configured ObjectStore instance.

    Raises:
        ValueError: If store type is unknown.
    """
    store_type = config.get("type", "s3")

    if store_type == "local":
        local_path = config.get("local_path") or "./bucket"
        return LocalFSStore(os.path.expanduser(local_path))

    if store_type == "s3":
        bucket = config.get("bucket")
        if not bucket:
            raise ValueError("S3 store requires 'bucket' configuration")
        return S3Store(
            bucket=bucket,
            endpoint_url=config.get("endpoint_url"),
            access_key=config.get("access_key"),
            secret_key=config.get("secret_key"),
            region=config.get("region") or "us-east-1",
            max_retries=int(config.get("max_retries") or 0),
        )

    raise ValueError(f"Unknown store type: {store_type}")
