"""Resource: the unit of reconciliation.

A Resource pairs the local and remote views of one logical path and
classifies it once. Derived values (hashes, the full remote descriptor,
the status) are computed on first access and cached for the Resource's
lifetime.
"""

from __future__ import annotations

import logging
import mimetypes
import threading
from typing import TYPE_CHECKING, BinaryIO

from s3sync.core.config import DEFAULT_CONTENT_TYPE
from s3sync.core.types import ResourceStatus
from s3sync.storage import CONTENT_MD5_KEY, ObjectAttributes
from s3sync.sync.domain.status import classify

if TYPE_CHECKING:
    from pathlib import Path

    from s3sync.core.config import CachingPolicy, SyncOptions
    from s3sync.sync.local import LocalFileView
    from s3sync.sync.remote import RemoteObjectView

logger = logging.getLogger(__name__)

GZIP_ENCODING = "gzip"
REDUCED_REDUNDANCY = "REDUCED_REDUNDANCY"
SERVER_SIDE_ENCRYPTION = "AES256"


def guess_content_type(path: str) -> str:
    """Guess the MIME type of a logical path.

    Paths that mimetypes reports as compressed (e.g. "archive.tar.gz")
    are sent as opaque bytes.
    """
    content_type, encoding = mimetypes.guess_type(path, strict=False)
    if content_type is None or encoding is not None:
        return DEFAULT_CONTENT_TYPE
    return content_type


class Resource:
    """One logical path, classified against the remote bucket.

    Implements the decision facts read by classify(); each fact is computed
    at most once and only when the decision tree reaches it.

    Usage:
        resource = Resource("a.txt", local_view, remote_view, options)
        if resource.wants_create:
            executor.create(resource)
    """

    def __init__(
        self,
        path: str,
        local: LocalFileView,
        remote: RemoteObjectView,
        options: SyncOptions,
    ) -> None:
        """Initialize the resource.

        Args:
            path: Logical path (never carries the ".gz" suffix of a
                preferred gzip variant).
            local: Local filesystem view.
            remote: Remote view owned by this resource.
            options: Sync options.
        """
        self.path = path
        self._local = local
        self._remote = remote
        self._options = options
        self._lock = threading.RLock()

        self._status: ResourceStatus | None = None
        self._local_exists: bool | None = None
        self._is_directory: bool | None = None
        self._gzipped: bool | None = None
        self._local_object_md5: str | None = None
        self._local_content_md5: str | None = None

    def __repr__(self) -> str:
        return f"Resource({self.path!r})"

    # =========================================================================
    # Decision facts
    # =========================================================================

    @property
    def is_directory(self) -> bool:
        """Whether the logical path is a local directory."""
        with self._lock:
            if self._is_directory is None:
                self._is_directory = self._local.is_directory(self.path)
            return self._is_directory

    @property
    def local_exists(self) -> bool:
        """Whether a local file (plain or gzipped) exists."""
        with self._lock:
            if self._local_exists is None:
                self._local_exists = self._local.exists(self.path)
            return self._local_exists

    @property
    def remote_exists(self) -> bool:
        """Whether the object exists remotely."""
        return self._remote.exists_partial()

    @property
    def is_redirect(self) -> bool:
        """Whether the remote object is a website redirect."""
        return self._remote.is_redirect()

    @property
    def gzipped(self) -> bool:
        """Whether the local variant in use is the ".gz" file."""
        with self._lock:
            if self._gzipped is None:
                self._gzipped = self.local_exists and self._local.resolve(self.path)[1]
            return self._gzipped

    @property
    def body_hash_match(self) -> bool:
        """Whether the local body hash equals the remote etag."""
        return self.local_object_md5 == self.remote_object_md5

    @property
    def content_hash_match(self) -> bool:
        """Whether the original content hash equals the stored content hash."""
        return self.local_content_md5 == self.remote_content_md5

    # =========================================================================
    # Hashes
    # =========================================================================

    @property
    def local_object_md5(self) -> str:
        """MD5 of the bytes that would be uploaded."""
        with self._lock:
            if self._local_object_md5 is None:
                self._local_object_md5 = self._local.body_hash(self.path)
            return self._local_object_md5

    @property
    def local_content_md5(self) -> str:
        """MD5 of the uncompressed original content."""
        with self._lock:
            if self._local_content_md5 is None:
                self._local_content_md5 = self._local.original_content_hash(self.path)
            return self._local_content_md5

    @property
    def remote_object_md5(self) -> str | None:
        """Etag of the remote object."""
        return self._remote.body_hash()

    @property
    def remote_content_md5(self) -> str | None:
        """Content hash stored on the remote object (requires HEAD)."""
        return self._remote.custom_hash()

    # =========================================================================
    # Status
    # =========================================================================

    @property
    def status(self) -> ResourceStatus:
        """Reconciliation status, computed once."""
        with self._lock:
            if self._status is None:
                self._status = classify(self)
                logger.debug(f"{self.path}: {self._status.value}")
            return self._status

    @property
    def wants_create(self) -> bool:
        return self.status == ResourceStatus.NEW

    @property
    def wants_update(self) -> bool:
        return self.status == ResourceStatus.UPDATED

    @property
    def wants_delete(self) -> bool:
        return self.status == ResourceStatus.DELETED

    @property
    def is_identical(self) -> bool:
        return self.status == ResourceStatus.IDENTICAL

    @property
    def is_ignored(self) -> bool:
        return self.status in (ResourceStatus.IGNORED, ResourceStatus.ALTERNATE_ENCODING)

    @property
    def is_alternate_encoding(self) -> bool:
        return self.status == ResourceStatus.ALTERNATE_ENCODING

    @property
    def ignore_reason(self) -> str | None:
        """Why the resource is ignored, for reporting."""
        if self.status == ResourceStatus.ALTERNATE_ENCODING:
            return "alternate encoding"
        if self.is_directory:
            return "directory"
        if self.remote_exists and self.is_redirect:
            return "redirect"
        return None

    # =========================================================================
    # Upload data
    # =========================================================================

    @property
    def remote_key(self) -> str:
        """Key of the remote object (from its descriptor when known)."""
        return self._remote.key

    @property
    def local_path(self) -> Path:
        """Local file that gets uploaded."""
        return self._local.resolve(self.path)[0]

    @property
    def original_path(self) -> Path:
        """Uncompressed original of the local file."""
        return self._local.original_path(self.path)

    @property
    def content_type(self) -> str:
        return guess_content_type(self.path)

    @property
    def caching_policy(self) -> CachingPolicy | None:
        return self._options.caching_policy_for(self.content_type)

    def open_body(self) -> BinaryIO:
        """Open the local body for upload."""
        return self._local.open_body(self.path)

    def attributes(self) -> ObjectAttributes:
        """Build the attributes attached on create and update."""
        options = self._options
        attributes = ObjectAttributes(
            acl=options.acl,
            content_type=self.content_type,
            metadata={CONTENT_MD5_KEY: self.local_content_md5},
        )

        policy = self.caching_policy
        if policy is not None:
            attributes.cache_control = policy.cache_control
            attributes.expires = policy.expires

        if options.prefer_gzip and self.gzipped:
            attributes.content_encoding = GZIP_ENCODING

        if options.reduced_redundancy_storage:
            attributes.storage_class = REDUCED_REDUNDANCY

        if options.encryption:
            attributes.encryption = SERVER_SIDE_ENCRYPTION

        return attributes
