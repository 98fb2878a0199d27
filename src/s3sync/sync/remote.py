"""Remote object view for a single resource.

This module provides:
- RemoteObjectView: Partial (listing) and full (HEAD) state of one object
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from s3sync.storage import CONTENT_MD5_KEY, REDIRECT_KEY, ObjectNotFoundError

if TYPE_CHECKING:
    from s3sync.storage import ObjectHead, ObjectStore, ObjectSummary

logger = logging.getLogger(__name__)


class RemoteObjectView:
    """State of one remote object, upgraded lazily from listing to HEAD.

    The listing entry (key + etag) is enough to compare body hashes.
    Custom metadata (content hash, redirect marker) needs a HEAD request,
    which is issued at most once and cached for the view's lifetime.

    Usage:
        view = RemoteObjectView(store, "site/a.txt", summary)
        if view.exists_partial() and view.body_hash() != local_hash:
            remote_content = view.custom_hash()  # HEAD happens here
    """

    def __init__(
        self,
        store: ObjectStore,
        key: str,
        partial: ObjectSummary | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            store: Store to issue the HEAD request against.
            key: Remote key for the logical path (prefix included).
            partial: Listing entry, if the listing contained the key.
        """
        self._store = store
        self._key = key
        self._partial = partial
        self._full: ObjectHead | None = None
        self._full_fetched = False
        self._lock = threading.Lock()

    @property
    def key(self) -> str:
        """Key recorded on the remote descriptor, else the expected key."""
        if self._full is not None:
            return self._full.key
        if self._partial is not None:
            return self._partial.key
        return self._key

    @property
    def is_full(self) -> bool:
        """Whether the HEAD request was already issued."""
        return self._full_fetched

    def exists_partial(self) -> bool:
        """Check if the object is known to exist remotely."""
        return self._partial is not None or self._full is not None

    def fetch_full(self) -> ObjectHead | None:
        """Fetch the full descriptor (one HEAD request, memoized).

        Returns:
            ObjectHead, or None if the object doesn't exist.

        Raises:
            TransportError: If the store cannot be reached.
        """
        with self._lock:
            if not self._full_fetched:
                logger.debug(f"HEAD {self._key}")
                try:
                    self._full = self._store.head(self.key)
                except ObjectNotFoundError:
                    self._full = None
                self._full_fetched = True
            return self._full

    def body_hash(self) -> str | None:
        """Get the etag of the stored body."""
        if self._full is not None:
            return self._full.etag
        if self._partial is not None:
            return self._partial.etag
        return None

    def custom_hash(self) -> str | None:
        """Get the original-content hash stored in the object's metadata."""
        full = self.fetch_full()
        if full is None:
            return None
        return full.metadata.get(CONTENT_MD5_KEY)

    def is_redirect(self) -> bool:
        """Check if the object carries a website redirect marker."""
        full = self.fetch_full()
        return full is not None and REDIRECT_KEY in full.metadata
