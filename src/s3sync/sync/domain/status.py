"""Status classification for a single resource.

Decision tree (evaluated top to bottom, later branches assume earlier
ones failed):

| Local          | Remote         | Condition                         | Status             |
|----------------|----------------|-----------------------------------|--------------------|
| directory      | exists         |                                   | DELETED            |
| directory      | absent         |                                   | IGNORED            |
| file           | exists         | body hash equal                   | IDENTICAL          |
| file           | exists         | body differs, not gzipped         | UPDATED            |
| gzipped file   | exists         | body differs, content differs     | UPDATED            |
| gzipped file   | exists         | body differs, content equal       | ALTERNATE_ENCODING |
| file           | absent         |                                   | NEW                |
| absent         | redirect       |                                   | IGNORED            |
| absent         | exists/absent  |                                   | DELETED            |

Facts are read lazily: the content hash and redirect marker need a HEAD
request, so they are only consulted when the tree actually reaches them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from s3sync.core.types import ResourceStatus


class ResourceFacts(Protocol):
    """The inputs of the decision tree."""

    @property
    def is_directory(self) -> bool: ...

    @property
    def local_exists(self) -> bool: ...

    @property
    def remote_exists(self) -> bool: ...

    @property
    def is_redirect(self) -> bool: ...

    @property
    def body_hash_match(self) -> bool: ...

    @property
    def gzipped(self) -> bool: ...

    @property
    def content_hash_match(self) -> bool: ...


@dataclass(frozen=True)
class StatusFacts:
    """Literal decision tree inputs, for callers that already know them."""

    local_exists: bool = False
    remote_exists: bool = False
    is_directory: bool = False
    is_redirect: bool = False
    body_hash_match: bool = False
    gzipped: bool = False
    content_hash_match: bool = False


def classify(facts: ResourceFacts) -> ResourceStatus:
    """Classify a resource into exactly one status.

    Args:
        facts: Decision inputs. Properties are read in tree order and only
            when needed.

    Returns:
        The resource status.
    """
    # Directories are never uploaded
    if facts.is_directory:
        return ResourceStatus.DELETED if facts.remote_exists else ResourceStatus.IGNORED

    if facts.local_exists and facts.remote_exists:
        if facts.body_hash_match:
            return ResourceStatus.IDENTICAL
        if not facts.gzipped:
            return ResourceStatus.UPDATED
        if not facts.content_hash_match:
            return ResourceStatus.UPDATED
        # Only the compressed bytes changed
        return ResourceStatus.ALTERNATE_ENCODING

    if facts.local_exists:
        return ResourceStatus.NEW

    if facts.remote_exists and facts.is_redirect:
        return ResourceStatus.IGNORED

    return ResourceStatus.DELETED
