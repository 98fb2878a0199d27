"""Domain modules for reconciliation rules.

This package centralizes the pure decision logic of the sync:
- status: Decision tree classifying a resource into one status

Architecture:
    domain/ contains pure business logic without external dependencies.
    Filesystem and store access stay in local.py, remote.py and resource.py.
"""

from s3sync.sync.domain.status import ResourceFacts, StatusFacts, classify

__all__ = [
    "ResourceFacts",
    "StatusFacts",
    "classify",
]
