"""Transport-level retries for store adapters.

This module provides:
- RetryPolicy: How many times and how long to wait between attempts
- retry_with_backoff: Run a store call under a RetryPolicy

Only the store adapters retry. The action executor never does: a failed
action is reported once with its path and cause.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Connectivity problems worth another attempt
NETWORK_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_retries: Attempts after the first one (0 disables retrying).
        initial_backoff: Wait before the first retry, in seconds.
        max_backoff: Upper bound for a single wait, in seconds.
        multiplier: Growth factor between waits.
    """

    max_retries: int = 2
    initial_backoff: float = 0.5
    max_backoff: float = 30.0
    multiplier: float = 2.0

    def delays(self) -> Iterator[float]:
        """Yield the wait before each retry, max_retries values in total."""
        delay = self.initial_backoff
        for _ in range(self.max_retries):
            yield min(delay, self.max_backoff)
            delay *= self.multiplier


def retry_with_backoff(
    func: Callable[[], T],
    policy: RetryPolicy | None = None,
    retryable: tuple[type[Exception], ...] = NETWORK_EXCEPTIONS,
    description: str = "store call",
) -> T:
    """Call func, retrying retryable errors with exponential backoff.

    Args:
        func: Zero-argument callable performing one attempt.
        policy: Backoff settings. Defaults to RetryPolicy().
        retryable: Exception types that trigger another attempt.
        description: What is being attempted, for log messages.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        The last retryable exception once the policy is exhausted, or any
        non-retryable exception immediately.
    """
    policy = policy or RetryPolicy()
    attempts = policy.max_retries + 1

    for attempt, delay in enumerate(policy.delays(), start=1):
        try:
            return func()
        except retryable as e:
            logger.warning(f"{description}: attempt {attempt}/{attempts} failed ({e}), retrying in {delay:.1f}s")
            time.sleep(delay)

    try:
        return func()
    except retryable as e:
        if policy.max_retries:
            logger.error(f"{description}: giving up after {attempts} attempts ({e})")
        raise
