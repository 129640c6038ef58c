r"""Retry policy configuration.

This module provides the immutable ``RetryPolicy`` value and the
``DEFAULT_RETRY_POLICY`` instance used when no override is given.
"""

from __future__ import annotations

__all__ = ["DEFAULT_RETRY_POLICY", "RetryPolicy"]

from dataclasses import dataclass, field, replace
from typing import Any

from duneresilient.backoff import ExponentialBackoff
from duneresilient.config import (
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF,
    RETRY_STATUS_CODES,
)
from duneresilient.validation import validate_retry_policy_params


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration of the retry loop.

    A policy is immutable once constructed, so a single instance can be
    shared by every executor and read concurrently.

    Args:
        max_attempts: Total number of attempts, including the first one.
            Must be >= 1.
        initial_backoff: Delay after the first failed attempt, in seconds.
            Must be > 0.
        max_backoff: Cap of the doubled delay, in seconds.
            Must be >= initial_backoff.
        jitter: Amount added to every delay, in seconds. Must be >= 0.
        retryable_status_codes: HTTP status codes considered transient.
        randomize_jitter: If ``True``, add a random amount in ``[0, jitter]``
            instead of the full jitter.

    Example:
        ```pycon
        >>> from duneresilient.retry import RetryPolicy
        >>> policy = RetryPolicy(max_attempts=3, initial_backoff=1.0, jitter=0.0)
        >>> policy.next_backoff(1), policy.next_backoff(2), policy.next_backoff(3)
        (1.0, 2.0, 4.0)
        >>> policy.is_retryable_status(503)
        True
        >>> policy.merge(max_attempts=10).max_attempts
        10

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF
    max_backoff: float = DEFAULT_MAX_BACKOFF
    jitter: float = DEFAULT_JITTER
    retryable_status_codes: frozenset[int] = field(default_factory=lambda: RETRY_STATUS_CODES)
    randomize_jitter: bool = False
    _backoff: ExponentialBackoff = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate the policy and build its backoff strategy.

        Raises:
            ValueError: If any parameter fails validation.
        """
        codes = frozenset(self.retryable_status_codes)
        validate_retry_policy_params(
            max_attempts=self.max_attempts,
            initial_backoff=self.initial_backoff,
            max_backoff=self.max_backoff,
            jitter=self.jitter,
            retryable_status_codes=codes,
        )
        object.__setattr__(self, "retryable_status_codes", codes)
        object.__setattr__(
            self,
            "_backoff",
            ExponentialBackoff(
                initial_backoff=self.initial_backoff,
                max_backoff=self.max_backoff,
                jitter=self.jitter,
                randomize_jitter=self.randomize_jitter,
            ),
        )

    def next_backoff(self, attempt: int) -> float:
        """Return the wait after the given failed attempt (1-indexed)."""
        return self._backoff.calculate(attempt)

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_status_codes

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with the non-None overrides applied.

        Args:
            **overrides: Policy fields to override.

        Returns:
            A new, validated ``RetryPolicy``. The current one is unchanged.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


DEFAULT_RETRY_POLICY = RetryPolicy()
