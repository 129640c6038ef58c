r"""Retry strategy for calculating the wait between attempts."""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duneresilient.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy:
    """Strategy for calculating retry delays.

    The computed backoff of the policy is used unless the server asked
    for a longer wait through the Retry-After header.

    Args:
        policy: The retry policy of the current execution.

    Example:
        ```pycon
        >>> from duneresilient.retry import RetryPolicy, RetryStrategy
        >>> strategy = RetryStrategy(RetryPolicy(initial_backoff=2.0, jitter=0.0))
        >>> strategy.calculate_delay(attempt=1)
        2.0
        >>> strategy.calculate_delay(attempt=1, retry_after=120.0)
        120.0

        ```
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def calculate_delay(self, attempt: int, retry_after: float = 0.0) -> float:
        """Calculate the wait before the next attempt.

        Args:
            attempt: The attempt that just failed (1-indexed).
            retry_after: The Retry-After delay of the response, in seconds.
                0.0 if the server did not send one.

        Returns:
            ``max(backoff, retry_after)`` in seconds.
        """
        backoff = self.policy.next_backoff(attempt)
        if retry_after > backoff:
            logger.debug(
                f"Using Retry-After header value {retry_after:.2f}s "
                f"instead of computed backoff {backoff:.2f}s"
            )
            return retry_after
        return backoff
