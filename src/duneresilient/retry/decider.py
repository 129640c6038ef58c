r"""Retry decision logic.

This module provides the RetryDecider class that decides whether a
failed attempt should be retried, based on the retry policy and the
current attempt number.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duneresilient.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        policy: The retry policy of the current execution.
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def has_attempts_left(self, attempt: int) -> bool:
        return attempt < self.policy.max_attempts

    def should_retry_status(self, status_code: int, attempt: int) -> tuple[bool, str]:
        """Determine if a non-200 response should trigger a retry.

        Args:
            status_code: The HTTP status code of the response.
            attempt: Current attempt number (1-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.policy.is_retryable_status(status_code):
            return (False, f"non-retryable status {status_code}")
        if not self.has_attempts_left(attempt):
            return (False, "max attempts exhausted")
        return (True, f"status {status_code}")

    def should_retry_exception(self, exception: Exception, attempt: int) -> tuple[bool, str]:
        """Determine if a transport failure should trigger a retry.

        Args:
            exception: The transport exception raised by the client.
            attempt: Current attempt number (1-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.has_attempts_left(attempt):
            return (False, "max attempts exhausted")
        return (True, type(exception).__name__)
