r"""Parameter validation utilities for retry policies and clients.

All checks run when a policy, backoff strategy or client is constructed so that
configuration errors never surface in the middle of a retry loop.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_retry_policy_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from duneresilient.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_backoff_params(initial_backoff: float, max_backoff: float, jitter: float) -> None:
    """Validate the bounds of an exponential backoff schedule.

    Args:
        initial_backoff: Delay before the first retry, in seconds. Must be > 0.
        max_backoff: Cap of the doubled delay, in seconds. Must be >= initial_backoff.
        jitter: Amount added to every delay, in seconds. Must be >= 0.

    Raises:
        ValueError: If any bound is out of range.

    Example:
        ```pycon
        >>> from duneresilient.validation import validate_backoff_params
        >>> validate_backoff_params(initial_backoff=2.0, max_backoff=60.0, jitter=0.25)
        >>> validate_backoff_params(initial_backoff=0, max_backoff=60.0, jitter=0.0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: initial_backoff must be > 0, got 0

        ```
    """
    if initial_backoff <= 0:
        msg = f"initial_backoff must be > 0, got {initial_backoff}"
        raise ValueError(msg)
    if max_backoff <= 0:
        msg = f"max_backoff must be > 0, got {max_backoff}"
        raise ValueError(msg)
    if max_backoff < initial_backoff:
        msg = (
            f"max_backoff must be >= initial_backoff, got max_backoff={max_backoff} "
            f"and initial_backoff={initial_backoff}"
        )
        raise ValueError(msg)
    if jitter < 0:
        msg = f"jitter must be >= 0, got {jitter}"
        raise ValueError(msg)


def validate_retry_policy_params(
    max_attempts: int,
    initial_backoff: float,
    max_backoff: float,
    jitter: float,
    retryable_status_codes: Iterable[int],
) -> None:
    """Validate the parameters of a retry policy.

    Args:
        max_attempts: Total number of attempts, including the first one.
            Must be >= 1.
        initial_backoff: Delay before the first retry, in seconds.
        max_backoff: Cap of the doubled delay, in seconds.
        jitter: Amount added to every delay, in seconds.
        retryable_status_codes: HTTP status codes considered transient.
            Every code must be an integer in the 100-599 range.

    Raises:
        ValueError: If any parameter fails validation.

    Example:
        ```pycon
        >>> from duneresilient.validation import validate_retry_policy_params
        >>> validate_retry_policy_params(
        ...     max_attempts=5,
        ...     initial_backoff=2.0,
        ...     max_backoff=60.0,
        ...     jitter=0.25,
        ...     retryable_status_codes={429, 503},
        ... )

        ```
    """
    if max_attempts < 1:
        msg = f"max_attempts must be >= 1, got {max_attempts}"
        raise ValueError(msg)
    validate_backoff_params(initial_backoff=initial_backoff, max_backoff=max_backoff, jitter=jitter)
    for code in retryable_status_codes:
        if not isinstance(code, int) or not 100 <= code <= 599:
            msg = f"retryable_status_codes must contain HTTP status codes, got {code!r}"
            raise ValueError(msg)
