r"""Rate-limit header parsing utilities.

This module extracts the ``X-RateLimit-*`` counters that the API attaches
to its responses.
"""

from __future__ import annotations

__all__ = ["RateLimitInfo", "first_header_value", "parse_rate_limit_headers"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


@dataclass(frozen=True)
class RateLimitInfo:
    """Snapshot of the rate-limit counters of one response.

    Attributes:
        limit: The request quota of the current window.
        remaining: The number of requests left in the current window.
        reset: The Unix timestamp at which the window resets.
    """

    limit: int
    remaining: int
    reset: int


def first_header_value(headers: httpx.Headers | Mapping[str, str], name: str) -> str | None:
    """Return the first value of a possibly repeated header.

    ``httpx.Headers.get`` joins repeated headers with commas, which turns
    two ``X-RateLimit-Limit: 40`` lines into ``"40, 40"``. Only the first
    occurrence is used instead.

    Args:
        headers: The response headers.
        name: The header name, matched case-insensitively.

    Returns:
        The first value, or ``None`` if the header is absent.

    Example:
        ```pycon
        >>> import httpx
        >>> from duneresilient.utils import first_header_value
        >>> headers = httpx.Headers([("Retry-After", "5"), ("Retry-After", "9")])
        >>> first_header_value(headers, "retry-after")
        '5'

        ```
    """
    values = httpx.Headers(headers).get_list(name)
    return values[0] if values else None


def _parse_int_header(headers: httpx.Headers | Mapping[str, str], name: str) -> int:
    value = first_header_value(headers, name)
    if not value:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        logger.debug(f"Ignoring unparseable {name} header: {value!r}")
        return 0


def parse_rate_limit_headers(
    headers: httpx.Headers | Mapping[str, str],
) -> RateLimitInfo | None:
    """Parse the rate-limit headers of an HTTP response.

    Missing, empty or non-integer header values count as 0. A repeated
    header contributes its first value only. When all three values are 0
    the headers are treated as absent and ``None`` is returned, which means
    a response carrying only ``X-RateLimit-Remaining: 0`` is
    indistinguishable from one without rate-limit headers.

    Args:
        headers: The response headers. ``httpx.Headers`` performs
            case-insensitive lookups.

    Returns:
        The parsed counters, or ``None`` if every value is 0.

    Example:
        ```pycon
        >>> from duneresilient.utils import parse_rate_limit_headers
        >>> parse_rate_limit_headers(
        ...     {"X-RateLimit-Limit": "40", "X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}
        ... )
        RateLimitInfo(limit=40, remaining=0, reset=1700000000)
        >>> parse_rate_limit_headers({}) is None
        True

        ```
    """
    limit = _parse_int_header(headers, LIMIT_HEADER)
    remaining = _parse_int_header(headers, REMAINING_HEADER)
    reset = _parse_int_header(headers, RESET_HEADER)
    if limit == 0 and remaining == 0 and reset == 0:
        return None
    return RateLimitInfo(limit=limit, remaining=remaining, reset=reset)
