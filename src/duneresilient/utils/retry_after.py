r"""Retry-After header parsing utilities."""

from __future__ import annotations

__all__ = ["parse_retry_after"]

import logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_retry_after(retry_after_header: str | None) -> float:
    """Parse the Retry-After header value from an HTTP response.

    Only the delay-seconds form (e.g. ``"120"``) is understood. A missing,
    unparseable or negative value yields ``0.0`` so that the computed
    backoff always wins in that case.

    Args:
        retry_after_header: The value of the Retry-After header as a string,
            or None if the header is not present in the response.

    Returns:
        The number of seconds the server asked the client to wait.

    Example:
        ```pycon
        >>> from duneresilient.utils import parse_retry_after
        >>> parse_retry_after("120")
        120.0
        >>> parse_retry_after(None)
        0.0
        >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT")
        0.0

        ```
    """
    if not retry_after_header:
        return 0.0
    try:
        seconds = int(retry_after_header.strip())
    except ValueError:
        logger.debug(f"Failed to parse Retry-After header: {retry_after_header!r}")
        return 0.0
    return float(max(seconds, 0))
