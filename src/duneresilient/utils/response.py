r"""HTTP response inspection utilities.

This module turns a failed HTTP response into an ``OperationError``: it
reads a bounded snippet of the body, extracts the API error message and
collects the rate-limit and Retry-After headers.
"""

from __future__ import annotations

__all__ = [
    "aread_error_snippet",
    "build_operation_error",
    "extract_error_message",
    "read_error_snippet",
]

import json
import logging

import httpx

from duneresilient.config import MAX_ERROR_SNIPPET_BYTES
from duneresilient.exceptions import OperationError
from duneresilient.utils.rate_limit import first_header_value, parse_rate_limit_headers
from duneresilient.utils.retry_after import parse_retry_after

logger: logging.Logger = logging.getLogger(__name__)


def _append_bounded(buffer: bytearray, chunk: bytes, limit: int) -> bool:
    buffer.extend(chunk[: limit - len(buffer)])
    return len(buffer) >= limit


def read_error_snippet(response: httpx.Response, limit: int = MAX_ERROR_SNIPPET_BYTES) -> bytes:
    """Read at most ``limit`` bytes from the body of a response.

    The body is consumed chunk by chunk and reading stops as soon as the
    limit is reached, so the rest of a huge error page is never downloaded.
    The bound applies to the bytes kept, not to the bytes received: the
    chunk that crosses the limit is held in full before it is truncated.
    That chunk is one network read, or its decompressed form when the body
    is content-encoded, and can be much larger than ``limit``. A stream
    failure while reading keeps the bytes received so far. The response is
    not closed by this function.

    Args:
        response: The (usually streamed) HTTP response to read from.
        limit: The maximum number of bytes to return.

    Returns:
        The first ``limit`` bytes of the body, or fewer if the body is shorter.

    Example:
        ```pycon
        >>> import httpx
        >>> from duneresilient.utils import read_error_snippet
        >>> response = httpx.Response(500, content=b"x" * 5000)
        >>> len(read_error_snippet(response))
        1024

        ```
    """
    buffer = bytearray()
    try:
        for chunk in response.iter_bytes():
            if _append_bounded(buffer, chunk, limit):
                break
    except httpx.HTTPError as exc:
        logger.debug(f"Stopped reading error body after {len(buffer)} bytes: {exc}")
    return bytes(buffer)


async def aread_error_snippet(
    response: httpx.Response, limit: int = MAX_ERROR_SNIPPET_BYTES
) -> bytes:
    """Asynchronous counterpart of ``read_error_snippet``.

    Args:
        response: The streamed HTTP response to read from.
        limit: The maximum number of bytes to return.

    Returns:
        The first ``limit`` bytes of the body, or fewer if the body is shorter.
    """
    buffer = bytearray()
    try:
        async for chunk in response.aiter_bytes():
            if _append_bounded(buffer, chunk, limit):
                break
    except httpx.HTTPError as exc:
        logger.debug(f"Stopped reading error body after {len(buffer)} bytes: {exc}")
    return bytes(buffer)


def extract_error_message(snippet: bytes) -> str:
    """Extract the API error message from a body snippet.

    The API reports failures as ``{"error": "..."}``. If the snippet is such
    an object with a non-empty string ``error`` field, that field is the
    message. Otherwise the raw snippet is used, decoded as UTF-8 with
    replacement characters for invalid or truncated sequences.

    Args:
        snippet: The (possibly truncated) response body.

    Returns:
        The error message.

    Example:
        ```pycon
        >>> from duneresilient.utils import extract_error_message
        >>> extract_error_message(b'{"error": "invalid API Key"}')
        'invalid API Key'
        >>> extract_error_message(b"<html>Bad Gateway</html>")
        '<html>Bad Gateway</html>'

        ```
    """
    try:
        payload = json.loads(snippet)
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
    return snippet.decode("utf-8", errors="replace")


def build_operation_error(
    response: httpx.Response, snippet: bytes, method: str, url: str
) -> OperationError:
    """Create the ``OperationError`` describing a failed response.

    Args:
        response: The non-200 HTTP response. Only its status and headers
            are used.
        snippet: The bounded body snippet read from the response.
        method: The HTTP method of the request.
        url: The URL of the request.

    Returns:
        The error carrying status, message, rate-limit snapshot and
        Retry-After delay.

    Example:
        ```pycon
        >>> import httpx
        >>> from duneresilient.utils import build_operation_error
        >>> response = httpx.Response(429, headers={"Retry-After": "30"})
        >>> error = build_operation_error(
        ...     response, b'{"error": "slow down"}', method="GET", url="https://example.com"
        ... )
        >>> error.status_code, error.body_message, error.retry_after
        (429, 'slow down', 30.0)

        ```
    """
    return OperationError(
        method=method,
        url=url,
        status_code=response.status_code,
        status_text=response.reason_phrase,
        message=extract_error_message(snippet),
        rate_limit=parse_rate_limit_headers(response.headers),
        retry_after=parse_retry_after(first_header_value(response.headers, "Retry-After")),
    )

