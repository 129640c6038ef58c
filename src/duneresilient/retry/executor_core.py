r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
the asynchronous request executors.
"""

from __future__ import annotations

__all__ = [
    "create_cancelled_error",
    "create_decode_error",
    "create_transport_error",
    "prepare_request",
]

from typing import TYPE_CHECKING

import httpx

from duneresilient.exceptions import DecodeError, RequestCancelledError, TransportError
from duneresilient.request import inject_api_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from duneresilient.request import ApiRequest


def prepare_request(
    build_request: Callable[[], ApiRequest],
    client: httpx.Client | httpx.AsyncClient,
    api_key: str | None,
) -> httpx.Request:
    """Build the authenticated request sent on every attempt.

    Args:
        build_request: Callable producing the request description.
        client: The client whose base URL and defaults apply.
        api_key: The API key to inject, if any.

    Returns:
        The ``httpx.Request`` reused across attempts.
    """
    return inject_api_key(build_request(), api_key).build(client)


def create_transport_error(
    exc: Exception,
    method: str,
    url: str,
    attempts: int,
) -> TransportError:
    """Create TransportError from a transport exception.

    Args:
        exc: The exception raised by the transport.
        method: The HTTP method being used.
        url: The URL being requested.
        attempts: The number of attempts made.

    Returns:
        TransportError with appropriate message.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(
            method=method,
            url=url,
            message=f"{method} request to {url} timed out ({attempts} attempts)",
        )
    return TransportError(
        method=method,
        url=url,
        message=f"failed to send {method} request to {url} after {attempts} attempts: {exc}",
    )


def create_decode_error(exc: Exception, method: str, url: str) -> DecodeError:
    return DecodeError(
        method=method,
        url=url,
        message=f"failed to parse response of {method} request to {url}: {exc}",
    )


def create_cancelled_error(method: str, url: str, attempt: int) -> RequestCancelledError:
    return RequestCancelledError(
        method=method,
        url=url,
        message=f"{method} request to {url} was cancelled at attempt {attempt}",
    )
