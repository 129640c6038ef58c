r"""Exceptions raised by the resilient request executor.

Every terminal failure is a ``DuneRequestError`` whose ``kind`` attribute
tells callers which branch of the taxonomy they are dealing with:

- ``ErrorKind.TRANSPORT``: no response was obtained (connection error,
  timeout), retried until the attempts were exhausted.
- ``ErrorKind.DECODE``: the response was a 200 but its body could not be
  deserialized. Never retried.
- ``ErrorKind.OPERATION``: the API answered with a non-200 status. This is
  the "request was not successful" kind.
- ``ErrorKind.CANCELLED``: the caller cancelled the call before it finished.
"""

from __future__ import annotations

__all__ = [
    "DecodeError",
    "DuneRequestError",
    "ErrorKind",
    "OperationError",
    "RequestCancelledError",
    "TransportError",
]

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duneresilient.utils.rate_limit import RateLimitInfo


class ErrorKind(str, Enum):
    """Discriminant of the error taxonomy."""

    TRANSPORT = "transport"
    DECODE = "decode"
    OPERATION = "operation"
    CANCELLED = "cancelled"


class DuneRequestError(Exception):
    """Base class of every error surfaced by the executor.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: A human readable description of the failure.
        kind: The branch of the error taxonomy.

    Example:
        ```pycon
        >>> from duneresilient.exceptions import DuneRequestError, ErrorKind
        >>> error = DuneRequestError(
        ...     method="GET",
        ...     url="https://api.dune.com/api/v1/query/1",
        ...     message="boom",
        ...     kind=ErrorKind.TRANSPORT,
        ... )
        >>> error.kind
        <ErrorKind.TRANSPORT: 'transport'>

        ```
    """

    def __init__(self, method: str, url: str, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.kind = kind

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(kind={self.kind.value}, method={self.method}, "
            f"url={self.url}, message={self.message!r})"
        )


class TransportError(DuneRequestError):
    """Raised when no response could be obtained after the last
    attempt.

    The underlying ``httpx`` exception is available as ``__cause__``.
    """

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(method=method, url=url, message=message, kind=ErrorKind.TRANSPORT)


class DecodeError(DuneRequestError):
    """Raised when a successful response body cannot be decoded."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(method=method, url=url, message=message, kind=ErrorKind.DECODE)


class RequestCancelledError(DuneRequestError):
    """Raised when the caller cancels an in-progress execution."""

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(method=method, url=url, message=message, kind=ErrorKind.CANCELLED)


class OperationError(DuneRequestError):
    """Raised when the API rejected the request with a non-200 status.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        status_code: The HTTP status code of the last response.
        status_text: The reason phrase of the last response.
        message: The ``error`` field of the JSON error payload, or the raw
            body snippet when the payload could not be parsed. Stored as
            ``body_message``; ``message`` holds the full error summary.
        rate_limit: The rate-limit counters of the last response, if any.
        retry_after: The server-requested wait in seconds (0.0 if absent).

    Example:
        ```pycon
        >>> from duneresilient.exceptions import OperationError
        >>> error = OperationError(
        ...     method="GET",
        ...     url="https://api.dune.com/api/v1/query/1",
        ...     status_code=404,
        ...     status_text="Not Found",
        ...     message="query not found",
        ... )
        >>> str(error)
        'request was not successful: http 404 Not Found: query not found'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        status_text: str,
        message: str = "",
        rate_limit: RateLimitInfo | None = None,
        retry_after: float = 0.0,
    ) -> None:
        summary = f"http {status_code} {status_text}".rstrip()
        if message:
            summary = f"{summary}: {message}"
        super().__init__(
            method=method,
            url=url,
            message=f"request was not successful: {summary}",
            kind=ErrorKind.OPERATION,
        )
        self.status_code = status_code
        self.status_text = status_text
        self.body_message = message
        self.rate_limit = rate_limit
        self.retry_after = retry_after
