r"""duneresilient - Resilient request executor for the Dune HTTP API.

This package issues one logical API request, classifies the outcome and
transparently retries transient failures. Built on top of the httpx
library.

Key Features:
    - Automatic retry of transport failures and retryable statuses (429, 500, 502, 503, 504)
    - Exponential backoff with a hard cap and additive jitter
    - Retry-After header support, taking precedence when larger than the backoff
    - Rate-limit header snapshot attached to API errors
    - Bounded reads of error bodies and deterministic response release
    - Tagged error taxonomy (transport, decode, operation, cancelled)
    - Sync and asyncio executors and context manager clients

Example:
    ```pycon
    >>> from duneresilient import ResilientClient, RetryPolicy
    >>> with ResilientClient(
    ...     api_key="secret", policy=RetryPolicy(max_attempts=3)
    ... ) as client:  # doctest: +SKIP
    ...     rows = client.get("/query/1234/results")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "ApiRequest",
    "AsyncRequestExecutor",
    "AsyncResilientClient",
    "DecodeError",
    "DuneRequestError",
    "ErrorKind",
    "ExponentialBackoff",
    "OperationError",
    "RateLimitInfo",
    "RequestCancelledError",
    "RequestExecutor",
    "ResilientClient",
    "RetryPolicy",
    "TransportError",
    "__version__",
    "decode_json",
]

from importlib.metadata import PackageNotFoundError, version

from duneresilient.backoff import ExponentialBackoff
from duneresilient.client import ResilientClient
from duneresilient.client_async import AsyncResilientClient
from duneresilient.decode import decode_json
from duneresilient.exceptions import (
    DecodeError,
    DuneRequestError,
    ErrorKind,
    OperationError,
    RequestCancelledError,
    TransportError,
)
from duneresilient.request import ApiRequest
from duneresilient.retry import (
    DEFAULT_RETRY_POLICY,
    AsyncRequestExecutor,
    RequestExecutor,
    RetryPolicy,
)
from duneresilient.utils import RateLimitInfo

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
