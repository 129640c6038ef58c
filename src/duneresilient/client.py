r"""Synchronous context manager client for resilient API requests.

This module provides a context manager-based client for making multiple
API requests with a shared API key and retry policy. The ResilientClient
manages the underlying httpx.Client lifecycle when it creates it.
"""

from __future__ import annotations

__all__ = ["ResilientClient"]

import os
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from duneresilient.config import API_KEY_ENV_VAR, DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from duneresilient.decode import decode_json
from duneresilient.request import ApiRequest
from duneresilient.retry.executor import RequestExecutor
from duneresilient.retry.policy import DEFAULT_RETRY_POLICY
from duneresilient.validation import validate_timeout

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from duneresilient.retry.policy import RetryPolicy

T = TypeVar("T")


class ResilientClient:
    r"""Synchronous context manager for resilient API requests.

    Two usage patterns are supported:

    **External lifecycle management**: an ``httpx.Client`` is passed
    in and ``ResilientClient`` does *not* close it on exit.

    .. code-block:: python

        import httpx
        from duneresilient import ResilientClient

        with httpx.Client(base_url="https://api.dune.com/api/v1") as http_client:
            with ResilientClient(api_key="secret", client=http_client) as client:
                rows = client.get("/query/1234/results")

    **ResilientClient manages the lifecycle**: the client is omitted, a
    default one is created and ``ResilientClient`` opens and closes it.

    .. code-block:: python

        from duneresilient import ResilientClient, RetryPolicy

        with ResilientClient(api_key="secret", policy=RetryPolicy(max_attempts=3)) as client:
            execution = client.post("/query/1234/execute", json={"performance": "medium"})

    Args:
        api_key: The API key sent as ``X-DUNE-API-KEY``. Defaults to the
            ``DUNE_API_KEY`` environment variable.
        policy: The retry policy shared by every request of this client.
        client: Optional httpx.Client instance to use for requests.
            If ``None``, a new client is created with ``base_url`` and
            ``timeout`` that follows redirects.
        base_url: Base URL of the default client.
        timeout: Timeout in seconds of the default client.
        transport: Optional transport of the default client. Ignored when
            ``client`` is given.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        client: httpx.Client | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._client: httpx.Client = client or httpx.Client(
            base_url=base_url, timeout=timeout, follow_redirects=True, transport=transport
        )
        self._owns_client = client is None
        self._close_client = False
        self._executor = RequestExecutor(
            self._client,
            api_key=api_key if api_key is not None else os.environ.get(API_KEY_ENV_VAR),
            policy=policy,
        )

    @property
    def policy(self) -> RetryPolicy:
        return self._executor.policy

    def __enter__(self) -> Self:
        """Enter the context manager.

        If the underlying ``httpx.Client`` was created by this instance, it is
        entered and closed when this context manager exits.

        Returns:
            The ResilientClient instance for making requests.
        """
        if self._owns_client and not self._close_client:
            self._client.__enter__()
            self._close_client = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._close_client:
            self._client.__exit__(exc_type, exc_val, exc_tb)
            self._close_client = False

    def execute(
        self,
        build_request: Callable[[], ApiRequest],
        decode: Callable[[httpx.Response], T] = decode_json,
        *,
        policy: RetryPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T:
        """Execute a request description with automatic retry logic.

        See ``RequestExecutor.execute`` for the arguments and errors.
        """
        return self._executor.execute(
            build_request, decode, policy=policy, cancel_event=cancel_event
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        decode: Callable[[httpx.Response], T] = decode_json,
        policy: RetryPolicy | None = None,
        **kwargs: Any,
    ) -> T:
        r"""Send an API request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, ...).
            url: The URL, absolute or relative to the base URL.
            decode: Callable deserializing the HTTP 200 response.
            policy: Optional retry policy overriding the client policy.
            **kwargs: Additional ``ApiRequest`` fields (headers, params,
                json, content).

        Returns:
            The decoded response body.

        Raises:
            DuneRequestError: If the request fails. Check ``kind`` to tell
                transport, decode and API failures apart.

        Example:
            ```pycon
            >>> from duneresilient import ResilientClient
            >>> with ResilientClient(api_key="secret") as client:  # doctest: +SKIP
            ...     status = client.request("GET", "/execution/01H/status")
            ...

            ```
        """
        return self.execute(lambda: ApiRequest(method, url, **kwargs), decode, policy=policy)

    def get(self, url: str, **kwargs: Any) -> Any:
        """Send a GET request with automatic retry logic."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        """Send a POST request with automatic retry logic."""
        return self.request("POST", url, **kwargs)
