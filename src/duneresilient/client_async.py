r"""Asynchronous context manager client for resilient API requests.

This module provides the asyncio counterpart of ``ResilientClient``,
built on ``httpx.AsyncClient`` and ``AsyncRequestExecutor``.
"""

from __future__ import annotations

__all__ = ["AsyncResilientClient"]

import os
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from duneresilient.config import API_KEY_ENV_VAR, DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from duneresilient.decode import decode_json
from duneresilient.request import ApiRequest
from duneresilient.retry.executor_async import AsyncRequestExecutor
from duneresilient.retry.policy import DEFAULT_RETRY_POLICY
from duneresilient.validation import validate_timeout

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType
    from typing import Self

    from duneresilient.retry.policy import RetryPolicy

T = TypeVar("T")


class AsyncResilientClient:
    r"""Asynchronous context manager for resilient API requests.

    Args:
        api_key: The API key sent as ``X-DUNE-API-KEY``. Defaults to the
            ``DUNE_API_KEY`` environment variable.
        policy: The retry policy shared by every request of this client.
        client: Optional httpx.AsyncClient instance to use for requests.
            If ``None``, a new client is created with ``base_url`` and
            ``timeout`` that follows redirects. A client passed in is never
            closed on exit.
        base_url: Base URL of the default client.
        timeout: Timeout in seconds of the default client.
        transport: Optional transport of the default client. Ignored when
            ``client`` is given.

    Example:
        ```pycon
        >>> import asyncio
        >>> from duneresilient import AsyncResilientClient
        >>> async def main():
        ...     async with AsyncResilientClient(api_key="secret") as client:
        ...         return await client.get("/query/1234/results")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        client: httpx.AsyncClient | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, follow_redirects=True, transport=transport
        )
        self._owns_client = client is None
        self._close_client = False
        self._executor = AsyncRequestExecutor(
            self._client,
            api_key=api_key if api_key is not None else os.environ.get(API_KEY_ENV_VAR),
            policy=policy,
        )

    @property
    def policy(self) -> RetryPolicy:
        return self._executor.policy

    async def __aenter__(self) -> Self:
        if self._owns_client and not self._close_client:
            await self._client.__aenter__()
            self._close_client = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._close_client:
            await self._client.__aexit__(exc_type, exc_val, exc_tb)
            self._close_client = False

    async def execute(
        self,
        build_request: Callable[[], ApiRequest],
        decode: Callable[[httpx.Response], T | Awaitable[T]] = decode_json,
        *,
        policy: RetryPolicy | None = None,
    ) -> T:
        """Execute a request description with automatic retry logic.

        See ``AsyncRequestExecutor.execute`` for the arguments and errors.
        """
        return await self._executor.execute(build_request, decode, policy=policy)

    async def request(
        self,
        method: str,
        url: str,
        *,
        decode: Callable[[httpx.Response], Any] = decode_json,
        policy: RetryPolicy | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send an API request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, ...).
            url: The URL, absolute or relative to the base URL.
            decode: Callable deserializing the HTTP 200 response.
            policy: Optional retry policy overriding the client policy.
            **kwargs: Additional ``ApiRequest`` fields (headers, params,
                json, content).

        Returns:
            The decoded response body.
        """
        return await self.execute(lambda: ApiRequest(method, url, **kwargs), decode, policy=policy)

    async def get(self, url: str, **kwargs: Any) -> Any:
        """Send a GET request with automatic retry logic."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> Any:
        """Send a POST request with automatic retry logic."""
        return await self.request("POST", url, **kwargs)
