r"""Asynchronous request executor.

This module provides the AsyncRequestExecutor class, the asyncio
counterpart of ``RequestExecutor`` built on ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["AsyncRequestExecutor"]

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from duneresilient.decode import decode_json
from duneresilient.exceptions import DuneRequestError
from duneresilient.retry.decider import RetryDecider
from duneresilient.retry.executor_core import (
    create_decode_error,
    create_transport_error,
    prepare_request,
)
from duneresilient.retry.policy import DEFAULT_RETRY_POLICY
from duneresilient.retry.strategy import RetryStrategy
from duneresilient.utils.response import aread_error_snippet, build_operation_error

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from duneresilient.request import ApiRequest
    from duneresilient.retry.policy import RetryPolicy

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRequestExecutor:
    """Executes async requests with automatic retry logic.

    The retry protocol is the same as ``RequestExecutor``. Backoff waits
    use ``asyncio.sleep`` so other tasks run in the meantime, and attempts
    of one execution never overlap.

    Cancellation is plain asyncio task cancellation: the in-flight response
    is closed and ``asyncio.CancelledError`` propagates without any further
    attempt.

    The body of an HTTP 200 response is read before ``decode`` is called.
    ``decode`` may be a regular function or a coroutine function.

    Args:
        client: The httpx async client used as transport.
        api_key: Optional API key injected as the ``X-DUNE-API-KEY`` header.
        policy: The default retry policy of this executor.
        sleep: The coroutine function used to wait between attempts.
            Defaults to ``asyncio.sleep``.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from duneresilient.request import ApiRequest
        >>> from duneresilient.retry import AsyncRequestExecutor
        >>> async def main():
        ...     async with httpx.AsyncClient(base_url="https://api.dune.com/api/v1") as client:
        ...         executor = AsyncRequestExecutor(client, api_key="secret")
        ...         return await executor.execute(lambda: ApiRequest("GET", "/query/1234/results"))
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.policy = policy
        self._sleep = sleep

    async def execute(
        self,
        build_request: Callable[[], ApiRequest],
        decode: Callable[[httpx.Response], T | Awaitable[T]] = decode_json,
        *,
        policy: RetryPolicy | None = None,
    ) -> T:
        """Execute an async request with automatic retry logic.

        Args:
            build_request: Callable producing the request description.
                It is called once per execution.
            decode: Callable deserializing the body of an HTTP 200 response.
            policy: Optional retry policy overriding the executor default
                for this call.

        Returns:
            The value returned by ``decode``.

        Raises:
            TransportError: If no response was obtained on the last attempt.
            DecodeError: If the HTTP 200 body could not be decoded.
            OperationError: If the API answered with a non-retryable status,
                or a retryable one on the last attempt.
        """
        policy = policy or self.policy
        decider = RetryDecider(policy)
        strategy = RetryStrategy(policy)
        request = prepare_request(build_request, self.client, self.api_key)
        method, url = request.method, str(request.url)

        attempt = 1
        while True:
            try:
                response = await self.client.send(request, stream=True)
            except httpx.TransportError as exc:
                should_retry, reason = decider.should_retry_exception(exc, attempt)
                logger.debug(
                    f"{method} request to {url} encountered {type(exc).__name__} on attempt "
                    f"{attempt}/{policy.max_attempts}: {exc}"
                )
                if not should_retry:
                    logger.debug(f"{method} request to {url} failed: {reason}")
                    raise create_transport_error(exc, method, url, attempt) from exc
                await self._wait(strategy.calculate_delay(attempt), method, url)
                attempt += 1
                continue

            try:
                if response.status_code == 200:
                    if attempt > 1:
                        logger.debug(f"{method} request to {url} succeeded on attempt {attempt}")
                    return await self._decode(response, decode, method, url)
                snippet = await aread_error_snippet(response)
            finally:
                await response.aclose()

            error = build_operation_error(response, snippet, method, url)
            should_retry, reason = decider.should_retry_status(response.status_code, attempt)
            logger.debug(
                f"{method} request to {url} failed with status {response.status_code} "
                f"(attempt {attempt}/{policy.max_attempts})"
            )
            if not should_retry:
                logger.debug(f"{method} request to {url} will not be retried: {reason}")
                raise error
            await self._wait(strategy.calculate_delay(attempt, error.retry_after), method, url)
            attempt += 1

    async def _decode(
        self,
        response: httpx.Response,
        decode: Callable[[httpx.Response], T | Awaitable[T]],
        method: str,
        url: str,
    ) -> T:
        try:
            await response.aread()
            result = decode(response)
            if inspect.isawaitable(result):
                result = await result
        except DuneRequestError:
            raise
        except Exception as exc:
            raise create_decode_error(exc, method, url) from exc
        return result

    async def _wait(self, delay: float, method: str, url: str) -> None:
        logger.debug(f"Waiting {delay:.2f}s before retrying {method} request to {url}")
        await (self._sleep or asyncio.sleep)(delay)
