r"""Synchronous request executor.

This module provides the RequestExecutor class that drives one logical
request through the bounded retry loop on top of an ``httpx.Client``.
"""

from __future__ import annotations

__all__ = ["RequestExecutor"]

import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from duneresilient.decode import decode_json
from duneresilient.exceptions import DuneRequestError
from duneresilient.retry.decider import RetryDecider
from duneresilient.retry.executor_core import (
    create_cancelled_error,
    create_decode_error,
    create_transport_error,
    prepare_request,
)
from duneresilient.retry.policy import DEFAULT_RETRY_POLICY
from duneresilient.retry.strategy import RetryStrategy
from duneresilient.utils.response import build_operation_error, read_error_snippet

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable

    from duneresilient.request import ApiRequest
    from duneresilient.retry.policy import RetryPolicy

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RequestExecutor:
    """Executes requests with automatic retry logic.

    Each call to ``execute`` runs synchronously on the calling thread and
    blocks during backoff waits. The executor holds no per-call state, so
    one instance can serve concurrent calls from several threads.

    The per-attempt protocol is:

    - transport failure (``httpx.TransportError``): retried after the
      computed backoff while attempts remain, then ``TransportError``.
    - HTTP 200: the body is read and the response is handed to ``decode``;
      a read or decoding failure raises ``DecodeError`` and is never retried.
    - any other status: at most 1024 bytes of the body are kept and an
      ``OperationError`` is built. Retryable statuses are retried after
      ``max(backoff, Retry-After)`` while attempts remain; otherwise the
      ``OperationError`` is raised.

    Every response is closed before the executor returns or retries.

    Args:
        client: The httpx client used as transport.
        api_key: Optional API key injected as the ``X-DUNE-API-KEY`` header.
        policy: The default retry policy of this executor.
        sleep: The function used to wait between attempts.
            Defaults to ``time.sleep``.

    Example:
        ```pycon
        >>> import httpx
        >>> from duneresilient.request import ApiRequest
        >>> from duneresilient.retry import RequestExecutor
        >>> with httpx.Client(base_url="https://api.dune.com/api/v1") as client:  # doctest: +SKIP
        ...     executor = RequestExecutor(client, api_key="secret")
        ...     rows = executor.execute(lambda: ApiRequest("GET", "/query/1234/results"))
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client,
        *,
        api_key: str | None = None,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Callable[[float], Any] | None = None,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.policy = policy
        self._sleep = sleep

    def execute(
        self,
        build_request: Callable[[], ApiRequest],
        decode: Callable[[httpx.Response], T] = decode_json,
        *,
        policy: RetryPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ) -> T:
        """Execute a request with automatic retry logic.

        Args:
            build_request: Callable producing the request description.
                It is called once per execution.
            decode: Callable deserializing the body of an HTTP 200 response.
            policy: Optional retry policy overriding the executor default
                for this call.
            cancel_event: Optional event. Once set, no new attempt is started
                and any pending wait is interrupted.

        Returns:
            The value returned by ``decode``.

        Raises:
            TransportError: If no response was obtained on the last attempt.
            DecodeError: If the HTTP 200 body could not be decoded.
            OperationError: If the API answered with a non-retryable status,
                or a retryable one on the last attempt.
            RequestCancelledError: If ``cancel_event`` was set.
        """
        policy = policy or self.policy
        decider = RetryDecider(policy)
        strategy = RetryStrategy(policy)
        request = prepare_request(build_request, self.client, self.api_key)
        method, url = request.method, str(request.url)

        attempt = 1
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise create_cancelled_error(method, url, attempt)

            try:
                response = self.client.send(request, stream=True)
            except httpx.TransportError as exc:
                should_retry, reason = decider.should_retry_exception(exc, attempt)
                logger.debug(
                    f"{method} request to {url} encountered {type(exc).__name__} on attempt "
                    f"{attempt}/{policy.max_attempts}: {exc}"
                )
                if not should_retry:
                    logger.debug(f"{method} request to {url} failed: {reason}")
                    raise create_transport_error(exc, method, url, attempt) from exc
                self._wait(strategy.calculate_delay(attempt), cancel_event, method, url, attempt)
                attempt += 1
                continue

            try:
                if response.status_code == 200:
                    if attempt > 1:
                        logger.debug(f"{method} request to {url} succeeded on attempt {attempt}")
                    return self._decode(response, decode, method, url)
                snippet = read_error_snippet(response)
            finally:
                response.close()

            error = build_operation_error(response, snippet, method, url)
            should_retry, reason = decider.should_retry_status(response.status_code, attempt)
            logger.debug(
                f"{method} request to {url} failed with status {response.status_code} "
                f"(attempt {attempt}/{policy.max_attempts})"
            )
            if not should_retry:
                logger.debug(f"{method} request to {url} will not be retried: {reason}")
                raise error
            self._wait(
                strategy.calculate_delay(attempt, error.retry_after),
                cancel_event,
                method,
                url,
                attempt,
            )
            attempt += 1

    def _decode(
        self,
        response: httpx.Response,
        decode: Callable[[httpx.Response], T],
        method: str,
        url: str,
    ) -> T:
        try:
            response.read()
            return decode(response)
        except DuneRequestError:
            raise
        except Exception as exc:
            raise create_decode_error(exc, method, url) from exc

    def _wait(
        self,
        delay: float,
        cancel_event: threading.Event | None,
        method: str,
        url: str,
        attempt: int,
    ) -> None:
        logger.debug(f"Waiting {delay:.2f}s before retrying {method} request to {url}")
        if cancel_event is None:
            (self._sleep or time.sleep)(delay)
        elif cancel_event.wait(delay):
            raise create_cancelled_error(method, url, attempt)
