from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Generator, Iterator

TEST_BASE_URL = "https://api.example.com/v1"


class TrackingStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Response body that records how many bytes were consumed and how
    many times it was closed."""

    def __init__(self, body: bytes = b"", chunk_size: int = 256) -> None:
        self.body = body
        self.chunk_size = chunk_size
        self.bytes_read = 0
        self.close_count = 0

    def _chunks(self) -> Iterator[bytes]:
        for start in range(0, len(self.body), self.chunk_size):
            chunk = self.body[start : start + self.chunk_size]
            self.bytes_read += len(chunk)
            yield chunk

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks():
            yield chunk

    def close(self) -> None:
        self.close_count += 1

    async def aclose(self) -> None:
        self.close_count += 1


class ScriptedTransport:
    """Replays a scripted list of responses and exceptions, one per
    request."""

    def __init__(self, outcomes: list[httpx.Response | Exception]) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []
        self.streams: list[TrackingStream] = [
            outcome.stream
            for outcome in outcomes
            if isinstance(outcome, httpx.Response) and isinstance(outcome.stream, TrackingStream)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_response(
    status_code: int,
    body: bytes = b"",
    headers: dict[str, str] | list[tuple[str, str]] | None = None,
    chunk_size: int = 256,
) -> httpx.Response:
    """Create a response whose body is a ``TrackingStream``."""
    return httpx.Response(
        status_code, headers=headers, stream=TrackingStream(body, chunk_size=chunk_size)
    )


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def response_factory() -> Callable[..., httpx.Response]:
    """Return the factory creating responses with a tracked body."""
    return make_response


@pytest.fixture
def scripted_transport() -> Callable[
    [list[httpx.Response | Exception]], tuple[httpx.MockTransport, ScriptedTransport]
]:
    """Return a factory creating a mock transport that replays the given
    outcomes."""

    def factory(
        outcomes: list[httpx.Response | Exception],
    ) -> tuple[httpx.MockTransport, ScriptedTransport]:
        script = ScriptedTransport(outcomes)
        return httpx.MockTransport(script), script

    return factory


@pytest.fixture
def scripted_client() -> Callable[[list[httpx.Response | Exception]], tuple[httpx.Client, ScriptedTransport]]:
    """Return a factory creating an httpx.Client that replays the given
    outcomes."""

    def factory(
        outcomes: list[httpx.Response | Exception],
    ) -> tuple[httpx.Client, ScriptedTransport]:
        script = ScriptedTransport(outcomes)
        client = httpx.Client(base_url=TEST_BASE_URL, transport=httpx.MockTransport(script))
        return client, script

    return factory


@pytest.fixture
def scripted_async_client() -> Callable[
    [list[httpx.Response | Exception]], tuple[httpx.AsyncClient, ScriptedTransport]
]:
    """Return a factory creating an httpx.AsyncClient that replays the
    given outcomes."""

    def factory(
        outcomes: list[httpx.Response | Exception],
    ) -> tuple[httpx.AsyncClient, ScriptedTransport]:
        script = ScriptedTransport(outcomes)
        client = httpx.AsyncClient(base_url=TEST_BASE_URL, transport=httpx.MockTransport(script))
        return client, script

    return factory
