from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from duneresilient.exceptions import ErrorKind
from duneresilient.utils import (
    RateLimitInfo,
    aread_error_snippet,
    build_operation_error,
    extract_error_message,
    read_error_snippet,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

TEST_URL = "https://api.example.com/v1/query/1234/results"


class FailingStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Yields one chunk, then fails like a dropped connection."""

    def __iter__(self) -> Iterator[bytes]:
        yield b"partial"
        msg = "connection dropped"
        raise httpx.ReadError(msg)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield b"partial"
        msg = "connection dropped"
        raise httpx.ReadError(msg)


########################################
#     Tests for read_error_snippet     #
########################################


def test_read_error_snippet_short_body(response_factory: Callable) -> None:
    response = response_factory(500, b"oops")
    assert read_error_snippet(response) == b"oops"


def test_read_error_snippet_empty_body(response_factory: Callable) -> None:
    assert read_error_snippet(response_factory(502)) == b""


def test_read_error_snippet_stops_at_limit(response_factory: Callable) -> None:
    response = response_factory(500, b"a" * 10_000)
    assert read_error_snippet(response) == b"a" * 1024
    assert response.stream.bytes_read == 1024


def test_read_error_snippet_truncates_large_chunk(response_factory: Callable) -> None:
    response = response_factory(500, b"a" * 65536, chunk_size=65536)
    assert read_error_snippet(response) == b"a" * 1024
    assert response.stream.bytes_read == 65536


def test_read_error_snippet_custom_limit(response_factory: Callable) -> None:
    response = response_factory(500, b"abcdefghij")
    assert read_error_snippet(response, limit=4) == b"abcd"


def test_read_error_snippet_keeps_partial_body_on_stream_error() -> None:
    response = httpx.Response(500, stream=FailingStream())
    assert read_error_snippet(response) == b"partial"


@pytest.mark.asyncio
async def test_aread_error_snippet_stops_at_limit(response_factory: Callable) -> None:
    response = response_factory(500, b"a" * 10_000)
    assert await aread_error_snippet(response) == b"a" * 1024
    assert response.stream.bytes_read == 1024


@pytest.mark.asyncio
async def test_aread_error_snippet_keeps_partial_body_on_stream_error() -> None:
    response = httpx.Response(500, stream=FailingStream())
    assert await aread_error_snippet(response) == b"partial"


###########################################
#     Tests for extract_error_message     #
###########################################


def test_extract_error_message_json_error_field() -> None:
    assert extract_error_message(b'{"error": "invalid API Key"}') == "invalid API Key"


@pytest.mark.parametrize(
    "snippet",
    [
        b"<html>Bad Gateway</html>",
        b'{"message": "no error field"}',
        b'{"error": ""}',
        b'{"error": 42}',
        b'["error"]',
        b'{"error": "trunc',
    ],
)
def test_extract_error_message_falls_back_to_raw_snippet(snippet: bytes) -> None:
    assert extract_error_message(snippet) == snippet.decode()


def test_extract_error_message_empty() -> None:
    assert extract_error_message(b"") == ""


def test_extract_error_message_invalid_utf8() -> None:
    assert extract_error_message(b"abc\xff") == "abc\ufffd"


###########################################
#     Tests for build_operation_error     #
###########################################


def test_build_operation_error() -> None:
    response = httpx.Response(
        429,
        headers={
            "Retry-After": "30",
            "X-RateLimit-Limit": "40",
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": "1700000000",
        },
    )
    error = build_operation_error(response, b'{"error": "slow down"}', "GET", TEST_URL)

    assert error.kind == ErrorKind.OPERATION
    assert error.method == "GET"
    assert error.url == TEST_URL
    assert error.status_code == 429
    assert error.status_text == "Too Many Requests"
    assert error.body_message == "slow down"
    assert error.retry_after == 30.0
    assert error.rate_limit == RateLimitInfo(limit=40, remaining=0, reset=1700000000)
    assert str(error) == "request was not successful: http 429 Too Many Requests: slow down"


def test_build_operation_error_without_headers() -> None:
    error = build_operation_error(httpx.Response(500), b"", "POST", TEST_URL)

    assert error.status_code == 500
    assert error.body_message == ""
    assert error.retry_after == 0.0
    assert error.rate_limit is None
    assert str(error) == "request was not successful: http 500 Internal Server Error"


def test_build_operation_error_repeated_retry_after_uses_first_value() -> None:
    response = httpx.Response(503, headers=[("Retry-After", "30"), ("Retry-After", "60")])
    error = build_operation_error(response, b"", "GET", TEST_URL)
    assert error.retry_after == 30.0
