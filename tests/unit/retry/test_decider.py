r"""Unit tests for RetryDecider."""

from __future__ import annotations

import httpx
import pytest

from duneresilient.retry import RetryDecider, RetryPolicy


@pytest.fixture
def decider() -> RetryDecider:
    return RetryDecider(RetryPolicy(max_attempts=3, retryable_status_codes={429, 503}))


def test_retry_decider_has_attempts_left(decider: RetryDecider) -> None:
    assert decider.has_attempts_left(1)
    assert decider.has_attempts_left(2)
    assert not decider.has_attempts_left(3)


def test_retry_decider_retryable_status(decider: RetryDecider) -> None:
    assert decider.should_retry_status(503, attempt=1) == (True, "status 503")


def test_retry_decider_non_retryable_status(decider: RetryDecider) -> None:
    assert decider.should_retry_status(404, attempt=1) == (False, "non-retryable status 404")


def test_retry_decider_status_attempts_exhausted(decider: RetryDecider) -> None:
    assert decider.should_retry_status(429, attempt=3) == (False, "max attempts exhausted")


def test_retry_decider_exception(decider: RetryDecider) -> None:
    assert decider.should_retry_exception(httpx.ConnectError("refused"), attempt=2) == (
        True,
        "ConnectError",
    )


def test_retry_decider_exception_attempts_exhausted(decider: RetryDecider) -> None:
    assert decider.should_retry_exception(httpx.ReadTimeout("slow"), attempt=3) == (
        False,
        "max attempts exhausted",
    )


def test_retry_decider_single_attempt() -> None:
    decider = RetryDecider(RetryPolicy(max_attempts=1))
    assert decider.should_retry_status(503, attempt=1) == (False, "max attempts exhausted")
