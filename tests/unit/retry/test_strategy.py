r"""Unit tests for RetryStrategy."""

from __future__ import annotations

import pytest

from duneresilient.retry import RetryPolicy, RetryStrategy


@pytest.fixture
def strategy() -> RetryStrategy:
    return RetryStrategy(RetryPolicy(initial_backoff=2.0, max_backoff=60.0, jitter=0.25))


def test_retry_strategy_uses_backoff_without_retry_after(strategy: RetryStrategy) -> None:
    assert strategy.calculate_delay(attempt=1) == 2.25
    assert strategy.calculate_delay(attempt=3) == 8.25


def test_retry_strategy_retry_after_larger(strategy: RetryStrategy) -> None:
    assert strategy.calculate_delay(attempt=1, retry_after=120.0) == 120.0


def test_retry_strategy_retry_after_smaller(strategy: RetryStrategy) -> None:
    assert strategy.calculate_delay(attempt=4, retry_after=5.0) == 16.25


def test_retry_strategy_retry_after_equal(strategy: RetryStrategy) -> None:
    assert strategy.calculate_delay(attempt=1, retry_after=2.25) == 2.25
