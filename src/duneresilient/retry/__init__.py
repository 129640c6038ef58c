r"""Retry policy and request executors.

This package contains the immutable retry policy, the components that
decide whether and how long to wait before retrying, and the sync and
async executors running the retry loop.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "AsyncRequestExecutor",
    "RequestExecutor",
    "RetryDecider",
    "RetryPolicy",
    "RetryStrategy",
]

from duneresilient.retry.decider import RetryDecider
from duneresilient.retry.executor import RequestExecutor
from duneresilient.retry.executor_async import AsyncRequestExecutor
from duneresilient.retry.policy import DEFAULT_RETRY_POLICY, RetryPolicy
from duneresilient.retry.strategy import RetryStrategy
