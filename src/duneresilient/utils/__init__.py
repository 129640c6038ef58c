r"""Utility functions for inspecting HTTP responses.

This package provides helpers for parsing the rate-limit and Retry-After
headers, reading a bounded snippet of a failed response body and turning
a failed response into an ``OperationError``.
"""

from __future__ import annotations

__all__ = [
    "RateLimitInfo",
    "aread_error_snippet",
    "build_operation_error",
    "extract_error_message",
    "first_header_value",
    "parse_rate_limit_headers",
    "parse_retry_after",
    "read_error_snippet",
]

from duneresilient.utils.rate_limit import (
    RateLimitInfo,
    first_header_value,
    parse_rate_limit_headers,
)
from duneresilient.utils.response import (
    aread_error_snippet,
    build_operation_error,
    extract_error_message,
    read_error_snippet,
)
from duneresilient.utils.retry_after import parse_retry_after
