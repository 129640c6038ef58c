r"""Default configuration values for the resilient request executor.

These constants document the out-of-the-box behaviour. They are plain
module-level values; the runtime configuration object is the immutable
``RetryPolicy`` built from them.
"""

from __future__ import annotations

__all__ = [
    "API_KEY_ENV_VAR",
    "API_KEY_HEADER",
    "DEFAULT_BASE_URL",
    "DEFAULT_INITIAL_BACKOFF",
    "DEFAULT_JITTER",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_BACKOFF",
    "DEFAULT_TIMEOUT",
    "MAX_ERROR_SNIPPET_BYTES",
    "RETRY_STATUS_CODES",
]

# Total number of attempts, including the first one
DEFAULT_MAX_ATTEMPTS = 5

# Backoff before the first retry, in seconds. Doubles on every retry.
DEFAULT_INITIAL_BACKOFF = 2.0

# Upper bound of the doubled backoff, in seconds (jitter excluded)
DEFAULT_MAX_BACKOFF = 60.0

# Fixed amount added to every backoff, in seconds
DEFAULT_JITTER = 0.25

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Default timeout in seconds for the underlying httpx client
DEFAULT_TIMEOUT = 30.0

DEFAULT_BASE_URL = "https://api.dune.com/api/v1"

# Header carrying the API credential on every request
API_KEY_HEADER = "X-DUNE-API-KEY"

# Environment variable read by the clients when no api_key is given
API_KEY_ENV_VAR = "DUNE_API_KEY"

# Upper bound on the number of bytes read from a failed response body
MAX_ERROR_SNIPPET_BYTES = 1024
