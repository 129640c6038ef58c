r"""Outbound request description.

An ``ApiRequest`` is the transport-independent description produced by
the caller's ``build_request`` callable. The executor injects the
authentication header and turns it into an ``httpx.Request``.
"""

from __future__ import annotations

__all__ = ["ApiRequest", "inject_api_key"]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from duneresilient.config import API_KEY_HEADER

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class ApiRequest:
    """Description of one outbound HTTP request.

    Attributes:
        method: The HTTP method (e.g. ``"GET"``, ``"POST"``).
        url: The absolute URL, or a path relative to the client base URL.
        headers: Extra request headers.
        params: Optional query parameters.
        json: Optional JSON-serializable body.
        content: Optional raw body. Mutually exclusive with ``json``.

    Example:
        ```pycon
        >>> from duneresilient.request import ApiRequest
        >>> request = ApiRequest("POST", "/query/1234/execute", json={"performance": "medium"})
        >>> request.with_header("X-Trace", "abc").headers
        {'X-Trace': 'abc'}

        ```
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: Any = None
    content: bytes | str | None = None

    def __post_init__(self) -> None:
        if self.json is not None and self.content is not None:
            msg = "json and content cannot be set at the same time"
            raise ValueError(msg)

    def with_header(self, name: str, value: str) -> ApiRequest:
        """Return a copy of the request with one more header."""
        return replace(self, headers={**self.headers, name: value})

    def build(self, client: httpx.Client | httpx.AsyncClient) -> httpx.Request:
        """Build the ``httpx.Request`` sent by ``client``.

        The client's base URL, default headers and cookies are merged in.
        """
        return client.build_request(
            self.method.upper(),
            self.url,
            headers=self.headers,
            params=self.params,
            json=self.json,
            content=self.content,
        )


def inject_api_key(request: ApiRequest, api_key: str | None) -> ApiRequest:
    """Add the API credential header to a request.

    Args:
        request: The request to authenticate.
        api_key: The API key, or ``None`` to leave the request untouched.

    Returns:
        The authenticated request.

    Example:
        ```pycon
        >>> from duneresilient.request import ApiRequest, inject_api_key
        >>> inject_api_key(ApiRequest("GET", "/query/1/results"), "secret").headers
        {'X-DUNE-API-KEY': 'secret'}

        ```
    """
    if api_key is None:
        return request
    return request.with_header(API_KEY_HEADER, api_key)
