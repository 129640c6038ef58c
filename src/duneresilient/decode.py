r"""Default decode collaborator for successful responses."""

from __future__ import annotations

__all__ = ["decode_json"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


def decode_json(response: httpx.Response) -> Any:
    """Deserialize the JSON body of a successful response.

    Args:
        response: The HTTP 200 response. A streamed body is read first.

    Returns:
        The decoded JSON document.

    Raises:
        ValueError: If the body is not valid JSON. The executor reports it
            as a ``DecodeError``.

    Example:
        ```pycon
        >>> import httpx
        >>> from duneresilient.decode import decode_json
        >>> decode_json(httpx.Response(200, json={"execution_id": "01H"}))
        {'execution_id': '01H'}

        ```
    """
    response.read()
    return response.json()
