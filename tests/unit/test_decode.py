from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from duneresilient.decode import decode_json

if TYPE_CHECKING:
    from collections.abc import Callable

#################################
#     Tests for decode_json     #
#################################


def test_decode_json() -> None:
    assert decode_json(httpx.Response(200, json={"execution_id": "01H"})) == {
        "execution_id": "01H"
    }


def test_decode_json_streamed_body(response_factory: Callable) -> None:
    response = response_factory(200, b'{"rows": [1, 2, 3]}')
    assert decode_json(response) == {"rows": [1, 2, 3]}


def test_decode_json_invalid() -> None:
    with pytest.raises(ValueError):
        decode_json(httpx.Response(200, content=b"<html></html>"))
