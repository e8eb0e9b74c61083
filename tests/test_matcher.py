from __future__ import annotations

from typing import Any

import httpx
import pytest

from galaxybank.clients.matcher import (
    ResponseMatcher,
    decode_body,
    from_form_data,
    from_url_encoded,
    get_content_type_definition,
)
from galaxybank.clients.request import ResponseDefinition
from galaxybank.models.types import ContentType, HttpMetadata, HttpResponse


def _response(status: int, content_type: str) -> HttpResponse[Any]:
    return HttpResponse(
        metadata=HttpMetadata(status=status, headers={"content-type": content_type}),
        raw=httpx.Response(status, headers={"content-type": content_type}),
    )


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("application/json", ContentType.JSON),
        ("application/json; charset=utf-8", ContentType.JSON),
        ("application/vnd.api+json", ContentType.JSON),
        ("text/json", ContentType.JSON),
        ("application/xml", ContentType.XML),
        ("application/atom+xml", ContentType.XML),
        ("application/x-www-form-urlencoded", ContentType.FORM_URL_ENCODED),
        ("text/event-stream", ContentType.EVENT_STREAM),
        ("text/plain", ContentType.TEXT),
        ("application/javascript", ContentType.TEXT),
        ("image/svg+xml", ContentType.TEXT),
        ("image/png", ContentType.IMAGE),
        ("application/octet-stream", ContentType.BINARY),
        ("application/pdf", ContentType.BINARY),
        ("*/*", ContentType.BINARY),
        ("", ContentType.BINARY),
    ],
)
def test_content_type_classification(header: str, expected: ContentType) -> None:
    assert get_content_type_definition(header) == expected


def test_single_definition_is_used_unconditionally() -> None:
    only = ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200)
    matcher = ResponseMatcher([only])
    assert matcher.get_response_definition(_response(201, "text/plain")) is only


def test_multiple_definitions_match_on_content_type_and_status() -> None:
    json_ok = ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200)
    text_ok = ResponseDefinition(schema=str, content_type=ContentType.TEXT, status=200)
    created = ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=201)
    matcher = ResponseMatcher([json_ok, text_ok, created])

    assert matcher.get_response_definition(_response(200, "text/plain")) is text_ok
    assert matcher.get_response_definition(_response(201, "application/json")) is created
    assert matcher.get_response_definition(_response(202, "application/json")) is None
    assert ResponseMatcher([]).get_response_definition(_response(200, "text/plain")) is None


def test_decode_json_and_event_stream() -> None:
    assert decode_body(ContentType.JSON, b'{"x": 1}') == {"x": 1}
    assert decode_body(ContentType.EVENT_STREAM, b'data: {"x":1}') == {"x": 1}
    assert decode_body(ContentType.EVENT_STREAM, b'{"x":1}') == {"x": 1}


def test_decode_text_binary_and_forms() -> None:
    assert decode_body(ContentType.TEXT, b"hello") == "hello"
    assert decode_body(ContentType.XML, b"<a/>") == "<a/>"
    assert decode_body(ContentType.BINARY, b"\x00\x01") == b"\x00\x01"
    assert decode_body(ContentType.IMAGE, b"\x89PNG") == b"\x89PNG"
    assert decode_body(ContentType.FORM_URL_ENCODED, b"a=1&b=two+words") == {
        "a": "1",
        "b": "two words",
    }


def test_decode_invalid_json_raises_value_error() -> None:
    with pytest.raises(ValueError):
        decode_body(ContentType.JSON, b"not json")


def test_from_url_encoded_ignores_bare_keys() -> None:
    assert from_url_encoded("a=1&flag&c=%2F") == {"a": "1", "c": "/"}


def test_from_form_data() -> None:
    body = (
        b"--XyZ\r\n"
        b'Content-Disposition: form-data; name="owner"\r\n\r\n'
        b"Zaphod\r\n"
        b"--XyZ\r\n"
        b'Content-Disposition: form-data; name="currency"\r\n\r\n'
        b"COSMIC_COINS\r\n"
        b"--XyZ--\r\n"
    )
    assert from_form_data(body) == {"owner": "Zaphod", "currency": "COSMIC_COINS"}
