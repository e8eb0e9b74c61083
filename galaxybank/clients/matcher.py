"""
Response matching and body decoding.

Content-type classification is centralized here so the hook handler (error
matching) and the response validation handler (decoding) agree on it.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any
from urllib.parse import unquote_plus

from ..models.types import ContentType, HttpResponse
from .request import ResponseDefinition

_MULTIPART_NAME = re.compile(r'name="([^"]+)"')


def get_content_type_definition(content_type: str) -> ContentType:
    """Classify a Content-Type header value (parameters such as charset are ignored)."""
    ct = content_type.split(";", 1)[0].strip().lower()

    if ct.startswith("application/") and "xml" in ct:
        return ContentType.XML
    if ct == "application/x-www-form-urlencoded":
        return ContentType.FORM_URL_ENCODED
    if ct == "text/event-stream":
        return ContentType.EVENT_STREAM
    # JSON before the generic text/* rule so text/json decodes as JSON.
    if ct in ("application/json", "text/json") or "+json" in ct:
        return ContentType.JSON
    if ct == "application/javascript" or ct.startswith("text/"):
        return ContentType.TEXT
    # SVG is XML text despite the image/ prefix.
    if ct == "image/svg+xml":
        return ContentType.TEXT
    if ct.startswith("image/"):
        return ContentType.IMAGE
    return ContentType.BINARY


def response_content_type(response: HttpResponse[Any]) -> ContentType:
    return get_content_type_definition(response.metadata.headers.get("content-type", ""))


class ResponseMatcher:
    """Picks the response definition that applies to a received response."""

    def __init__(self, responses: Sequence[ResponseDefinition]):
        self._responses = list(responses)

    def get_response_definition(self, response: HttpResponse[Any]) -> ResponseDefinition | None:
        if not self._responses:
            return None
        if len(self._responses) == 1:
            return self._responses[0]

        content_type = response_content_type(response)
        status = response.metadata.status
        return next(
            (
                definition
                for definition in self._responses
                if definition.content_type == content_type and definition.status == status
            ),
            None,
        )


# =============================================================================
# Decoding
# =============================================================================


def from_url_encoded(text: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for pair in text.split("&"):
        key, sep, value = pair.partition("=")
        if key and sep:
            result[unquote_plus(key)] = unquote_plus(value)
    return result


def from_form_data(content: bytes) -> dict[str, str]:
    text = content.decode("utf-8", errors="replace")
    boundary = text.split("\r\n", 1)[0]
    if not boundary:
        return {}
    result: dict[str, str] = {}
    for part in text.split(boundary)[1:-1]:
        header, _, value = part.partition("\r\n\r\n")
        match = _MULTIPART_NAME.search(header)
        if match:
            result[match.group(1).strip()] = value.strip()
    return result


def strip_event_prefix(text: str) -> str:
    return text[len("data: ") :] if text.startswith("data: ") else text


def decode_body(content_type: ContentType, content: bytes) -> Any:
    """Decode raw bytes according to the declared content type (JSON by default)."""
    match content_type:
        case ContentType.BINARY | ContentType.IMAGE | ContentType.PDF | ContentType.FILE:
            return content
        case ContentType.MULTIPART_FORM_DATA:
            return from_form_data(content)
        case ContentType.TEXT | ContentType.XML:
            return content.decode("utf-8")
        case ContentType.FORM_URL_ENCODED:
            return from_url_encoded(content.decode("utf-8"))
        case ContentType.EVENT_STREAM:
            return json.loads(strip_event_prefix(content.decode("utf-8")))
        case _:
            return json.loads(content.decode("utf-8"))
