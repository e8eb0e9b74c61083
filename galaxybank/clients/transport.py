"""
httpx transport adapter.

Turns a fully serialized `Request` into an `httpx.Request`, sends it and wraps
the outcome in an `HttpResponse` without decoding the body.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..exceptions import NetworkError
from ..models.types import ContentType, HttpMetadata, HttpResponse
from .request import Request

logger = logging.getLogger(__name__)

_DEFAULT_MIME = {
    ContentType.JSON: "application/json",
    ContentType.FORM_URL_ENCODED: "application/x-www-form-urlencoded",
    ContentType.TEXT: "text/plain",
    ContentType.XML: "application/xml",
}


@dataclass(slots=True)
class MultipartBody:
    """A multipart/form-data payload: plain fields plus `(name, (filename, bytes))` files."""

    fields: list[tuple[str, str]] = field(default_factory=list)
    files: list[tuple[str, tuple[str, bytes]]] = field(default_factory=list)


def _metadata(response: httpx.Response) -> HttpMetadata:
    return HttpMetadata(
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers={key.lower(): value for key, value in response.headers.items()},
    )


def _body_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, MultipartBody):
        if body.files:
            return {"data": dict(body.fields), "files": body.files}
        # httpx only switches to multipart when files are present; (None, value)
        # tuples render as plain form fields.
        return {"files": [(name, (None, value)) for name, value in body.fields]}
    if isinstance(body, bytearray):
        return {"content": bytes(body)}
    if isinstance(body, (str, bytes)):
        return {"content": body}
    if isinstance(body, Mapping):
        return {"data": body}
    return {"content": str(body)}


class RequestAdapter:
    """Sends requests through a shared `httpx.AsyncClient`."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    def build(self, request: Request) -> httpx.Request:
        headers: dict[str, str] = dict(request.get_headers() or {})
        cookies = request.get_cookies()
        if cookies:
            headers["Cookie"] = "; ".join(f"{key}={value}" for key, value in cookies.items())
        if isinstance(request.body, str) and not any(
            key.lower() == "content-type" for key in headers
        ):
            mime = _DEFAULT_MIME.get(request.request_content_type)
            if mime is not None:
                headers["Content-Type"] = mime

        timeout_ms = request.config.timeout_ms
        extra: dict[str, Any] = {}
        if timeout_ms:
            extra["timeout"] = httpx.Timeout(timeout_ms / 1000)

        return self._client.build_request(
            request.method,
            request.construct_full_url(),
            headers=headers,
            **_body_kwargs(request.body),
            **extra,
        )

    async def send(self, request: Request) -> HttpResponse[Any]:
        http_request = self.build(request)
        logger.debug(f"-> {http_request.method} {http_request.url}")
        try:
            response = await self._client.send(http_request)
        except httpx.TransportError as e:
            raise NetworkError(f"{http_request.method} {http_request.url} failed: {e}") from e
        logger.debug(f"<- {response.status_code} {http_request.method} {http_request.url}")
        return HttpResponse(metadata=_metadata(response), raw=response)

    async def stream(self, request: Request) -> AsyncIterator[HttpResponse[Any]]:
        """Yield one response per non-empty line of the body."""
        http_request = self.build(request)
        logger.debug(f"-> {http_request.method} {http_request.url} (stream)")
        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.TransportError as e:
            raise NetworkError(f"{http_request.method} {http_request.url} failed: {e}") from e

        try:
            metadata = _metadata(response)
            if response.is_error:
                await response.aread()
                yield HttpResponse(metadata=metadata, raw=response)
                return
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                chunk = httpx.Response(
                    response.status_code,
                    headers={"content-type": response.headers.get("content-type", "")},
                    content=line.encode("utf-8"),
                    request=http_request,
                )
                yield HttpResponse(metadata=metadata, raw=chunk)
        except httpx.TransportError as e:
            raise NetworkError(f"{http_request.method} {http_request.url} failed: {e}") from e
        finally:
            await response.aclose()
