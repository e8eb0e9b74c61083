"""
Request/response hooks.

A `Hook` is injected into the client and called by the hook handler around
every network attempt. The base class passes everything through unchanged, so
subclasses only override the extension points they need.

Example:
    class TracingHook(Hook):
        async def before_request(self, request, params):
            request.headers["x-trace-id"] = new_trace_id()
            return request

    client = GalaxyBank(api_key="...", hook=TracingHook())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import HttpError
from .models.types import HttpMethod, HttpResponse


@dataclass(slots=True)
class HookRequest:
    """
    The hook-visible view of a request.

    Parameters are plain name -> value mappings without serialization metadata;
    `path` is the resolved path.
    """

    base_url: str
    method: HttpMethod
    path: str
    headers: dict[str, Any] = field(default_factory=dict)
    query_params: dict[str, Any] = field(default_factory=dict)
    path_params: dict[str, Any] = field(default_factory=dict)
    body: Any = None


class Hook:
    """Pass-through hook; subclass and override to intercept traffic."""

    async def before_request(self, request: HookRequest, params: dict[str, str]) -> HookRequest:
        return request

    async def after_response(
        self,
        request: HookRequest,
        response: HttpResponse[Any],
        params: dict[str, str],
    ) -> HttpResponse[Any]:
        return response

    async def on_error(
        self,
        request: HookRequest,
        response: HttpResponse[Any],
        params: dict[str, str],
    ) -> Exception:
        return HttpError(response.metadata, response.raw)
