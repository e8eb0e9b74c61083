"""
HTTP client for the Galaxy Bank API.

`HTTPClient` owns the shared `httpx.AsyncClient` and the handler chain every
request travels through. Generated services build a `Request` and hand it to
`call`; the client adds nothing per call beyond what the chain does.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..config import SdkConfig
from ..exceptions import ConfigurationError, PaginationError
from ..hooks import Hook
from ..models.pagination import (
    CursorPaginatedHttpResponse,
    OffsetPagination,
    PaginatedHttpResponse,
    get_next_cursor,
    get_page,
)
from ..models.types import HttpResponse
from .handlers import (
    HookHandler,
    RequestValidationHandler,
    ResponseValidationHandler,
    RetryHandler,
    TerminatingHandler,
)
from .pipeline import HandlerChain
from .request import PaginationRole, Request
from .transport import RequestAdapter

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Async HTTP client that runs requests through the handler chain.

    Args:
        config: Client-wide settings; a default `SdkConfig` when omitted.
        hook: Request/response hook; the pass-through `Hook` when omitted.
        transport: Optional `httpx.AsyncBaseTransport` (e.g. `httpx.MockTransport`
            in tests).
        allow_streaming: Permit `stream()` calls. Off by default, in which case
            `stream()` raises `ConfigurationError`. Response headers are kept
            either way.
        log_requests: Raise the `galaxybank` logger to DEBUG so every request
            and response is logged.
    """

    def __init__(
        self,
        config: SdkConfig | None = None,
        *,
        hook: Hook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        allow_streaming: bool = False,
        log_requests: bool = False,
    ):
        self.config = config if config is not None else SdkConfig()
        self.hook = hook if hook is not None else Hook()
        if log_requests:
            logging.getLogger("galaxybank").setLevel(logging.DEBUG)

        self._client = httpx.AsyncClient(transport=transport)
        self._chain = HandlerChain(
            (
                ResponseValidationHandler(allow_streaming=allow_streaming),
                RequestValidationHandler(),
                RetryHandler(),
                HookHandler(self.hook),
            ),
            TerminatingHandler(RequestAdapter(self._client)),
        )

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    # =========================================================================
    # Calls
    # =========================================================================

    async def call(self, request: Request) -> HttpResponse[Any]:
        """Send `request` through the chain and return the decoded response."""
        return await self._chain.call_chain(request)

    async def call_direct(self, request: Request) -> Any:
        """Like `call`, but return only the decoded body."""
        response = await self.call(request)
        return response.data

    async def stream(self, request: Request) -> AsyncIterator[HttpResponse[Any]]:
        """Yield one decoded response per line of a streamed body."""
        async for response in self._chain.stream_chain(request):
            yield response

    # =========================================================================
    # Pagination
    # =========================================================================

    async def call_paginated(self, request: Request) -> PaginatedHttpResponse[Any]:
        """
        Send a paginated request and return the extracted page as `data`.

        Raises:
            PaginationError: The response has no body, or the page cannot be
                extracted from it.
        """
        response = await self.call(request)
        if response.data is None:
            raise PaginationError("No response data to paginate through")
        return PaginatedHttpResponse(
            metadata=response.metadata,
            raw=response.raw,
            data=get_page(request, response.data),
        )

    async def call_cursor_paginated(self, request: Request) -> CursorPaginatedHttpResponse[Any]:
        """
        Send a cursor-paginated request; `next_cursor` is `None` on the last page.

        Raises:
            PaginationError: The response has no body, or the page cannot be
                extracted from it.
        """
        response = await self.call(request)
        if response.data is None:
            raise PaginationError("No response data to paginate through")
        return CursorPaginatedHttpResponse(
            metadata=response.metadata,
            raw=response.raw,
            data=get_page(request, response.data),
            next_cursor=get_next_cursor(request, response.data),
        )

    async def pages(self, request: Request) -> AsyncIterator[PaginatedHttpResponse[Any]]:
        """
        Iterate offset pages until an empty page is returned.

        Works on a copy, so `request` keeps its starting offset.

        Raises:
            ConfigurationError: The request has no offset pagination or no
                parameter with the offset role, so it could never advance.
        """
        if not isinstance(request.pagination, OffsetPagination):
            raise ConfigurationError("pages() requires offset pagination; use cursor_pages()")
        if request.find_param(PaginationRole.OFFSET) is None:
            raise ConfigurationError(
                "pages() requires a query parameter with PaginationRole.OFFSET"
            )
        current = request.copy()
        while True:
            page = await self.call_paginated(current)
            if not page.data:
                return
            yield page
            current = current.copy()
            current.next_page()

    async def cursor_pages(
        self, request: Request
    ) -> AsyncIterator[CursorPaginatedHttpResponse[Any]]:
        """
        Iterate cursor pages until the next cursor is `None` or repeats.

        Works on a copy, so `request` keeps its starting cursor.
        """
        current = request.copy()
        seen: set[str] = set()
        while True:
            page = await self.call_cursor_paginated(current)
            yield page
            cursor = page.next_cursor
            if cursor is None or cursor in seen:
                if cursor is not None:
                    logger.warning(f"Cursor {cursor!r} repeated; stopping pagination")
                return
            seen.add(cursor)
            current = current.copy()
            current.next_page(cursor)
