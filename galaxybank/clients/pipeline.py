"""
Internal request pipeline primitives.

The SDK models requests/responses independently of the underlying HTTP transport
so cross-cutting behavior (validation, retry, hooks) can be implemented as
handlers. A chain is an immutable tuple of handlers folded around a terminal
handler: each handler receives a continuation for the rest of the chain, so an
assembled chain can never be missing its next step.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeAlias

from ..exceptions import ConfigurationError
from ..models.types import HttpResponse
from .request import Request

Handle: TypeAlias = Callable[[Request], Awaitable[HttpResponse[Any]]]
Stream: TypeAlias = Callable[[Request], AsyncIterator[HttpResponse[Any]]]


class RequestHandler(Protocol):
    async def handle(self, request: Request, next: Handle) -> HttpResponse[Any]: ...

    def stream(self, request: Request, next: Stream) -> AsyncIterator[HttpResponse[Any]]: ...


class TerminalHandler(Protocol):
    async def handle(self, request: Request) -> HttpResponse[Any]: ...

    def stream(self, request: Request) -> AsyncIterator[HttpResponse[Any]]: ...


def compose(handlers: Sequence[RequestHandler], terminal: Handle) -> Handle:
    pipeline = terminal
    for handler in reversed(handlers):
        next_pipeline = pipeline

        async def _wrapped(
            req: Request, *, _h: RequestHandler = handler, _n: Handle = next_pipeline
        ) -> HttpResponse[Any]:
            return await _h.handle(req, _n)

        pipeline = _wrapped
    return pipeline


def compose_stream(handlers: Sequence[RequestHandler], terminal: Stream) -> Stream:
    pipeline = terminal
    for handler in reversed(handlers):
        next_pipeline = pipeline

        def _wrapped(
            req: Request, *, _h: RequestHandler = handler, _n: Stream = next_pipeline
        ) -> AsyncIterator[HttpResponse[Any]]:
            return _h.stream(req, _n)

        pipeline = _wrapped
    return pipeline


class HandlerChain:
    """
    An ordered, immutable handler pipeline.

    Handlers run in order on the way in and in reverse order on the way out.
    The chain holds no per-call state and is safe to share between concurrent
    requests.
    """

    def __init__(self, handlers: Sequence[RequestHandler], terminal: TerminalHandler | None):
        if terminal is None:
            raise ConfigurationError("Handler chain has no terminating handler.")
        self.handlers: tuple[RequestHandler, ...] = tuple(handlers)
        self.terminal = terminal
        self._handle = compose(self.handlers, terminal.handle)
        self._stream = compose_stream(self.handlers, terminal.stream)

    async def call_chain(self, request: Request) -> HttpResponse[Any]:
        return await self._handle(request)

    def stream_chain(self, request: Request) -> AsyncIterator[HttpResponse[Any]]:
        return self._stream(request)
