"""
Request handlers.

The client assembles them in this order (outermost first):

    ResponseValidationHandler -> RequestValidationHandler -> RetryHandler
        -> HookHandler -> TerminatingHandler

Validation wraps everything so it sees the final request and the final,
hook-processed response; retry wraps the hook and the transport so every
attempt re-runs both; the terminating handler owns the network call.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import math
import random
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel

from ..exceptions import ConfigurationError, HttpError, ThrowableError, ValidationError
from ..hooks import Hook, HookRequest
from ..models import schema as schemas
from ..models.types import ContentType, HttpResponse
from ..policies import RetryPolicy
from ..serialization import to_wire_string
from .matcher import ResponseMatcher, decode_body, response_content_type
from .pipeline import Handle, Stream
from .request import (
    HEADER_DEFAULTS,
    PATH_DEFAULTS,
    QUERY_DEFAULTS,
    ErrorDefinition,
    Parameter,
    Request,
    ResponseDefinition,
    apply_defaults,
)
from .transport import MultipartBody, RequestAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# Response validation
# =============================================================================


class ResponseValidationHandler:
    """Decodes the response body and validates it against the matched schema."""

    def __init__(self, *, allow_streaming: bool = False):
        self.allow_streaming = allow_streaming

    async def handle(self, request: Request, next: Handle) -> HttpResponse[Any]:
        response = await next(request)
        return self.decode_response(request, response)

    async def stream(self, request: Request, next: Stream) -> AsyncIterator[HttpResponse[Any]]:
        if not self.allow_streaming:
            raise ConfigurationError(
                "Streaming is disabled for this client. "
                "Create the client with allow_streaming=True to use stream()."
            )
        async for response in next(request):
            yield self.decode_response(request, response)

    def decode_response(self, request: Request, response: HttpResponse[Any]) -> HttpResponse[Any]:
        definition = ResponseMatcher(request.responses).get_response_definition(response)
        if definition is None or not self._has_content(definition, response):
            return response

        content = response.raw.content
        try:
            decoded = decode_body(definition.content_type, content)
        except ValueError as e:
            raise ValidationError(
                [("body", f"Could not decode {definition.content_type.value} body: {e}")],
                content.decode("utf-8", errors="replace"),
            ) from e

        if request.config.validation.response_validation:
            decoded = schemas.parse(definition.schema, decoded)
        return response.with_data(decoded)

    @staticmethod
    def _has_content(definition: ResponseDefinition, response: HttpResponse[Any]) -> bool:
        return (
            definition.schema is not None
            and definition.content_type != ContentType.NO_CONTENT
            and response.metadata.status != 204
        )


# =============================================================================
# Request validation / body serialization
# =============================================================================


class RequestValidationHandler:
    """Validates the request body and serializes it for its content type."""

    async def handle(self, request: Request, next: Handle) -> HttpResponse[Any]:
        return await next(self.validate_request(request))

    async def stream(self, request: Request, next: Stream) -> AsyncIterator[HttpResponse[Any]]:
        async for response in next(self.validate_request(request)):
            yield response

    def validate_request(self, request: Request) -> Request:
        """Return a copy of `request` whose body is ready for the wire."""
        return request.copy(body=self.serialize_body(request))

    def serialize_body(self, request: Request) -> Any:
        body = request.body
        match request.request_content_type:
            case ContentType.XML | ContentType.TEXT | ContentType.IMAGE | ContentType.BINARY:
                return body
            case ContentType.FORM_URL_ENCODED:
                return self.to_form_url_encoded(request)
            case ContentType.MULTIPART_FORM_DATA:
                return self.to_form_data(body, request.filename, request.filenames)
            case _:
                if body is None:
                    return None
                parsed = schemas.parse(request.request_schema, body)
                return json.dumps(schemas.to_jsonable(request.request_schema, parsed))

    def to_form_url_encoded(self, request: Request) -> str:
        body = request.body
        if body is None:
            return ""
        if isinstance(body, str):
            return body
        if isinstance(body, bytes):
            return body.decode("utf-8")

        parsed = schemas.parse(request.request_schema, body)
        data = schemas.to_jsonable(request.request_schema, parsed)
        if not isinstance(data, Mapping):
            return ""
        return urlencode([(key, to_wire_string(value)) for key, value in data.items() if value is not None])

    def to_form_data(
        self,
        body: Any,
        filename: str | None = None,
        filenames: Sequence[str] | None = None,
    ) -> MultipartBody:
        if isinstance(body, BaseModel):
            body = body.model_dump(by_alias=True, exclude_unset=True)
        form = MultipartBody()
        if not isinstance(body, Mapping):
            return form

        for key, value in body.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                for i, item in enumerate(value):
                    name = f"{key}[{i}]"
                    if isinstance(item, (bytes, bytearray)):
                        item_filename = filenames[i] if filenames and i < len(filenames) else None
                        form.files.append((name, (item_filename or name, bytes(item))))
                    else:
                        form.fields.append((name, to_wire_string(item)))
            elif isinstance(value, (bytes, bytearray)):
                form.files.append((key, (filename or key, bytes(value))))
            else:
                form.fields.append((key, to_wire_string(value)))
        return form


# =============================================================================
# Retry
# =============================================================================


def calculate_delay(
    attempt: int,
    policy: RetryPolicy,
    rand: Callable[[float, float], float] = random.uniform,
) -> int:
    """Backoff in milliseconds before retrying after `attempt` (1-indexed) failed."""
    delay = policy.delay_ms * policy.backoff_factor ** (attempt - 1)
    delay = min(delay, policy.max_delay_ms)
    if policy.jitter_ms > 0:
        delay += rand(0, policy.jitter_ms)
    return math.floor(delay)


class RetryHandler:
    """
    Retries HTTP failures with exponential backoff and jitter.

    Only `HttpError`s are retried, and only when both the status code and the
    request method are retryable under the request's policy. Network failures
    that never produced a status are raised immediately.
    """

    def __init__(self, sleep: Callable[[float], Any] = asyncio.sleep):
        self._sleep = sleep

    async def handle(self, request: Request, next: Handle) -> HttpResponse[Any]:
        attempt = 1
        while True:
            try:
                return await next(request)
            except HttpError as e:
                if attempt >= request.config.retry.attempts or not self.should_retry(e, request):
                    raise
                await self._backoff(attempt, request, e)
            attempt += 1

    async def stream(self, request: Request, next: Stream) -> AsyncIterator[HttpResponse[Any]]:
        attempt = 1
        while True:
            try:
                async for response in next(request):
                    yield response
                return
            except HttpError as e:
                if attempt >= request.config.retry.attempts or not self.should_retry(e, request):
                    raise
                await self._backoff(attempt, request, e)
            attempt += 1

    @staticmethod
    def should_retry(error: HttpError, request: Request) -> bool:
        policy = request.config.retry
        return policy.should_retry_status(error.status) and policy.should_retry_method(
            request.method
        )

    async def _backoff(self, attempt: int, request: Request, error: HttpError) -> None:
        delay_ms = calculate_delay(attempt, request.config.retry)
        logger.warning(
            f"{request.method} {request.path} failed with {error.status} "
            f"(attempt {attempt}/{request.config.retry.attempts}); retrying in {delay_ms}ms"
        )
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000)


# =============================================================================
# Hooks
# =============================================================================


def to_hook_request(request: Request) -> HookRequest:
    return HookRequest(
        base_url=request.base_url,
        method=request.method,
        path=request.path,
        headers={key: param.value for key, param in request.headers.items()},
        query_params={key: param.value for key, param in request.query_params.items()},
        path_params={key: param.value for key, param in request.path_params.items()},
        body=request.body,
    )


def _to_transport_params(
    hook_params: Mapping[str, Any],
    original: Mapping[str, Parameter],
    defaults: tuple[Any, bool, bool],
) -> dict[str, Parameter]:
    params: dict[str, Parameter] = {}
    for key, value in hook_params.items():
        existing = original.get(key)
        if existing is not None:
            params[key] = dataclasses.replace(existing, value=value)
        else:
            params[key] = apply_defaults(key, Parameter(key=key, value=value), defaults)
    return params


class HookHandler:
    """Runs the user hook around each attempt and turns failing responses into errors."""

    def __init__(self, hook: Hook):
        self.hook = hook

    async def handle(self, request: Request, next: Handle) -> HttpResponse[Any]:
        params: dict[str, str] = {}
        next_request = await self.before_request(request, params)
        response = await next(next_request)

        if response.metadata.status < 400:
            return await self.hook.after_response(to_hook_request(next_request), response, params)
        raise self.error_from_response(next_request, response)

    async def stream(self, request: Request, next: Stream) -> AsyncIterator[HttpResponse[Any]]:
        """
        Stream through the hook. Failing chunks raise `hook.on_error(...)`;
        typed error definitions only apply to `handle`.
        """
        params: dict[str, str] = {}
        next_request = await self.before_request(request, params)
        hook_request = to_hook_request(next_request)

        async for response in next(next_request):
            if response.metadata.status < 400:
                yield await self.hook.after_response(hook_request, response, params)
            else:
                raise await self.hook.on_error(hook_request, response, params)

    async def before_request(self, request: Request, params: dict[str, str]) -> Request:
        """Let the hook edit a plain view of the request, then fold the edits back."""
        hook_request = await self.hook.before_request(to_hook_request(request), params)
        path = request.path_pattern if hook_request.path == request.path else hook_request.path
        return request.copy(
            base_url=hook_request.base_url,
            method=hook_request.method,
            path=path,
            body=hook_request.body,
            query_params=_to_transport_params(
                hook_request.query_params, request.query_params, QUERY_DEFAULTS
            ),
            headers=_to_transport_params(hook_request.headers, request.headers, HEADER_DEFAULTS),
            path_params=_to_transport_params(
                hook_request.path_params, request.path_params, PATH_DEFAULTS
            ),
        )

    def error_from_response(self, request: Request, response: HttpResponse[Any]) -> Exception:
        content = response.raw.content
        text = content.decode("utf-8", errors="replace")
        content_type = response_content_type(response)
        status = response.metadata.status

        definition: ErrorDefinition | None = next(
            (d for d in request.errors if d.content_type == content_type and d.status == status),
            None,
        )
        if definition is not None:
            try:
                body = json.loads(text) if text else None
            except ValueError:
                body = None
            message = body.get("message") if isinstance(body, dict) else None
            error: ThrowableError = definition.error(message or "", body)
            error.metadata = response.metadata
            logger.debug(f"{request.method} {request.path} -> {status} {definition.error.__name__}")
            return error

        return HttpError(
            response.metadata,
            response.raw,
            f"Unexpected response body for error status.\nStatusCode: {status}\nBody: {text}",
        )


# =============================================================================
# Transport
# =============================================================================


class TerminatingHandler:
    """Innermost handler: performs the network call through the adapter."""

    def __init__(self, adapter: RequestAdapter):
        self.adapter = adapter

    async def handle(self, request: Request) -> HttpResponse[Any]:
        return await self.adapter.send(request)

    def stream(self, request: Request) -> AsyncIterator[HttpResponse[Any]]:
        return self.adapter.stream(request)
