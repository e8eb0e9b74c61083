from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from pydantic import BaseModel

from galaxybank.clients.builder import RequestBuilder
from galaxybank.clients.handlers import (
    HookHandler,
    RequestValidationHandler,
    ResponseValidationHandler,
    TerminatingHandler,
)
from galaxybank.clients.pipeline import HandlerChain
from galaxybank.clients.request import ErrorDefinition, Parameter, Request, ResponseDefinition
from galaxybank.clients.transport import MultipartBody, RequestAdapter
from galaxybank.config import SdkConfig
from galaxybank.exceptions import ConfigurationError, HttpError, ThrowableError, ValidationError
from galaxybank.hooks import Hook, HookRequest
from galaxybank.models.entities import CreateAccountRequest
from galaxybank.models.types import ContentType, HttpMetadata, HttpResponse
from galaxybank.policies import ValidationPolicy

BASE_URL = "https://bank.example"


class Account(BaseModel):
    id: str
    balance: float


class InsufficientFundsError(ThrowableError):
    pass


def _builder(config: SdkConfig | None = None) -> RequestBuilder:
    config = config or SdkConfig(base_url=BASE_URL)
    return RequestBuilder().set_config(config).set_base_url(config)


def _response(
    status: int = 200, content: bytes = b"", content_type: str = "application/json"
) -> HttpResponse[Any]:
    headers = {"content-type": content_type}
    return HttpResponse(
        metadata=HttpMetadata(status=status, status_text="", headers=headers),
        raw=httpx.Response(status, headers=headers, content=content),
    )


def _returning(response: HttpResponse[Any]):
    seen: list[Request] = []

    async def next_(request: Request) -> HttpResponse[Any]:
        seen.append(request)
        return response

    next_.seen = seen  # type: ignore[attr-defined]
    return next_


# =============================================================================
# Chain assembly
# =============================================================================


def test_chain_requires_terminal_handler() -> None:
    with pytest.raises(ConfigurationError):
        HandlerChain([RequestValidationHandler()], None)


async def test_chain_runs_handlers_in_order() -> None:
    order: list[str] = []

    class Recording:
        def __init__(self, name: str) -> None:
            self.name = name

        async def handle(self, request, next):
            order.append(f"{self.name}>")
            response = await next(request)
            order.append(f"<{self.name}")
            return response

        def stream(self, request, next):
            return next(request)

    class Terminal:
        async def handle(self, request):
            order.append("terminal")
            return _response(204)

        def stream(self, request):  # pragma: no cover
            raise NotImplementedError

    chain = HandlerChain([Recording("a"), Recording("b")], Terminal())
    await chain.call_chain(Request())
    assert order == ["a>", "b>", "terminal", "<b", "<a"]


# =============================================================================
# Request validation
# =============================================================================


async def test_json_body_is_validated_and_dumped_with_aliases() -> None:
    request = (
        _builder()
        .set_method("POST")
        .set_request_schema(CreateAccountRequest)
        .add_body({"owner": "John Doe", "currency": "COSMIC_COINS", "account_type": "PREMIUM"})
        .build()
    )
    next_ = _returning(_response(204))
    await RequestValidationHandler().handle(request, next_)

    sent = next_.seen[0]
    assert json.loads(sent.body) == {
        "owner": "John Doe",
        "currency": "COSMIC_COINS",
        "accountType": "PREMIUM",
    }
    # The caller's request keeps its original body.
    assert isinstance(request.body, dict)


async def test_invalid_json_body_raises_validation_error() -> None:
    request = (
        _builder().set_request_schema(CreateAccountRequest).add_body({"balance": "lots"}).build()
    )
    with pytest.raises(ValidationError) as exc_info:
        await RequestValidationHandler().handle(request, _returning(_response(204)))
    assert exc_info.value.issues[0][0] == "balance"
    assert "Property: balance." in str(exc_info.value)


def test_form_body_skips_none_values() -> None:
    handler = RequestValidationHandler()
    request = (
        _builder()
        .set_request_content_type(ContentType.FORM_URL_ENCODED)
        .add_body({"owner": "A B", "flag": True, "skip": None})
        .build()
    )
    assert handler.serialize_body(request) == "owner=A+B&flag=true"

    raw = _builder().set_request_content_type(ContentType.FORM_URL_ENCODED).add_body("a=1").build()
    assert handler.serialize_body(raw) == "a=1"


def test_text_and_binary_bodies_pass_through() -> None:
    handler = RequestValidationHandler()
    text = _builder().set_request_content_type(ContentType.TEXT).add_body("hello").build()
    binary = _builder().set_request_content_type(ContentType.BINARY).add_body(b"\x00").build()
    assert handler.serialize_body(text) == "hello"
    assert handler.serialize_body(binary) == b"\x00"


def test_multipart_body_names_files_and_arrays() -> None:
    form = RequestValidationHandler().to_form_data(
        {
            "owner": "Zaphod",
            "tags": ["a", "b"],
            "avatar": b"img",
            "docs": [b"one", b"two"],
            "missing": None,
        },
        filename="avatar.png",
        filenames=["first.pdf"],
    )
    assert isinstance(form, MultipartBody)
    assert form.fields == [("owner", "Zaphod"), ("tags[0]", "a"), ("tags[1]", "b")]
    assert form.files == [
        ("avatar", ("avatar.png", b"img")),
        ("docs[0]", ("first.pdf", b"one")),
        ("docs[1]", ("docs[1]", b"two")),
    ]


# =============================================================================
# Response validation
# =============================================================================


async def test_response_is_decoded_and_validated() -> None:
    request = (
        _builder()
        .add_response(ResponseDefinition(schema=Account, content_type=ContentType.JSON, status=200))
        .build()
    )
    response = await ResponseValidationHandler().handle(
        request, _returning(_response(content=b'{"id": "a1", "balance": 10}'))
    )
    assert response.data == Account(id="a1", balance=10)


async def test_response_schema_mismatch_raises() -> None:
    request = (
        _builder()
        .add_response(ResponseDefinition(schema=Account, content_type=ContentType.JSON, status=200))
        .build()
    )
    with pytest.raises(ValidationError):
        await ResponseValidationHandler().handle(
            request, _returning(_response(content=b'{"id": "a1"}'))
        )


async def test_response_validation_can_be_disabled() -> None:
    config = SdkConfig(base_url=BASE_URL, validation=ValidationPolicy(response_validation=False))
    request = (
        _builder(config)
        .add_response(ResponseDefinition(schema=Account, content_type=ContentType.JSON, status=200))
        .build()
    )
    response = await ResponseValidationHandler().handle(
        request, _returning(_response(content=b'{"id": "a1"}'))
    )
    assert response.data == {"id": "a1"}


async def test_no_content_responses_are_untouched() -> None:
    no_schema = (
        _builder()
        .add_response(ResponseDefinition(schema=None, content_type=ContentType.JSON, status=200))
        .build()
    )
    response = await ResponseValidationHandler().handle(
        no_schema, _returning(_response(content=b"garbage"))
    )
    assert response.data is None

    with_schema = (
        _builder()
        .add_response(ResponseDefinition(schema=Account, content_type=ContentType.JSON, status=204))
        .build()
    )
    response = await ResponseValidationHandler().handle(with_schema, _returning(_response(204)))
    assert response.data is None


async def test_undecodable_body_raises_validation_error() -> None:
    request = (
        _builder()
        .add_response(ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200))
        .build()
    )
    with pytest.raises(ValidationError):
        await ResponseValidationHandler().handle(request, _returning(_response(content=b"{nope")))


async def test_streaming_is_disabled_by_default() -> None:
    async def never(request: Request):  # pragma: no cover
        yield _response()

    with pytest.raises(ConfigurationError):
        async for _ in ResponseValidationHandler().stream(Request(), never):
            pass


# =============================================================================
# Hooks and error mapping
# =============================================================================


async def test_default_hook_is_pass_through() -> None:
    request = _builder().set_path("/api/v1/accounts").build()
    upstream = _response(content=b'{"id": "a1"}')
    next_ = _returning(upstream)

    response = await HookHandler(Hook()).handle(request, next_)

    assert response is upstream
    assert next_.seen[0].construct_full_url() == request.construct_full_url()


async def test_hook_edits_are_folded_back_with_metadata() -> None:
    class Tracing(Hook):
        async def before_request(self, request: HookRequest, params: dict[str, str]) -> HookRequest:
            request.headers["x-trace"] = "t-1"
            request.query_params["extra"] = "a b"
            params["seen"] = "yes"
            return request

        async def after_response(self, request, response, params):
            assert params == {"seen": "yes"}
            return response.with_data({"traced": True})

    request = (
        _builder()
        .set_path("/api/v1/accounts/{accountId}")
        .add_path_param(Parameter(key="accountId", value="a1"))
        .build()
    )
    next_ = _returning(_response())
    response = await HookHandler(Tracing()).handle(request, next_)

    sent = next_.seen[0]
    assert sent.path_pattern == "/api/v1/accounts/{accountId}"
    assert sent.construct_full_url() == f"{BASE_URL}/api/v1/accounts/a1?extra=a%20b"
    assert sent.get_headers() == {"x-trace": "t-1"}
    assert response.data == {"traced": True}
    assert request.get_headers() is None


async def test_typed_error_is_raised_for_matching_definition() -> None:
    request = (
        _builder()
        .add_error(
            ErrorDefinition(
                error=InsufficientFundsError, content_type=ContentType.JSON, status=422
            )
        )
        .build()
    )
    failing = _response(422, b'{"message": "Not enough moon bucks", "code": "FUNDS"}')

    with pytest.raises(InsufficientFundsError) as exc_info:
        await HookHandler(Hook()).handle(request, _returning(failing))

    error = exc_info.value
    assert error.message == "Not enough moon bucks"
    assert error.response == {"message": "Not enough moon bucks", "code": "FUNDS"}
    assert error.metadata is not None and error.metadata.status == 422


async def test_unmatched_error_raises_http_error_with_body() -> None:
    request = _builder().build()
    with pytest.raises(HttpError) as exc_info:
        await HookHandler(Hook()).handle(request, _returning(_response(500, b"kaput", "text/plain")))

    assert exc_info.value.status == 500
    assert "StatusCode: 500" in str(exc_info.value)
    assert "Body: kaput" in str(exc_info.value)


# =============================================================================
# Transport
# =============================================================================


async def test_terminating_handler_sends_headers_cookies_and_body() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={})

    request = (
        _builder(SdkConfig(base_url=BASE_URL, timeout_ms=2500))
        .set_method("POST")
        .set_path("/api/v1/accounts")
        .add_header_param(Parameter(key="x-api-key", value="k"))
        .add_cookie_param(Parameter(key="session", value="s1"))
        .build()
        .copy(body='{"a": 1}')
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        response = await TerminatingHandler(RequestAdapter(client)).handle(request)

    sent = captured[0]
    assert response.metadata.status == 200
    assert sent.headers["x-api-key"] == "k"
    assert sent.headers["cookie"] == "session=s1"
    assert sent.headers["content-type"] == "application/json"
    assert sent.content == b'{"a": 1}'
    assert sent.extensions["timeout"]["read"] == 2.5


async def test_stream_errors_go_through_hook_on_error() -> None:
    class Declined(Exception):
        pass

    class DecliningHook(Hook):
        async def on_error(self, request, response, params):
            return Declined(response.metadata.status)

    request = (
        _builder()
        .add_error(
            ErrorDefinition(
                error=InsufficientFundsError, content_type=ContentType.JSON, status=422
            )
        )
        .build()
    )

    async def chunks(request: Request):
        yield _response(422, b'{"message": "Not enough moon bucks"}')

    with pytest.raises(Declined):
        async for _ in HookHandler(DecliningHook()).stream(request, chunks):
            pass
