from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import pytest
import respx

from galaxybank import (
    ConfigurationError,
    CreateAccountRequest,
    CreateTransactionRequest,
    Environment,
    GalaxyBank,
    Hook,
    HttpError,
    RetryPolicy,
    SdkConfig,
    UpdateAccountRequest,
)
from galaxybank.clients.builder import RequestBuilder
from galaxybank.clients.http import HTTPClient
from galaxybank.clients.request import ResponseDefinition
from galaxybank.models.types import ContentType

BASE_URL = "https://bank.example"


# =============================================================================
# End-to-end through the facade
# =============================================================================


async def test_create_account_round_trip(respx_mock: respx.MockRouter) -> None:
    route = respx_mock.post(f"{BASE_URL}/api/v1/accounts").mock(
        return_value=httpx.Response(
            200,
            json={"accountId": "acc-1", "owner": "John Doe", "balance": 1000},
        )
    )

    async with GalaxyBank(api_key="secret", base_url=BASE_URL) as bank:
        response = await bank.accounts.create_account(
            CreateAccountRequest(owner="John Doe", currency="COSMIC_COINS", balance=1000)
        )

    assert response.metadata.status == 200
    assert response.data == {"accountId": "acc-1", "owner": "John Doe", "balance": 1000}

    sent = route.calls.last.request
    assert sent.headers["x-api-key"] == "secret"
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == {
        "owner": "John Doe",
        "currency": "COSMIC_COINS",
        "balance": 1000,
    }


async def test_server_error_is_retried_three_times_by_default(
    respx_mock: respx.MockRouter,
) -> None:
    route = respx_mock.post(f"{BASE_URL}/api/v1/accounts").mock(
        return_value=httpx.Response(500, json={"error": "down"})
    )

    async with GalaxyBank(api_key="secret", base_url=BASE_URL) as bank:
        with pytest.raises(HttpError) as exc_info:
            await bank.accounts.create_account(
                {"owner": "John Doe", "currency": "COSMIC_COINS", "balance": 1000}
            )

    assert route.call_count == 3
    assert exc_info.value.status == 500


async def test_service_calls_use_expected_routes(respx_mock: respx.MockRouter) -> None:
    ok = httpx.Response(200, json={"ok": True})
    get_account = respx_mock.get(f"{BASE_URL}/api/v1/accounts/acc-1").mock(return_value=ok)
    list_accounts = respx_mock.get(
        f"{BASE_URL}/api/v1/accounts", params={"owner": "Zaphod Beeblebrox"}
    ).mock(return_value=ok)
    update = respx_mock.put(f"{BASE_URL}/api/v1/accounts/acc-1").mock(return_value=ok)
    delete = respx_mock.delete(f"{BASE_URL}/api/v1/accounts/acc-1").mock(return_value=ok)
    create_tx = respx_mock.post(f"{BASE_URL}/api/v1/transactions").mock(return_value=ok)
    get_tx = respx_mock.get(f"{BASE_URL}/api/v1/transactions/tx-1").mock(return_value=ok)
    list_tx = respx_mock.get(
        f"{BASE_URL}/api/v1/transactions", params={"fromAccountId": "acc-1"}
    ).mock(return_value=ok)
    auth = respx_mock.get(f"{BASE_URL}/api/v1/auth").mock(return_value=ok)
    health = respx_mock.get(f"{BASE_URL}/health").mock(return_value=ok)
    welcome = respx_mock.get(f"{BASE_URL}/").mock(return_value=ok)

    async with GalaxyBank(api_key="secret", base_url=BASE_URL) as bank:
        await bank.accounts.get_account("acc-1")
        await bank.accounts.list_accounts(owner="Zaphod Beeblebrox")
        await bank.accounts.update_account("acc-1", UpdateAccountRequest(account_type="PREMIUM"))
        await bank.accounts.delete_account("acc-1")
        await bank.transactions.create_transaction(
            CreateTransactionRequest(
                from_account_id="acc-1", to_account_id="acc-2", amount=5, currency="MOON_BUCKS"
            )
        )
        await bank.transactions.get_transaction("tx-1")
        await bank.transactions.list_transactions(from_account_id="acc-1")
        await bank.authentication.generate_api_key()
        await bank.general.health_check()
        await bank.general.welcome()

    for route in (get_account, list_accounts, update, delete, create_tx, get_tx, list_tx):
        assert route.called
    for route in (auth, health, welcome):
        assert route.calls.last.request.headers["x-api-key"] == "secret"

    assert json.loads(update.calls.last.request.content) == {"accountType": "PREMIUM"}
    assert json.loads(create_tx.calls.last.request.content) == {
        "fromAccountId": "acc-1",
        "toAccountId": "acc-2",
        "amount": 5,
        "currency": "MOON_BUCKS",
    }


async def test_config_hierarchy_per_service_method_and_call() -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        return httpx.Response(503)

    fast = RetryPolicy(delay_ms=0, jitter_ms=0)
    bank = GalaxyBank(
        api_key="k",
        base_url=BASE_URL,
        config=SdkConfig(retry=fast),
        transport=httpx.MockTransport(handler),
    )
    try:
        bank.general.set_config(SdkConfig(retry=RetryPolicy(attempts=2)))
        bank.general.set_welcome_config(SdkConfig(retry=RetryPolicy(attempts=4)))

        with pytest.raises(HttpError):
            await bank.general.health_check()
        assert len(attempts) == 2

        attempts.clear()
        with pytest.raises(HttpError):
            await bank.general.welcome()
        assert len(attempts) == 4

        attempts.clear()
        with pytest.raises(HttpError):
            await bank.general.welcome(config=SdkConfig(retry=RetryPolicy(attempts=1)))
        assert len(attempts) == 1
    finally:
        await bank.close()


async def test_client_wide_setters_reach_existing_services() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with GalaxyBank(api_key="old", transport=httpx.MockTransport(handler)) as bank:
        await bank.general.health_check()
        bank.set_api_key("new")
        bank.set_base_url(BASE_URL)
        await bank.general.health_check()
        bank.set_environment(Environment.DEFAULT)
        bank.set_timeout_ms(1500)
        await bank.accounts.list_accounts()

    assert str(seen[0].url) == "http://localhost:3000/health"
    assert seen[0].headers["x-api-key"] == "old"
    assert str(seen[1].url) == f"{BASE_URL}/health"
    assert seen[1].headers["x-api-key"] == "new"
    assert str(seen[2].url) == "http://localhost:3000/api/v1/accounts"
    assert seen[2].extensions["timeout"]["read"] == 1.5


async def test_custom_hook_sees_every_attempt() -> None:
    class CountingHook(Hook):
        def __init__(self) -> None:
            self.before = 0

        async def before_request(self, request, params):
            self.before += 1
            request.headers["x-attempt"] = str(self.before)
            return request

    statuses = iter([503, 200])
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["x-attempt"])
        return httpx.Response(next(statuses), json={})

    hook = CountingHook()
    async with GalaxyBank(
        api_key="k",
        config=SdkConfig(retry=RetryPolicy(delay_ms=0, jitter_ms=0)),
        hook=hook,
        transport=httpx.MockTransport(handler),
    ) as bank:
        response = await bank.general.health_check()

    assert response.metadata.status == 200
    assert seen == ["1", "2"]


# =============================================================================
# Streaming and logging
# =============================================================================


def _stream_request() -> Any:
    return (
        RequestBuilder()
        .set_path("/events")
        .add_response(
            ResponseDefinition(schema=Any, content_type=ContentType.EVENT_STREAM, status=200)
        )
        .build()
    )


async def test_stream_yields_one_decoded_response_per_line() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=b'data: {"n": 1}\n\ndata: {"n": 2}\n',
        )

    async with HTTPClient(
        transport=httpx.MockTransport(handler), allow_streaming=True
    ) as client:
        events = [response.data async for response in client.stream(_stream_request())]

    assert events == [{"n": 1}, {"n": 2}]


async def test_stream_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"missing")

    async with HTTPClient(
        transport=httpx.MockTransport(handler), allow_streaming=True
    ) as client:
        with pytest.raises(HttpError) as exc_info:
            async for _ in client.stream(_stream_request()):
                pass

    assert exc_info.value.status == 404


async def test_stream_requires_allow_streaming() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        return httpx.Response(200)

    async with HTTPClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ConfigurationError):
            async for _ in client.stream(_stream_request()):
                pass


async def test_headers_are_kept_whether_or_not_streaming_is_allowed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"x-request-id": "r-1"}, json={})

    request = (
        RequestBuilder()
        .set_path("/health")
        .add_response(ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200))
        .build()
    )
    for allow_streaming in (False, True):
        async with HTTPClient(
            transport=httpx.MockTransport(handler), allow_streaming=allow_streaming
        ) as client:
            response = await client.call(request)
        assert response.metadata.headers["x-request-id"] == "r-1"
        assert response.metadata.headers["content-type"] == "application/json"


async def test_call_direct_returns_data_only() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "healthy"})

    request = (
        RequestBuilder()
        .set_path("/health")
        .add_response(ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200))
        .build()
    )
    async with HTTPClient(transport=httpx.MockTransport(handler)) as client:
        assert await client.call_direct(request) == {"status": "healthy"}


async def test_requests_and_retries_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    statuses = iter([500, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), json={})

    config = SdkConfig(retry=RetryPolicy(delay_ms=0, jitter_ms=0))
    request = RequestBuilder().set_config(config).set_path("/health").build()
    caplog.set_level(logging.DEBUG, logger="galaxybank")

    async with HTTPClient(transport=httpx.MockTransport(handler), log_requests=True) as client:
        await client.call(request)

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("-> GET http://localhost:3000/health") for m in messages)
    assert any("failed with 500 (attempt 1/3)" in m for m in messages)
