"""
Transactions service.
"""

from __future__ import annotations

from typing import Any

from ..clients.builder import RequestBuilder
from ..clients.request import Parameter, ResponseDefinition
from ..config import SdkConfig
from ..models.entities import CreateTransactionRequest
from ..models.types import ContentType, HttpResponse
from .accounts import API_KEY_HEADER
from .base import BaseService


class TransactionsService(BaseService):
    """Operations on `/api/v1/transactions`."""

    def set_create_transaction_config(self, config: SdkConfig) -> TransactionsService:
        self._set_method_config("create_transaction", config)
        return self

    def set_get_transaction_config(self, config: SdkConfig) -> TransactionsService:
        self._set_method_config("get_transaction", config)
        return self

    def set_list_transactions_config(self, config: SdkConfig) -> TransactionsService:
        self._set_method_config("list_transactions", config)
        return self

    def _builder(self, config: SdkConfig) -> RequestBuilder:
        return (
            RequestBuilder()
            .set_config(config)
            .set_base_url(config)
            .add_api_key_auth(config.api_key, config.api_key_header or API_KEY_HEADER)
            .set_request_content_type(ContentType.JSON)
            .add_response(
                ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200)
            )
        )

    async def create_transaction(
        self,
        body: CreateTransactionRequest | dict[str, Any],
        config: SdkConfig | None = None,
    ) -> HttpResponse[Any]:
        """Transfer `amount` of `currency` between two accounts."""
        resolved = self._resolve_config("create_transaction", config)
        request = (
            self._builder(resolved)
            .set_method("POST")
            .set_path("/api/v1/transactions")
            .set_request_schema(CreateTransactionRequest)
            .add_header_param(Parameter(key="Content-Type", value="application/json"))
            .add_body(body)
            .build()
        )
        return await self._client.call(request)

    async def get_transaction(
        self, transaction_id: str, config: SdkConfig | None = None
    ) -> HttpResponse[Any]:
        resolved = self._resolve_config("get_transaction", config)
        request = (
            self._builder(resolved)
            .set_method("GET")
            .set_path("/api/v1/transactions/{transactionId}")
            .add_path_param(Parameter(key="transactionId", value=transaction_id))
            .build()
        )
        return await self._client.call(request)

    async def list_transactions(
        self,
        *,
        from_account_id: str | None = None,
        to_account_id: str | None = None,
        created_at: str | None = None,
        config: SdkConfig | None = None,
    ) -> HttpResponse[Any]:
        """List transactions, optionally filtered by source, destination or date."""
        resolved = self._resolve_config("list_transactions", config)
        request = (
            self._builder(resolved)
            .set_method("GET")
            .set_path("/api/v1/transactions")
            .add_query_param(Parameter(key="fromAccountId", value=from_account_id))
            .add_query_param(Parameter(key="toAccountId", value=to_account_id))
            .add_query_param(Parameter(key="createdAt", value=created_at))
            .build()
        )
        return await self._client.call(request)
