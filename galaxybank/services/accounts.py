"""
Accounts service.

Users can only see, change and delete their own accounts. Accounts that have
transactions are soft-deleted so the transaction history survives.
"""

from __future__ import annotations

from typing import Any

from ..clients.builder import RequestBuilder
from ..clients.request import Parameter, ResponseDefinition
from ..config import SdkConfig
from ..models.entities import CreateAccountRequest, UpdateAccountRequest
from ..models.types import ContentType, HttpResponse
from .base import BaseService

API_KEY_HEADER = "x-api-key"


class AccountsService(BaseService):
    """Operations on `/api/v1/accounts`."""

    # =========================================================================
    # Method-level configuration
    # =========================================================================

    def set_create_account_config(self, config: SdkConfig) -> AccountsService:
        self._set_method_config("create_account", config)
        return self

    def set_delete_account_config(self, config: SdkConfig) -> AccountsService:
        self._set_method_config("delete_account", config)
        return self

    def set_get_account_config(self, config: SdkConfig) -> AccountsService:
        self._set_method_config("get_account", config)
        return self

    def set_list_accounts_config(self, config: SdkConfig) -> AccountsService:
        self._set_method_config("list_accounts", config)
        return self

    def set_update_account_config(self, config: SdkConfig) -> AccountsService:
        self._set_method_config("update_account", config)
        return self

    # =========================================================================
    # Operations
    # =========================================================================

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

    async def create_account(
        self,
        body: CreateAccountRequest | dict[str, Any],
        config: SdkConfig | None = None,
    ) -> HttpResponse[Any]:
        """
        Create a new bank account.

        Required: `owner` and `currency` (COSMIC_COINS, GALAXY_GOLD or
        MOON_BUCKS). Optional: a non-negative `balance` (default 0) and
        `account_type` (default STANDARD).
        """
        resolved = self._resolve_config("create_account", config)
        request = (
            self._builder(resolved)
            .set_method("POST")
            .set_path("/api/v1/accounts")
            .set_request_schema(CreateAccountRequest)
            .add_header_param(Parameter(key="Content-Type", value="application/json"))
            .add_body(body)
            .build()
        )
        return await self._client.call(request)

    async def delete_account(
        self, account_id: str, config: SdkConfig | None = None
    ) -> HttpResponse[Any]:
        """Delete an account (soft delete when it has transactions)."""
        resolved = self._resolve_config("delete_account", config)
        request = (
            self._builder(resolved)
            .set_method("DELETE")
            .set_path("/api/v1/accounts/{accountId}")
            .add_path_param(Parameter(key="accountId", value=account_id))
            .build()
        )
        return await self._client.call(request)

    async def get_account(self, account_id: str, config: SdkConfig | None = None) -> HttpResponse[Any]:
        resolved = self._resolve_config("get_account", config)
        request = (
            self._builder(resolved)
            .set_method("GET")
            .set_path("/api/v1/accounts/{accountId}")
            .add_path_param(Parameter(key="accountId", value=account_id))
            .build()
        )
        return await self._client.call(request)

    async def list_accounts(
        self,
        *,
        owner: str | None = None,
        created_at: str | None = None,
        config: SdkConfig | None = None,
    ) -> HttpResponse[Any]:
        """
        List the caller's accounts.

        Args:
            owner: Filter by owner name.
            created_at: Filter by creation date.
        """
        resolved = self._resolve_config("list_accounts", config)
        request = (
            self._builder(resolved)
            .set_method("GET")
            .set_path("/api/v1/accounts")
            .add_query_param(Parameter(key="owner", value=owner))
            .add_query_param(Parameter(key="createdAt", value=created_at))
            .build()
        )
        return await self._client.call(request)

    async def update_account(
        self,
        account_id: str,
        body: UpdateAccountRequest | dict[str, Any],
        config: SdkConfig | None = None,
    ) -> HttpResponse[Any]:
        """
        Update an account's `owner` or `account_type`.

        Balance, currency, id and creation date cannot be changed here.
        """
        resolved = self._resolve_config("update_account", config)
        request = (
            self._builder(resolved)
            .set_method("PUT")
            .set_path("/api/v1/accounts/{accountId}")
            .set_request_schema(UpdateAccountRequest)
            .add_path_param(Parameter(key="accountId", value=account_id))
            .add_header_param(Parameter(key="Content-Type", value="application/json"))
            .add_body(body)
            .build()
        )
        return await self._client.call(request)
