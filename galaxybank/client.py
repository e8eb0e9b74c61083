"""
Main Galaxy Bank API client.

Provides a unified interface to all Intergalactic Bank API functionality.
"""

from __future__ import annotations

from typing import Any

import httpx

from .clients.http import HTTPClient
from .config import SdkConfig
from .hooks import Hook
from .models.types import Environment
from .services.accounts import AccountsService
from .services.authentication import AuthenticationService
from .services.base import BaseService
from .services.general import GeneralService
from .services.transactions import TransactionsService


class GalaxyBank:
    """
    Asynchronous Galaxy Bank API client.

    Example:
        ```python
        from galaxybank import CreateAccountRequest, GalaxyBank

        async with GalaxyBank(api_key="your-api-key") as bank:
            created = await bank.accounts.create_account(
                CreateAccountRequest(owner="Zaphod", currency="COSMIC_COINS")
            )
            accounts = await bank.accounts.list_accounts(owner="Zaphod")
            print(accounts.data)
        ```

    Attributes:
        accounts: Account operations
        transactions: Transaction operations
        authentication: API key generation
        general: Health and welcome endpoints
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        environment: Environment | None = None,
        timeout_ms: int | None = None,
        config: SdkConfig | None = None,
        hook: Hook | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        allow_streaming: bool = False,
        log_requests: bool = False,
    ):
        """
        Initialize the Galaxy Bank client.

        Args:
            api_key: API key sent in the `x-api-key` header
            base_url: API base URL; takes precedence over `environment`
            environment: Known environment (default: http://localhost:3000)
            timeout_ms: Per-request timeout in milliseconds
            config: Base configuration; keyword arguments override it
            hook: Request/response hook
            transport: Custom httpx transport (e.g. for testing)
            allow_streaming: Permit `stream()` calls (off by default)
            log_requests: Log all HTTP requests (for debugging)
        """
        overrides: dict[str, Any] = {}
        if api_key is not None:
            overrides["api_key"] = api_key
        if base_url is not None:
            overrides["base_url"] = base_url
        if environment is not None:
            overrides["environment"] = environment
        if timeout_ms is not None:
            overrides["timeout_ms"] = timeout_ms
        self._config = (config or SdkConfig()).merge(SdkConfig(**overrides))

        self._http = HTTPClient(
            self._config,
            hook=hook,
            transport=transport,
            allow_streaming=allow_streaming,
            log_requests=log_requests,
        )

        self._accounts: AccountsService | None = None
        self._transactions: TransactionsService | None = None
        self._authentication: AuthenticationService | None = None
        self._general: GeneralService | None = None

    async def __aenter__(self) -> GalaxyBank:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._http.close()

    @property
    def config(self) -> SdkConfig:
        return self._config

    @property
    def http(self) -> HTTPClient:
        """The underlying HTTP client, for hand-built requests."""
        return self._http

    # =========================================================================
    # Service Properties (lazy initialization)
    # =========================================================================

    @property
    def accounts(self) -> AccountsService:
        """Account operations."""
        if self._accounts is None:
            self._accounts = AccountsService(self._http, self._config)
        return self._accounts

    @property
    def transactions(self) -> TransactionsService:
        """Transaction operations."""
        if self._transactions is None:
            self._transactions = TransactionsService(self._http, self._config)
        return self._transactions

    @property
    def authentication(self) -> AuthenticationService:
        """API key generation."""
        if self._authentication is None:
            self._authentication = AuthenticationService(self._http, self._config)
        return self._authentication

    @property
    def general(self) -> GeneralService:
        """Health and welcome endpoints."""
        if self._general is None:
            self._general = GeneralService(self._http, self._config)
        return self._general

    # =========================================================================
    # Client-wide settings
    # =========================================================================

    def _services(self) -> list[BaseService]:
        services = (self._accounts, self._transactions, self._authentication, self._general)
        return [service for service in services if service is not None]

    def _update(self, **values: Any) -> None:
        self._config = self._config.model_copy(update=values)
        for service in self._services():
            service.config = service.config.model_copy(update=values)

    def set_base_url(self, base_url: str) -> None:
        self._update(base_url=base_url)

    def set_environment(self, environment: Environment) -> None:
        self._update(environment=environment, base_url=environment.value)

    def set_timeout_ms(self, timeout_ms: int) -> None:
        self._update(timeout_ms=timeout_ms)

    def set_api_key(self, api_key: str) -> None:
        self._update(api_key=api_key)

    def set_api_key_header(self, api_key_header: str) -> None:
        self._update(api_key_header=api_key_header)
