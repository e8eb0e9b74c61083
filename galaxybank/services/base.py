"""
Shared plumbing for generated services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..config import SdkConfig
from ..models.types import Environment

if TYPE_CHECKING:
    from ..clients.http import HTTPClient


class BaseService:
    """
    Holds the shared HTTP client and the configuration hierarchy.

    A call resolves its config as client-wide < service < method < per-call,
    where each level only contributes the fields it sets explicitly.
    """

    def __init__(self, client: HTTPClient, config: SdkConfig | None = None):
        self._client = client
        self.config = config if config is not None else client.config
        self._service_config: SdkConfig | None = None
        self._method_configs: dict[str, SdkConfig] = {}

    def set_config(self, config: SdkConfig) -> BaseService:
        """Set service-level overrides that apply to every method of this service."""
        self._service_config = config
        return self

    def _set_method_config(self, method: str, config: SdkConfig) -> BaseService:
        self._method_configs[method] = config
        return self

    def _resolve_config(self, method: str, request_config: SdkConfig | None = None) -> SdkConfig:
        return self.config.merge(
            self._service_config, self._method_configs.get(method), request_config
        )

    # =========================================================================
    # Client-wide settings
    # =========================================================================

    def _update(self, **values: Any) -> None:
        self.config = self.config.model_copy(update=values)

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
