"""
General service: health and welcome endpoints.
"""

from __future__ import annotations

from typing import Any

from ..clients.builder import RequestBuilder
from ..clients.request import ResponseDefinition
from ..config import SdkConfig
from ..models.types import ContentType, HttpResponse
from .accounts import API_KEY_HEADER
from .base import BaseService


class GeneralService(BaseService):
    def set_health_check_config(self, config: SdkConfig) -> GeneralService:
        self._set_method_config("health_check", config)
        return self

    def set_welcome_config(self, config: SdkConfig) -> GeneralService:
        self._set_method_config("welcome", config)
        return self

    async def _get(self, method: str, path: str, config: SdkConfig | None) -> HttpResponse[Any]:
        resolved = self._resolve_config(method, config)
        request = (
            RequestBuilder()
            .set_config(resolved)
            .set_base_url(resolved)
            .set_method("GET")
            .set_path(path)
            .add_api_key_auth(resolved.api_key, resolved.api_key_header or API_KEY_HEADER)
            .add_response(
                ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200)
            )
            .build()
        )
        return await self._client.call(request)

    async def health_check(self, config: SdkConfig | None = None) -> HttpResponse[Any]:
        """Check the health status of the API server."""
        return await self._get("health_check", "/health", config)

    async def welcome(self, config: SdkConfig | None = None) -> HttpResponse[Any]:
        """Fetch the welcome message and API overview."""
        return await self._get("welcome", "/", config)
