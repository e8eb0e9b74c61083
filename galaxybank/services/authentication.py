"""
Authentication service.
"""

from __future__ import annotations

from typing import Any

from ..clients.builder import RequestBuilder
from ..clients.request import ResponseDefinition
from ..config import SdkConfig
from ..models.types import ContentType, HttpResponse
from .accounts import API_KEY_HEADER
from .base import BaseService


class AuthenticationService(BaseService):
    def set_generate_api_key_config(self, config: SdkConfig) -> AuthenticationService:
        self._set_method_config("generate_api_key", config)
        return self

    async def generate_api_key(self, config: SdkConfig | None = None) -> HttpResponse[Any]:
        """Generate a new API key for the Intergalactic Bank API."""
        resolved = self._resolve_config("generate_api_key", config)
        request = (
            RequestBuilder()
            .set_config(resolved)
            .set_base_url(resolved)
            .set_method("GET")
            .set_path("/api/v1/auth")
            .add_api_key_auth(resolved.api_key, resolved.api_key_header or API_KEY_HEADER)
            .add_response(
                ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200)
            )
            .build()
        )
        return await self._client.call(request)
