"""
SDK configuration.

Configuration is resolved hierarchically: client-wide settings, then service
overrides, then method overrides, then the per-call config. Only fields that an
override sets explicitly take effect, and the nested retry/validation policies
are merged field by field so that overriding `attempts` keeps `delay_ms`.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models.types import Environment
from .policies import RetryPolicy, ValidationPolicy

ENV_API_KEY = "GALAXYBANK_API_KEY"
ENV_BASE_URL = "GALAXYBANK_BASE_URL"
ENV_TIMEOUT_MS = "GALAXYBANK_TIMEOUT_MS"


class SdkConfig(BaseModel):
    """Settings that shape every request issued by the SDK."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str | None = None
    environment: Environment | None = None
    timeout_ms: int | None = Field(default=None, ge=0)
    api_key: str | None = None
    api_key_header: str | None = None
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    validation: ValidationPolicy = Field(default_factory=ValidationPolicy)

    def merge(self, *overrides: SdkConfig | None) -> SdkConfig:
        """
        Apply `overrides` in order, lowest precedence first.

        `None` entries are skipped so callers can pass optional levels directly.
        """
        merged = self
        for override in overrides:
            if override is None:
                continue
            update: dict[str, Any] = {
                name: getattr(override, name) for name in override.model_fields_set
            }
            if "retry" in update:
                update["retry"] = merged.retry.merged(override.retry)
            if "validation" in update:
                update["validation"] = merged.validation.merged(override.validation)
            merged = merged.model_copy(update=update)
        return merged

    @classmethod
    def from_env(cls, **overrides: Any) -> SdkConfig:
        """
        Build a config from `GALAXYBANK_*` environment variables.

        Keyword arguments take precedence over the environment.
        """
        values: dict[str, Any] = {}
        api_key = os.getenv(ENV_API_KEY, "").strip()
        if api_key:
            values["api_key"] = api_key
        base_url = os.getenv(ENV_BASE_URL, "").strip()
        if base_url:
            values["base_url"] = base_url
        timeout = os.getenv(ENV_TIMEOUT_MS, "").strip()
        if timeout:
            try:
                values["timeout_ms"] = int(timeout)
            except ValueError as e:
                raise ValueError(f"{ENV_TIMEOUT_MS} must be an integer, got {timeout!r}") from e
        values.update(overrides)
        return cls(**values)
