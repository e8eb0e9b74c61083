"""
Client policies (cross-cutting behavioral controls).

Policies are orthogonal and composable. They are enforced centrally by the HTTP
request pipeline: retry by the retry handler, validation by the response
validation handler.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .models.types import STANDARD_METHODS, HttpMethod

DEFAULT_RETRY_STATUS_CODES = frozenset({408, 429})


class _Policy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def merged(self, override: _Policy | None) -> _Policy:
        """Return a copy with the explicitly set fields of `override` applied."""
        if override is None:
            return self
        return self.model_copy(update=override.model_dump(exclude_unset=True))


class RetryPolicy(_Policy):
    """
    Retry with exponential backoff and jitter.

    `status_codes_to_retry=None` means every 5xx plus 408 and 429.
    """

    attempts: int = Field(default=3, ge=1)
    delay_ms: int = Field(default=150, ge=0)
    max_delay_ms: int = Field(default=5000, ge=0)
    backoff_factor: float = Field(default=2, ge=0)
    jitter_ms: int = Field(default=50, ge=0)
    status_codes_to_retry: tuple[int, ...] | None = None
    http_methods_to_retry: tuple[HttpMethod, ...] = STANDARD_METHODS

    def should_retry_status(self, status: int) -> bool:
        if self.status_codes_to_retry is not None:
            return status in self.status_codes_to_retry
        return status >= 500 or status in DEFAULT_RETRY_STATUS_CODES

    def should_retry_method(self, method: str) -> bool:
        return method.upper() in self.http_methods_to_retry


class ValidationPolicy(_Policy):
    """Whether decoded response bodies are parsed against their schema."""

    response_validation: bool = True
