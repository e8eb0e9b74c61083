"""
Exception hierarchy for the Galaxy Bank SDK.

Every error raised by the request pipeline derives from `GalaxyBankError`, so
callers can catch the whole family with a single `except` clause.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx
    import pydantic

    from .models.types import HttpMetadata


class GalaxyBankError(Exception):
    """Base class for all SDK errors."""


class ConfigurationError(GalaxyBankError):
    """
    The SDK was set up incorrectly.

    Raised immediately and never retried: an incomplete handler chain, offset
    pagination without a page size, or streaming while response headers are
    captured.
    """


class PaginationError(GalaxyBankError):
    """A page (or cursor) could not be extracted from a response."""


class NetworkError(GalaxyBankError):
    """
    The transport failed before an HTTP status was received.

    Wraps timeouts and connection failures from httpx. These are not retried by
    the default retry policy, which only considers HTTP status codes.
    """


def _pretty(value: Any) -> str:
    try:
        return json.dumps(value, indent=2, default=str)
    except (TypeError, ValueError):
        return str(value)


class ValidationError(GalaxyBankError):
    """
    A request or response body failed schema validation.

    Attributes:
        issues: One `(path, message)` pair per violation, where `path` is the
            dotted location of the offending field.
        value: The object that was validated.
    """

    def __init__(self, issues: Sequence[tuple[str, str]], value: Any):
        self.issues = list(issues)
        self.value = value
        lines = ["ValidationError:"]
        lines.extend(f"  Property: {path}. Message: {message}" for path, message in self.issues)
        lines.append("  Validated:")
        lines.extend(f"  {line}" for line in _pretty(value).splitlines())
        self.error = "\n".join(lines)
        super().__init__(self.error)

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError, value: Any) -> ValidationError:
        issues = [
            (".".join(str(part) for part in err["loc"]), err["msg"]) for err in exc.errors()
        ]
        return cls(issues, value)


class HttpError(GalaxyBankError):
    """
    An HTTP response with a failing status code.

    Attributes:
        error: The response status text.
        metadata: Status, status text and headers of the response.
        raw: The underlying `httpx.Response`, when available.
    """

    def __init__(
        self,
        metadata: HttpMetadata,
        raw: httpx.Response | None = None,
        message: str | None = None,
    ):
        super().__init__(message or metadata.status_text)
        self.error = metadata.status_text
        self.metadata = metadata
        self.raw = raw

    @property
    def status(self) -> int:
        return self.metadata.status


class ThrowableError(GalaxyBankError):
    """
    Base class for typed API errors declared by an endpoint.

    Subclasses are listed in an endpoint's error definitions; when a failing
    response matches one, it is raised instead of a generic `HttpError`.
    """

    def __init__(self, message: str, response: Any = None):
        super().__init__(message)
        self.message = message
        self.response = response
        self.metadata: HttpMetadata | None = None
