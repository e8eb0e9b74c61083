"""
Core type definitions shared across the SDK.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeAlias, TypeVar

if TYPE_CHECKING:
    import httpx

T = TypeVar("T")

HttpMethod: TypeAlias = Literal[
    "CONNECT", "DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT", "TRACE"
]

STANDARD_METHODS: tuple[HttpMethod, ...] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
)


class Environment(str, Enum):
    """Known API environments and their base URLs."""

    DEFAULT = "http://localhost:3000"


DEFAULT_BASE_URL = Environment.DEFAULT.value


class ContentType(str, Enum):
    """Body encodings understood by the request and response handlers."""

    JSON = "json"
    XML = "xml"
    PDF = "pdf"
    IMAGE = "image"
    FILE = "file"
    BINARY = "binary"
    FORM_URL_ENCODED = "form"
    TEXT = "text"
    MULTIPART_FORM_DATA = "multipartFormData"
    EVENT_STREAM = "eventStream"
    NO_CONTENT = "noContent"


@dataclass(frozen=True, slots=True)
class HttpMetadata:
    """Status line and headers of a response."""

    status: int
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class HttpResponse(Generic[T]):
    """
    A response travelling back up the handler chain.

    `data` stays `None` until the response validation handler decodes the body.
    `raw` keeps the buffered `httpx.Response` so other layers can re-read it.
    """

    metadata: HttpMetadata
    raw: httpx.Response
    data: T | None = None

    def with_data(self, data: Any) -> HttpResponse[Any]:
        return HttpResponse(metadata=self.metadata, raw=self.raw, data=data)
