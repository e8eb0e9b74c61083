"""
Request value objects.

A `Request` describes one HTTP call: method, URL template, parameters with their
serialization metadata, body, config, and the response/error definitions used to
decode the outcome. It is owned by the call site that built it.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config import SdkConfig
from ..exceptions import ConfigurationError, ThrowableError
from ..models import schema as schemas
from ..models.pagination import CursorPagination, Pagination
from ..models.types import DEFAULT_BASE_URL, ContentType, HttpMethod
from ..serialization import (
    CookieSerializer,
    HeaderSerializer,
    PathSerializer,
    QuerySerializer,
    SerializationStyle,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


class PaginationRole(Enum):
    """The pagination role a parameter plays, if any."""

    LIMIT = "limit"
    OFFSET = "offset"
    CURSOR = "cursor"


@dataclass(slots=True)
class Parameter:
    """
    A named value plus its OpenAPI serialization metadata.

    `value=None` means "omit": the parameter never reaches the wire. `style`,
    `explode` and `encode` left as `None` are filled in with per-location
    defaults when the parameter is added to a request.
    """

    key: str | None
    value: Any = None
    style: SerializationStyle | None = None
    explode: bool | None = None
    encode: bool | None = None
    role: PaginationRole | None = None


@dataclass(frozen=True, slots=True)
class ResponseDefinition:
    """A successful response shape: schema (None for no content), content type, status."""

    schema: schemas.Schema
    content_type: ContentType
    status: int


@dataclass(frozen=True, slots=True)
class ErrorDefinition:
    """A typed error raised when a failing response matches content type and status."""

    error: type[ThrowableError]
    content_type: ContentType
    status: int


# (style, explode, encode) applied when a parameter leaves them unset.
PATH_DEFAULTS = (SerializationStyle.SIMPLE, False, True)
QUERY_DEFAULTS = (SerializationStyle.FORM, True, True)
HEADER_DEFAULTS = (SerializationStyle.SIMPLE, False, False)
COOKIE_DEFAULTS = (SerializationStyle.FORM, True, False)


def apply_defaults(
    key: str, param: Parameter, defaults: tuple[SerializationStyle, bool, bool]
) -> Parameter:
    style, explode, encode = defaults
    return dataclasses.replace(
        param,
        key=param.key if param.key is not None else key,
        style=param.style if param.style is not None else style,
        explode=param.explode if param.explode is not None else explode,
        encode=param.encode if param.encode is not None else encode,
    )


def _clone_params(params: dict[str, Parameter]) -> dict[str, Parameter]:
    return {key: dataclasses.replace(param) for key, param in params.items()}


_UNSET: Any = object()


class Request:
    """One HTTP call travelling through the handler chain."""

    def __init__(
        self,
        *,
        method: HttpMethod = "GET",
        path: str = "",
        base_url: str = DEFAULT_BASE_URL,
        config: SdkConfig | None = None,
        headers: dict[str, Parameter] | None = None,
        query_params: dict[str, Parameter] | None = None,
        path_params: dict[str, Parameter] | None = None,
        cookies: dict[str, Parameter] | None = None,
        body: Any = None,
        responses: list[ResponseDefinition] | None = None,
        errors: list[ErrorDefinition] | None = None,
        request_schema: schemas.Schema = Any,
        request_content_type: ContentType = ContentType.JSON,
        pagination: Pagination | None = None,
        filename: str | None = None,
        filenames: list[str] | None = None,
    ):
        self.base_url = base_url
        self.method: HttpMethod = method
        self.path_pattern = path
        self.config = config if config is not None else SdkConfig()
        self.headers: dict[str, Parameter] = headers if headers is not None else {}
        self.query_params: dict[str, Parameter] = query_params if query_params is not None else {}
        self.path_params: dict[str, Parameter] = path_params if path_params is not None else {}
        self.cookies: dict[str, Parameter] = cookies if cookies is not None else {}
        self.body = body
        self.responses = responses if responses is not None else []
        self.errors = errors if errors is not None else []
        self.request_schema = request_schema
        self.request_content_type = request_content_type
        self.pagination = pagination
        self.filename = filename
        self.filenames = filenames

    def __repr__(self) -> str:
        return f"Request({self.method} {self.construct_full_url()})"

    @property
    def path(self) -> str:
        """The path template with path parameters substituted."""
        return PathSerializer().serialize(self.path_pattern, self.path_params)

    # =========================================================================
    # Parameters
    # =========================================================================

    def add_path_param(self, key: str, param: Parameter) -> None:
        if param.value is None or key is None:
            return
        self.path_params[key] = apply_defaults(key, param, PATH_DEFAULTS)

    def add_query_param(self, key: str, param: Parameter) -> None:
        if param.value is None:
            return
        self.query_params[key] = apply_defaults(key, param, QUERY_DEFAULTS)

    def add_header_param(self, key: str, param: Parameter) -> None:
        if param.value is None or key is None:
            return
        self.headers[key] = apply_defaults(key, param, HEADER_DEFAULTS)

    def add_cookie_param(self, key: str, param: Parameter) -> None:
        if param.value is None:
            return
        self.cookies[key] = apply_defaults(key, param, COOKIE_DEFAULTS)

    def add_body(self, body: Any) -> None:
        """Set the body; `None` means "no body", falsy values such as `0` are kept."""
        if body is None:
            return
        self.body = body

    # =========================================================================
    # Wire representation
    # =========================================================================

    def construct_full_url(self) -> str:
        query_string = QuerySerializer().serialize(self.query_params)
        return f"{self.base_url}{self.path}{query_string}"

    def get_headers(self) -> dict[str, str] | None:
        if not self.headers:
            return None
        return HeaderSerializer().serialize(self.headers)

    def get_cookies(self) -> dict[str, str] | None:
        if not self.cookies:
            return None
        return CookieSerializer().serialize(self.cookies)

    # =========================================================================
    # Copying and pagination
    # =========================================================================

    def copy(
        self,
        *,
        base_url: str = _UNSET,
        method: HttpMethod = _UNSET,
        path: str = _UNSET,
        body: Any = _UNSET,
        config: SdkConfig = _UNSET,
        headers: dict[str, Parameter] = _UNSET,
        query_params: dict[str, Parameter] = _UNSET,
        path_params: dict[str, Parameter] = _UNSET,
        cookies: dict[str, Parameter] = _UNSET,
        responses: list[ResponseDefinition] = _UNSET,
        errors: list[ErrorDefinition] = _UNSET,
        request_schema: schemas.Schema = _UNSET,
        request_content_type: ContentType = _UNSET,
        pagination: Pagination | None = _UNSET,
        filename: str | None = _UNSET,
        filenames: list[str] | None = _UNSET,
    ) -> Request:
        """
        Return a new request with every field defaulting to this one's value.

        Schemas, definitions and config are shared; parameter maps are cloned so
        that advancing pagination on the copy leaves this request untouched.
        """

        def pick(value: Any, current: Any) -> Any:
            return current if value is _UNSET else value

        return Request(
            base_url=pick(base_url, self.base_url),
            method=pick(method, self.method),
            path=pick(path, self.path_pattern),
            body=pick(body, self.body),
            config=pick(config, self.config),
            headers=pick(headers, _clone_params(self.headers)),
            query_params=pick(query_params, _clone_params(self.query_params)),
            path_params=pick(path_params, _clone_params(self.path_params)),
            cookies=pick(cookies, _clone_params(self.cookies)),
            responses=pick(responses, self.responses),
            errors=pick(errors, self.errors),
            request_schema=pick(request_schema, self.request_schema),
            request_content_type=pick(request_content_type, self.request_content_type),
            pagination=pick(pagination, self.pagination),
            filename=pick(filename, self.filename),
            filenames=pick(filenames, self.filenames),
        )

    def next_page(self, cursor: str | None = None) -> None:
        """
        Advance the pagination parameter in place.

        Cursor pagination stores `cursor` in the cursor parameter (no-op when
        `cursor` is None). Offset pagination increments the offset parameter by
        the page size.

        Raises:
            ConfigurationError: Offset pagination without a configured page size.
        """
        pagination = self.pagination
        if pagination is None:
            return

        if isinstance(pagination, CursorPagination):
            cursor_param = self.find_param(PaginationRole.CURSOR)
            if cursor_param is not None and cursor is not None:
                cursor_param.value = cursor
            return

        offset_param = self.find_param(PaginationRole.OFFSET)
        if offset_param is None:
            return
        if pagination.page_size is None:
            raise ConfigurationError("page_size is required for limit-offset pagination")
        offset_param.value = int(offset_param.value or 0) + pagination.page_size

    def _all_params(self) -> Iterator[Parameter]:
        for params in (self.headers, self.query_params, self.path_params, self.cookies):
            yield from params.values()

    def find_param(self, role: PaginationRole) -> Parameter | None:
        return next((p for p in self._all_params() if p.role is role), None)
