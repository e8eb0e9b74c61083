"""
Fluent construction of `Request` objects for generated call sites.

Example:
    request = (
        RequestBuilder()
        .set_config(config)
        .set_base_url(config)
        .set_method("GET")
        .set_path("/api/v1/accounts/{accountId}")
        .add_api_key_auth(config.api_key, "x-api-key")
        .add_response(ResponseDefinition(schema=Any, content_type=ContentType.JSON, status=200))
        .add_path_param(Parameter(key="accountId", value=account_id))
        .build()
    )
"""

from __future__ import annotations

import base64
from typing import Any

from ..config import SdkConfig
from ..models import schema as schemas
from ..models.pagination import CursorPagination, OffsetPagination, Pagination
from ..models.types import DEFAULT_BASE_URL, ContentType, HttpMethod
from ..serialization import SerializationStyle
from .request import (
    COOKIE_DEFAULTS,
    HEADER_DEFAULTS,
    PATH_DEFAULTS,
    QUERY_DEFAULTS,
    ErrorDefinition,
    Parameter,
    Request,
    ResponseDefinition,
    apply_defaults,
)


def _auth_header(key: str, value: str) -> Parameter:
    return Parameter(
        key=key, value=value, style=SerializationStyle.SIMPLE, explode=False, encode=True
    )


class RequestBuilder:
    """Accumulates call parameters and produces a `Request` via `build()`."""

    def __init__(self) -> None:
        self._base_url: str = DEFAULT_BASE_URL
        self._method: HttpMethod = "GET"
        self._path = ""
        self._config = SdkConfig()
        self._responses: list[ResponseDefinition] = []
        self._errors: list[ErrorDefinition] = []
        self._request_schema: schemas.Schema = Any
        self._request_content_type = ContentType.JSON
        self._path_params: dict[str, Parameter] = {}
        self._query_params: dict[str, Parameter] = {}
        self._headers: dict[str, Parameter] = {}
        self._cookies: dict[str, Parameter] = {}
        self._body: Any = None
        self._pagination: Pagination | None = None
        self._filename: str | None = None
        self._filenames: list[str] | None = None

    def set_config(self, config: SdkConfig) -> RequestBuilder:
        """Merge `config` over the defaults; nested retry/validation merge field by field."""
        self._config = self._config.merge(config)
        return self

    def set_base_url(self, config: SdkConfig | None = None) -> RequestBuilder:
        """Use `config.base_url` when set, otherwise `config.environment`."""
        if config is None:
            return self
        if config.base_url:
            self._base_url = config.base_url
        elif config.environment is not None:
            self._base_url = config.environment.value
        return self

    def set_method(self, method: HttpMethod) -> RequestBuilder:
        self._method = method
        return self

    def set_path(self, path: str) -> RequestBuilder:
        self._path = path
        return self

    def set_request_content_type(self, content_type: ContentType) -> RequestBuilder:
        self._request_content_type = content_type
        return self

    def set_request_schema(self, schema: schemas.Schema) -> RequestBuilder:
        self._request_schema = schema
        return self

    def set_filename(self, filename: str | None = None) -> RequestBuilder:
        if filename is not None:
            self._filename = filename
        return self

    def set_filenames(self, filenames: list[str] | None = None) -> RequestBuilder:
        if filenames is not None:
            self._filenames = filenames
        return self

    def set_pagination(self, pagination: OffsetPagination) -> RequestBuilder:
        self._pagination = pagination
        return self

    def set_cursor_pagination(self, pagination: CursorPagination) -> RequestBuilder:
        self._pagination = pagination
        return self

    # =========================================================================
    # Authentication (no-ops when the credential is missing)
    # =========================================================================

    def add_access_token_auth(
        self, access_token: str | None, prefix: str | None = None
    ) -> RequestBuilder:
        if access_token is None:
            return self
        self._headers["Authorization"] = _auth_header(
            "Authorization", f"{prefix or 'BEARER'} {access_token}"
        )
        return self

    def add_basic_auth(self, username: str | None, password: str | None) -> RequestBuilder:
        if username is None or password is None:
            return self
        token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self._headers["Authorization"] = _auth_header("Authorization", f"Basic {token}")
        return self

    def add_api_key_auth(self, api_key: str | None, key_name: str | None = None) -> RequestBuilder:
        if api_key is None:
            return self
        name = key_name or "X-API-KEY"
        self._headers[name] = _auth_header(name, api_key)
        return self

    # =========================================================================
    # Responses, errors, body, parameters
    # =========================================================================

    def add_response(self, response: ResponseDefinition) -> RequestBuilder:
        self._responses.append(response)
        return self

    def add_error(self, error: ErrorDefinition) -> RequestBuilder:
        self._errors.append(error)
        return self

    def add_body(self, body: Any = None) -> RequestBuilder:
        if body is not None:
            self._body = body
        return self

    def add_path_param(self, param: Parameter) -> RequestBuilder:
        if param.value is None or param.key is None:
            return self
        self._path_params[param.key] = apply_defaults(param.key, param, PATH_DEFAULTS)
        return self

    def add_query_param(self, param: Parameter) -> RequestBuilder:
        # Kept even without a value: pagination may fill it in later, and the
        # query serializer never emits a None value.
        if param.key is None:
            return self
        self._query_params[param.key] = apply_defaults(param.key, param, QUERY_DEFAULTS)
        return self

    def add_header_param(self, param: Parameter) -> RequestBuilder:
        if param.value is None or param.key is None:
            return self
        self._headers[param.key] = apply_defaults(param.key, param, HEADER_DEFAULTS)
        return self

    def add_cookie_param(self, param: Parameter) -> RequestBuilder:
        if param.value is None or param.key is None:
            return self
        self._cookies[param.key] = apply_defaults(param.key, param, COOKIE_DEFAULTS)
        return self

    def build(self) -> Request:
        return Request(
            base_url=self._base_url,
            method=self._method,
            path=self._path,
            config=self._config,
            headers=dict(self._headers),
            query_params=dict(self._query_params),
            path_params=dict(self._path_params),
            cookies=dict(self._cookies),
            body=self._body,
            responses=list(self._responses),
            errors=list(self._errors),
            request_schema=self._request_schema,
            request_content_type=self._request_content_type,
            pagination=self._pagination,
            filename=self._filename,
            filenames=self._filenames,
        )
