"""
Pagination descriptors and helpers.

Two strategies are supported:

- Offset pagination: the request carries an offset parameter that is advanced by
  `page_size` for each page.
- Cursor pagination: the response carries an opaque cursor, found at
  `cursor_path`, that is fed back into the request's cursor parameter.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias, TypeVar

from ..exceptions import PaginationError, ValidationError
from . import schema as schemas
from .types import HttpResponse

if TYPE_CHECKING:
    from ..clients.request import Request

PageT = TypeVar("PageT")

_MISSING = object()


@dataclass(frozen=True, slots=True)
class OffsetPagination:
    """Limit/offset pagination: the page array lives at `page_path`."""

    page_path: Sequence[str]
    page_schema: schemas.Schema = list[Any]
    page_size: int | None = None


@dataclass(frozen=True, slots=True)
class CursorPagination:
    """Cursor pagination: the next cursor lives at `cursor_path`."""

    page_path: Sequence[str]
    cursor_path: Sequence[str]
    page_schema: schemas.Schema = list[Any]
    cursor_schema: schemas.Schema = str | None


Pagination: TypeAlias = OffsetPagination | CursorPagination


def is_cursor_pagination(pagination: Pagination | None) -> bool:
    return isinstance(pagination, CursorPagination)


@dataclass(slots=True)
class PaginatedHttpResponse(HttpResponse[PageT]):
    """A response whose `data` is a single extracted page."""


@dataclass(slots=True)
class CursorPaginatedHttpResponse(HttpResponse[PageT]):
    """A page plus the cursor of the next one (`None` when there are no more)."""

    next_cursor: str | None = None


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, dict):
        return current.get(segment, _MISSING)
    if isinstance(current, list) and segment.isdigit():
        index = int(segment)
        return current[index] if index < len(current) else _MISSING
    return getattr(current, segment, _MISSING)


def _describe(value: Any) -> str:
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


def get_page(request: Request, data: Any) -> Any:
    """
    Extract the page at `pagination.page_path` and parse it with `page_schema`.

    Raises:
        PaginationError: The request is not paginated, the path resolves to
            nothing, or the value does not match the page schema.
    """
    pagination = request.pagination
    if pagination is None:
        raise PaginationError("get_page called for a request without pagination")

    current = data
    for segment in pagination.page_path:
        if current is None or current is _MISSING:
            break
        current = _step(current, segment)

    if current is None or current is _MISSING:
        raise PaginationError(
            f"Error getting page data. PagePath: {list(pagination.page_path)}. "
            f"Data: {_describe(data)}"
        )
    try:
        return schemas.parse(pagination.page_schema, current)
    except ValidationError as e:
        raise PaginationError(
            f"Error getting page data. Curr: {_describe(current)}. "
            f"PagePath: {list(pagination.page_path)}.\n{e.error}"
        ) from e


def get_next_cursor(request: Request, data: Any) -> str | None:
    """
    Extract the next cursor at `pagination.cursor_path`.

    A `None` (or missing) value anywhere along the path means there are no more
    pages and yields `None` rather than an error.
    """
    pagination = request.pagination
    if not isinstance(pagination, CursorPagination):
        return None

    current = data
    for segment in pagination.cursor_path:
        if current is None or current is _MISSING:
            return None
        current = _step(current, segment)
    if current is _MISSING:
        return None

    return schemas.parse(pagination.cursor_schema, current)
