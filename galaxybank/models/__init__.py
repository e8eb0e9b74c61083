"""
Galaxy Bank data models and core types.
"""

from __future__ import annotations

from .entities import (
    BankModel,
    CreateAccountRequest,
    CreateTransactionRequest,
    UpdateAccountRequest,
)
from .pagination import (
    CursorPaginatedHttpResponse,
    CursorPagination,
    OffsetPagination,
    PaginatedHttpResponse,
    Pagination,
)
from .types import (
    ContentType,
    Environment,
    HttpMetadata,
    HttpMethod,
    HttpResponse,
)

__all__ = [
    "BankModel",
    "ContentType",
    "CreateAccountRequest",
    "CreateTransactionRequest",
    "CursorPaginatedHttpResponse",
    "CursorPagination",
    "Environment",
    "HttpMetadata",
    "HttpMethod",
    "HttpResponse",
    "OffsetPagination",
    "PaginatedHttpResponse",
    "Pagination",
    "UpdateAccountRequest",
]
