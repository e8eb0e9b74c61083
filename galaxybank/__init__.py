"""
Galaxy Bank SDK: an async, typed client for the Intergalactic Bank API.

Example:
    from galaxybank import GalaxyBank

    async with GalaxyBank(api_key="your-key") as bank:
        health = await bank.general.health_check()
        print(health.data)
"""

from __future__ import annotations

import logging

from .client import GalaxyBank
from .clients import (
    ErrorDefinition,
    HTTPClient,
    PaginationRole,
    Parameter,
    Request,
    RequestBuilder,
    ResponseDefinition,
)
from .config import SdkConfig
from .exceptions import (
    ConfigurationError,
    GalaxyBankError,
    HttpError,
    NetworkError,
    PaginationError,
    ThrowableError,
    ValidationError,
)
from .hooks import Hook, HookRequest
from .models import (
    ContentType,
    CreateAccountRequest,
    CreateTransactionRequest,
    CursorPagination,
    Environment,
    HttpMetadata,
    HttpResponse,
    OffsetPagination,
    UpdateAccountRequest,
)
from .policies import RetryPolicy, ValidationPolicy
from .serialization import SerializationStyle

logging.getLogger("galaxybank").addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ContentType",
    "CreateAccountRequest",
    "CreateTransactionRequest",
    "CursorPagination",
    "Environment",
    "ErrorDefinition",
    "GalaxyBank",
    "GalaxyBankError",
    "HTTPClient",
    "Hook",
    "HookRequest",
    "HttpError",
    "HttpMetadata",
    "HttpResponse",
    "NetworkError",
    "OffsetPagination",
    "PaginationError",
    "PaginationRole",
    "Parameter",
    "Request",
    "RequestBuilder",
    "ResponseDefinition",
    "RetryPolicy",
    "SdkConfig",
    "SerializationStyle",
    "ThrowableError",
    "UpdateAccountRequest",
    "ValidationError",
    "ValidationPolicy",
]
