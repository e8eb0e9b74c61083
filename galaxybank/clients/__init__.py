"""
Request pipeline: request model, builder, handler chain and transport.
"""

from __future__ import annotations

from .builder import RequestBuilder
from .handlers import (
    HookHandler,
    RequestValidationHandler,
    ResponseValidationHandler,
    RetryHandler,
    TerminatingHandler,
    calculate_delay,
)
from .http import HTTPClient
from .pipeline import HandlerChain
from .request import (
    ErrorDefinition,
    PaginationRole,
    Parameter,
    Request,
    ResponseDefinition,
)
from .transport import MultipartBody, RequestAdapter

__all__ = [
    "ErrorDefinition",
    "HTTPClient",
    "HandlerChain",
    "HookHandler",
    "MultipartBody",
    "PaginationRole",
    "Parameter",
    "Request",
    "RequestAdapter",
    "RequestBuilder",
    "RequestValidationHandler",
    "ResponseDefinition",
    "ResponseValidationHandler",
    "RetryHandler",
    "TerminatingHandler",
    "calculate_delay",
]
