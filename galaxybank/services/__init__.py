"""
Generated API services.
"""

from __future__ import annotations

from .accounts import AccountsService
from .authentication import AuthenticationService
from .base import BaseService
from .general import GeneralService
from .transactions import TransactionsService

__all__ = [
    "AccountsService",
    "AuthenticationService",
    "BaseService",
    "GeneralService",
    "TransactionsService",
]
