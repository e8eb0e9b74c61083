"""
Request models for the Galaxy Bank API.

Field names are snake_case in Python and camelCase on the wire; both spellings
are accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BankModel(BaseModel):
    """Base model: camelCase aliases, unknown fields kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


# =============================================================================
# Accounts
# =============================================================================


class CreateAccountRequest(BankModel):
    """
    Body of `POST /api/v1/accounts`.

    `currency` is one of COSMIC_COINS, GALAXY_GOLD or MOON_BUCKS; `account_type`
    one of STANDARD, PREMIUM or BUSINESS (the server defaults it to STANDARD).
    """

    owner: str | None = None
    currency: str | None = None
    balance: float | None = None
    account_type: str | None = Field(default=None, alias="accountType")


class UpdateAccountRequest(BankModel):
    """Body of `PUT /api/v1/accounts/{accountId}`. Balance and currency are immutable."""

    owner: str | None = None
    account_type: str | None = Field(default=None, alias="accountType")


# =============================================================================
# Transactions
# =============================================================================


class CreateTransactionRequest(BankModel):
    """Body of `POST /api/v1/transactions`."""

    from_account_id: str | None = Field(default=None, alias="fromAccountId")
    to_account_id: str | None = Field(default=None, alias="toAccountId")
    amount: float | None = None
    currency: str | None = None
