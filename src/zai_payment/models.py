"""Typed views of Zai API payloads.

Responses stay available as plain dictionaries through Response.data; these
models decode them at the boundary so a misspelt attribute fails loudly
instead of quietly returning None. Unknown fields are kept (extra="allow").

Example:
    response = users.show("user-123")
    user = response.parse(User)
    print(user.email)
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ZaiModel(BaseModel):
    """Base for API payload models."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# Longest token lifetime accepted, ten years.
MAX_EXPIRES_IN = 10 * 365 * 24 * 60 * 60


class TokenResponse(ZaiModel):
    """Body returned by the OAuth2 token endpoint."""

    access_token: str = Field(
        min_length=1,
        validation_alias=AliasChoices("access_token", "token"),
        repr=False,
    )
    token_type: str = "Bearer"
    expires_in: int = Field(default=3600, gt=0, le=MAX_EXPIRES_IN)


class User(ZaiModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    country: str | None = None
    user_type: str | None = None
    verification_state: str | None = None


class Item(ZaiModel):
    id: str
    name: str | None = None
    amount: int | None = None
    currency: str | None = None
    payment_type_id: int | None = None
    state: str | None = None
    payment_state: str | None = None
    buyer_id: str | None = None
    seller_id: str | None = None


class Webhook(ZaiModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "uuid"))
    url: str
    object_type: str | None = None
    enabled: bool | None = None
    description: str | None = None


class WebhookJob(ZaiModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "uuid"))
    webhook_uuid: str | None = None
    status: str | None = None
    object_id: str | None = None
    payload: dict[str, Any] | None = None
    request_responses: list[dict[str, Any]] = Field(default_factory=list)


class TokenAuth(ZaiModel):
    token: str = Field(repr=False)
    token_type: str | None = None
    user_id: str | None = None


class BatchTransaction(ZaiModel):
    id: int | str
    uuid: str | None = None
    reference_id: str | None = None
    status: int | None = None
    type: str | None = None
    type_method: str | None = None
    state: str | None = None


class VirtualAccount(ZaiModel):
    id: str
    account_name: str | None = None
    aka_names: list[str] = Field(default_factory=list)
    status: str | None = None
    wallet_account_id: str | None = None


class PayId(ZaiModel):
    id: str
    pay_id: str | None = None
    type: str | None = None
    status: str | None = None


class BankAccount(ZaiModel):
    id: str
    active: bool | None = None
    verification_status: str | None = None
    currency: str | None = None


class BpayAccount(ZaiModel):
    id: str
    active: bool | None = None
    verification_status: str | None = None
    currency: str | None = None


class WalletAccount(ZaiModel):
    id: str
    active: bool | None = None
    balance: int | None = None
    currency: str | None = None
