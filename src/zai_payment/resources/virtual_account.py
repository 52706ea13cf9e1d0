"""Virtual accounts attached to wallet accounts."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from zai_payment.config import VA_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import Resource, build_body, is_blank, validate_id
from zai_payment.response import Response

MAX_ACCOUNT_NAME_LENGTH = 140
MAX_AKA_NAMES = 3
CLOSED = "closed"


def validate_account_name(account_name: Any) -> None:
    if is_blank(account_name):
        raise ValidationError("account_name cannot be blank")
    if len(str(account_name)) > MAX_ACCOUNT_NAME_LENGTH:
        raise ValidationError(f"account_name must be {MAX_ACCOUNT_NAME_LENGTH} characters or less")


def validate_aka_names(aka_names: Any) -> None:
    if isinstance(aka_names, (str, bytes)) or not isinstance(aka_names, Sequence):
        raise ValidationError("aka_names must be a list")
    if len(aka_names) > MAX_AKA_NAMES:
        raise ValidationError(f"aka_names must contain between 0 and {MAX_AKA_NAMES} items")


class VirtualAccounts(Resource):
    """Virtual accounts API."""

    base_endpoint = VA_BASE

    def list(self, wallet_account_id: str) -> Response:
        validate_id(wallet_account_id, "wallet_account_id")
        return self.client.get(
            f"/wallet_accounts/{wallet_account_id}/virtual_accounts",
            data_key="virtual_accounts",
        )

    def show(self, virtual_account_id: str) -> Response:
        validate_id(virtual_account_id, "virtual_account_id")
        return self.client.get(f"/virtual_accounts/{virtual_account_id}", data_key="virtual_accounts")

    def create(
        self,
        wallet_account_id: str,
        account_name: str | None = None,
        aka_names: Sequence[str] | None = None,
    ) -> Response:
        validate_id(wallet_account_id, "wallet_account_id")
        if account_name is not None:
            validate_account_name(account_name)
        if aka_names is not None:
            validate_aka_names(aka_names)

        body = build_body(
            {"account_name": account_name, "aka_names": list(aka_names or [])},
            ("account_name", "aka_names"),
        )
        return self.client.post(
            f"/wallet_accounts/{wallet_account_id}/virtual_accounts",
            body=body,
            data_key="virtual_accounts",
        )

    def update_aka_names(self, virtual_account_id: str, aka_names: Sequence[str]) -> Response:
        validate_id(virtual_account_id, "virtual_account_id")
        validate_aka_names(aka_names)
        return self.client.patch(
            f"/virtual_accounts/{virtual_account_id}/aka_names",
            body={"aka_names": list(aka_names)},
            data_key="virtual_accounts",
        )

    def update_account_name(self, virtual_account_id: str, account_name: str) -> Response:
        validate_id(virtual_account_id, "virtual_account_id")
        validate_account_name(account_name)
        return self.client.patch(
            f"/virtual_accounts/{virtual_account_id}/account_name",
            body={"account_name": account_name},
            data_key="virtual_accounts",
        )

    def update_status(self, virtual_account_id: str, status: str) -> Response:
        """Close a virtual account; ``closed`` is the only accepted status."""
        validate_id(virtual_account_id, "virtual_account_id")
        if is_blank(status):
            raise ValidationError("status cannot be blank")
        if status != CLOSED:
            raise ValidationError(f"status must be '{CLOSED}', got '{status}'")
        return self.client.patch(
            f"/virtual_accounts/{virtual_account_id}/status",
            body={"status": status},
            data_key="virtual_accounts",
        )
