"""Wallet accounts."""

from __future__ import annotations

from zai_payment.config import CORE_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import Resource, compact, require_fields, validate_id
from zai_payment.resources.item import validate_amount
from zai_payment.response import Response


class WalletAccounts(Resource):
    base_endpoint = CORE_BASE

    def show_user(self, wallet_account_id: str) -> Response:
        validate_id(wallet_account_id, "wallet_account_id")
        return self.client.get(f"/wallet_accounts/{wallet_account_id}/users", data_key="users")

    def pay_bill(
        self,
        wallet_account_id: str,
        account_id: str | None = None,
        amount: int | None = None,
        reference_id: str | None = None,
    ) -> Response:
        """Pay a bill from a wallet into a BPay account.

        Raises:
            ValidationError: If the account or amount is missing, the amount is
                not a positive integer, or the reference contains a single quote.
        """
        validate_id(wallet_account_id, "wallet_account_id")
        require_fields({"account_id": account_id, "amount": amount}, ("account_id", "amount"))
        validate_amount(amount, "amount must be a positive integer")
        if reference_id and "'" in reference_id:
            raise ValidationError("reference_id cannot contain single quote (') character")

        body = compact({"account_id": account_id, "amount": amount, "reference_id": reference_id})
        return self.client.post(
            f"/wallet_accounts/{wallet_account_id}/bill_payment",
            body=body,
            data_key="wallet_accounts",
        )
