"""Items: the transactions between a buyer and a seller."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zai_payment.config import CORE_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import (
    Resource,
    build_body,
    compact,
    require_fields,
    validate_id,
)
from zai_payment.response import Response

ITEM_FIELDS = (
    "id",
    "name",
    "amount",
    "payment_type",
    "buyer_id",
    "seller_id",
    "fee_ids",
    "description",
    "currency",
    "custom_descriptor",
    "buyer_url",
    "seller_url",
    "tax_invoice",
)

REQUIRED_FIELDS = ("name", "amount", "payment_type", "buyer_id", "seller_id")
PAYMENT_TYPES = frozenset(str(n) for n in range(1, 8))


def validate_amount(amount: Any, message: str = "amount must be a positive integer (in cents)") -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(message)


class Items(Resource):
    """Items API."""

    base_endpoint = CORE_BASE

    def list(self, limit: int = 10, offset: int = 0) -> Response:
        return self.client.get("/items", params={"limit": limit, "offset": offset}, data_key="items")

    def show(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}", data_key="items")

    def create(self, **attributes: Any) -> Response:
        """Create an item.

        Raises:
            ValidationError: If a required field is missing, ``amount`` is not a
                positive number of cents, or ``payment_type`` is outside 1-7.
        """
        self._validate_create(attributes)
        body = build_body(attributes, ITEM_FIELDS)
        return self.client.post("/items", body=body, data_key="items")

    def update(self, item_id: str, **attributes: Any) -> Response:
        validate_id(item_id, "item_id")
        body = build_body(attributes, ITEM_FIELDS)
        if not body:
            raise ValidationError("At least one attribute must be provided for update")
        return self.client.patch(f"/items/{item_id}", body=body, data_key="items")

    def delete(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.delete(f"/items/{item_id}")

    def show_seller(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}/sellers", data_key="users")

    def show_buyer(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}/buyers", data_key="users")

    def show_fees(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}/fees", data_key="fees")

    def show_wire_details(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}/wire_details", data_key="items")

    def list_transactions(self, item_id: str, limit: int = 10, offset: int = 0) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(
            f"/items/{item_id}/transactions",
            params={"limit": limit, "offset": offset},
            data_key="transactions",
        )

    def list_batch_transactions(self, item_id: str, limit: int = 10, offset: int = 0) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(
            f"/items/{item_id}/batch_transactions",
            params={"limit": limit, "offset": offset},
            data_key="batch_transactions",
        )

    def show_status(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.get(f"/items/{item_id}/status", data_key="items")

    def make_payment(
        self,
        item_id: str,
        account_id: str,
        device_id: str | None = None,
        ip_address: str | None = None,
        cvv: str | None = None,
        merchant_phone: str | None = None,
    ) -> Response:
        """Charge the buyer's account for an item."""
        validate_id(item_id, "item_id")
        validate_id(account_id, "account_id")
        body = compact(
            {
                "account_id": account_id,
                "device_id": device_id,
                "ip_address": ip_address,
                "cvv": cvv,
                "merchant_phone": merchant_phone,
            }
        )
        return self.client.patch(f"/items/{item_id}/make_payment", body=body, data_key="items")

    def cancel(self, item_id: str) -> Response:
        validate_id(item_id, "item_id")
        return self.client.patch(f"/items/{item_id}/cancel", data_key="items")

    def refund(
        self,
        item_id: str,
        refund_amount: int | None = None,
        refund_message: str | None = None,
        account_id: str | None = None,
    ) -> Response:
        """Refund an item, in full unless ``refund_amount`` is given."""
        validate_id(item_id, "item_id")
        if refund_amount is not None:
            validate_amount(refund_amount, "refund_amount must be a positive integer (in cents)")
        body = compact(
            {
                "refund_amount": refund_amount,
                "refund_message": refund_message,
                "account_id": account_id,
            }
        )
        return self.client.patch(f"/items/{item_id}/refund", body=body, data_key="items")

    @staticmethod
    def _validate_create(attributes: Mapping[str, Any]) -> None:
        require_fields(attributes, REQUIRED_FIELDS)
        validate_amount(attributes["amount"])
        if str(attributes["payment_type"]) not in PAYMENT_TYPES:
            raise ValidationError("payment_type must be between 1 and 7")
