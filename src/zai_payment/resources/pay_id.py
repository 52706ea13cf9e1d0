"""PayIDs registered against virtual accounts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zai_payment.config import VA_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import Resource, is_blank, validate_id
from zai_payment.response import Response

PAY_ID_TYPES = ("EMAIL",)
DEREGISTERED = "deregistered"
MAX_PAY_ID_LENGTH = 256
MAX_NAME_LENGTH = 140


def _validate_name(value: Any, field_name: str) -> None:
    if value is None:
        return
    if not str(value):
        raise ValidationError(f"{field_name} cannot be empty when provided")
    if len(str(value)) > MAX_NAME_LENGTH:
        raise ValidationError(f"{field_name} must be between 1 and {MAX_NAME_LENGTH} characters")


class PayIds(Resource):
    """PayID API."""

    base_endpoint = VA_BASE

    def create(
        self,
        virtual_account_id: str,
        pay_id: str,
        type: str,
        details: Mapping[str, Any],
    ) -> Response:
        """Register a PayID for a virtual account.

        Args:
            virtual_account_id: Virtual account receiving payments.
            pay_id: The PayID itself, for example an email address.
            type: PayID type; only ``EMAIL`` is supported.
            details: ``pay_id_name`` and ``owner_legal_name``, each 1-140 characters.
        """
        validate_id(virtual_account_id, "virtual_account_id")

        if is_blank(pay_id):
            raise ValidationError("pay_id is required and cannot be blank")
        if len(str(pay_id)) > MAX_PAY_ID_LENGTH:
            raise ValidationError(f"pay_id must be {MAX_PAY_ID_LENGTH} characters or less")
        if is_blank(type):
            raise ValidationError("type is required and cannot be blank")
        if str(type).upper() not in PAY_ID_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(PAY_ID_TYPES)}, got '{type}'")
        if not isinstance(details, Mapping):
            raise ValidationError("details is required and must be a mapping")
        _validate_name(details.get("pay_id_name"), "pay_id_name")
        _validate_name(details.get("owner_legal_name"), "owner_legal_name")

        body = {
            "pay_id": pay_id,
            "type": str(type).upper(),
            "details": {
                key: details[key]
                for key in ("pay_id_name", "owner_legal_name")
                if details.get(key)
            },
        }
        return self.client.post(
            f"/virtual_accounts/{virtual_account_id}/pay_ids", body=body, data_key="pay_ids"
        )

    def show(self, pay_id_id: str) -> Response:
        validate_id(pay_id_id, "pay_id_id")
        return self.client.get(f"/pay_ids/{pay_id_id}", data_key="pay_ids")

    def update_status(self, pay_id_id: str, status: str) -> Response:
        validate_id(pay_id_id, "pay_id_id")
        if is_blank(status):
            raise ValidationError("status cannot be blank")
        if status != DEREGISTERED:
            raise ValidationError(f"status must be '{DEREGISTERED}', got '{status}'")
        return self.client.patch(
            f"/pay_ids/{pay_id_id}/status", body={"status": status}, data_key="pay_ids"
        )
