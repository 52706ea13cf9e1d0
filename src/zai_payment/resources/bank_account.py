"""Bank accounts used for disbursements and direct debits."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from zai_payment.config import CORE_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import (
    Resource,
    build_body,
    require_fields,
    validate_choice,
    validate_id,
)
from zai_payment.response import Response

AU_FIELDS = (
    "user_id",
    "bank_name",
    "account_name",
    "routing_number",
    "account_number",
    "account_type",
    "holder_type",
    "country",
    "payout_currency",
    "currency",
)
UK_FIELDS = AU_FIELDS + ("iban", "swift_code")

AU_REQUIRED_FIELDS = (
    "user_id",
    "bank_name",
    "account_name",
    "routing_number",
    "account_number",
    "account_type",
    "holder_type",
    "country",
)
UK_REQUIRED_FIELDS = AU_REQUIRED_FIELDS + ("iban", "swift_code")

ACCOUNT_TYPES = ("savings", "checking")
HOLDER_TYPES = ("personal", "business")
COUNTRY_PATTERN = re.compile(r"^[A-Za-z]{3}$")


class BankAccounts(Resource):
    """Bank accounts API."""

    base_endpoint = CORE_BASE

    def show(self, bank_account_id: str, include_decrypted_fields: bool = False) -> Response:
        validate_id(bank_account_id, "bank_account_id")
        params = {"include_decrypted_fields": "true"} if include_decrypted_fields else None
        return self.client.get(
            f"/bank_accounts/{bank_account_id}", params=params, data_key="bank_accounts"
        )

    def create_au(self, **attributes: Any) -> Response:
        """Create an Australian bank account."""
        self._validate(attributes, AU_REQUIRED_FIELDS)
        return self.client.post(
            "/bank_accounts", body=build_body(attributes, AU_FIELDS), data_key="bank_accounts"
        )

    def create_uk(self, **attributes: Any) -> Response:
        """Create a UK bank account; also needs ``iban`` and ``swift_code``."""
        self._validate(attributes, UK_REQUIRED_FIELDS)
        return self.client.post(
            "/bank_accounts", body=build_body(attributes, UK_FIELDS), data_key="bank_accounts"
        )

    def redact(self, bank_account_id: str) -> Response:
        validate_id(bank_account_id, "bank_account_id")
        return self.client.delete(f"/bank_accounts/{bank_account_id}")

    def validate_routing_number(self, routing_number: str) -> Response:
        """Look up the bank behind a routing number (BSB)."""
        validate_id(routing_number, "routing_number")
        return self.client.get(
            "/tools/routing_number",
            params={"routing_number": routing_number},
            data_key="routing_number",
        )

    @staticmethod
    def _validate(attributes: Mapping[str, Any], required: tuple[str, ...]) -> None:
        require_fields(attributes, required)
        validate_choice(attributes["account_type"], "account_type", ACCOUNT_TYPES)
        validate_choice(attributes["holder_type"], "holder_type", HOLDER_TYPES)
        if not COUNTRY_PATTERN.match(str(attributes["country"])):
            raise ValidationError(
                "country must be a valid ISO 3166-1 alpha-3 code (e.g., AUS, GBR)"
            )
