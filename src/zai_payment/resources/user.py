"""Users: pay-in (buyer) and pay-out (seller) accounts.

Example:
    users.create(
        user_type="payin",
        email="buyer@example.com",
        first_name="John",
        last_name="Doe",
        country="AUS",
    )
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from zai_payment.config import CORE_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import (
    Resource,
    build_body,
    compact,
    is_blank,
    require_fields,
    validate_choice,
    validate_id,
)
from zai_payment.response import Response

USER_TYPE_PAYIN = "payin"
USER_TYPE_PAYOUT = "payout"
USER_TYPES = (USER_TYPE_PAYIN, USER_TYPE_PAYOUT)

USER_FIELDS = (
    "id",
    "email",
    "first_name",
    "last_name",
    "mobile",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip",
    "country",
    "dob",
    "government_number",
    "drivers_license_number",
    "drivers_license_state",
    "logo_url",
    "color_1",
    "color_2",
    "custom_descriptor",
    "authorized_signer_title",
    "user_type",
    "device_id",
    "ip_address",
)

COMPANY_FIELDS = (
    "name",
    "legal_name",
    "tax_number",
    "business_email",
    "charge_tax",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip",
    "country",
    "phone",
)

REQUIRED_FIELDS = ("email", "first_name", "last_name", "country", "user_type")
PAYOUT_REQUIRED_FIELDS = ("address_line1", "city", "state", "zip", "dob")

COMPANY_REQUIRED_FIELDS = ("name", "legal_name", "tax_number", "business_email")
PAYOUT_COMPANY_REQUIRED_FIELDS = ("address_line1", "city", "state", "zip", "phone", "country")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
COUNTRY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
DOB_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def validate_email(email: Any) -> None:
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        raise ValidationError("email must be a valid email address")


def validate_country(country: Any) -> None:
    if not COUNTRY_PATTERN.match(str(country)):
        raise ValidationError(
            "country must be a valid ISO 3166-1 alpha-3 code (e.g., USA, AUS, GBR)"
        )


def validate_dob(dob: Any) -> None:
    if not DOB_PATTERN.match(str(dob)):
        raise ValidationError("dob must be in DD/MM/YYYY format (e.g., 15/01/1990)")


def _is_payout(user_type: Any) -> bool:
    return str(user_type or "").lower() == USER_TYPE_PAYOUT


class Users(Resource):
    """Users API."""

    base_endpoint = CORE_BASE

    def list(self, limit: int = 10, offset: int = 0, search: str | None = None) -> Response:
        params = compact({"limit": limit, "offset": offset, "search": search})
        return self.client.get("/users", params=params, data_key="users")

    def show(self, user_id: str) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(f"/users/{user_id}", data_key="users")

    def create(self, **attributes: Any) -> Response:
        """Create a pay-in or pay-out user.

        Pay-out users additionally need an address and date of birth.
        A ``company`` mapping creates a company for the user.

        Raises:
            ValidationError: If required fields are missing or malformed.
        """
        self._validate_create(attributes)
        return self.client.post("/users", body=self._build_body(attributes), data_key="users")

    def update(self, user_id: str, **attributes: Any) -> Response:
        validate_id(user_id, "user_id")
        body = self._build_body(attributes)

        if attributes.get("email"):
            validate_email(attributes["email"])
        if attributes.get("dob"):
            validate_dob(attributes["dob"])
        if not body:
            raise ValidationError("At least one attribute must be provided for update")

        return self.client.patch(f"/users/{user_id}", body=body, data_key="users")

    def wallet_account(self, user_id: str) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(f"/users/{user_id}/wallet_accounts", data_key="wallet_accounts")

    def items(self, user_id: str, limit: int = 10, offset: int = 0) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(
            f"/users/{user_id}/items",
            params={"limit": limit, "offset": offset},
            data_key="items",
        )

    def set_disbursement_account(self, user_id: str, account_id: str) -> Response:
        validate_id(user_id, "user_id")
        validate_id(account_id, "account_id")
        return self.client.patch(
            f"/users/{user_id}/disbursement_account",
            body={"account_id": account_id},
            data_key="users",
        )

    def bank_account(self, user_id: str) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(f"/users/{user_id}/bank_accounts", data_key="bank_accounts")

    def verify(self, user_id: str) -> Response:
        """Mark a user as identity-verified. Prelive only."""
        validate_id(user_id, "user_id")
        return self.client.patch(f"/users/{user_id}/identity_verified", data_key="users")

    def card_account(self, user_id: str) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(f"/users/{user_id}/card_accounts", data_key="card_accounts")

    def bpay_accounts(self, user_id: str) -> Response:
        validate_id(user_id, "user_id")
        return self.client.get(f"/users/{user_id}/bpay_accounts", data_key="bpay_accounts")

    def _validate_create(self, attributes: Mapping[str, Any]) -> None:
        user_type = attributes.get("user_type")
        required = REQUIRED_FIELDS + (PAYOUT_REQUIRED_FIELDS if _is_payout(user_type) else ())
        require_fields(attributes, required)

        validate_choice(user_type, "user_type", USER_TYPES)
        validate_email(attributes.get("email"))
        validate_country(attributes.get("country"))
        if attributes.get("dob"):
            validate_dob(attributes["dob"])
        if "id" in attributes and attributes["id"] is not None:
            self._validate_user_id(attributes["id"])
        if isinstance(attributes.get("company"), Mapping):
            self._validate_company(attributes["company"], user_type)

    @staticmethod
    def _validate_user_id(user_id: Any) -> None:
        if "." in str(user_id):
            raise ValidationError("id cannot contain '.' character")
        if is_blank(user_id):
            raise ValidationError("id cannot be blank if provided")

    @staticmethod
    def _validate_company(company: Mapping[str, Any], user_type: Any) -> None:
        extra = PAYOUT_COMPANY_REQUIRED_FIELDS if _is_payout(user_type) else ("country",)
        missing = [name for name in COMPANY_REQUIRED_FIELDS + extra if is_blank(company.get(name))]
        if missing:
            raise ValidationError(f"Company is missing required fields: {', '.join(missing)}")

    @staticmethod
    def _build_body(attributes: Mapping[str, Any]) -> dict[str, Any]:
        body = build_body(attributes, USER_FIELDS)
        company = attributes.get("company")
        if isinstance(company, Mapping):
            # charge_tax=False must survive, so only None and empty strings are dropped.
            body["company"] = {
                key: value
                for key, value in company.items()
                if key in COMPANY_FIELDS and value is not None and value != ""
            }
        return body
