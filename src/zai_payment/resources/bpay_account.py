"""BPay accounts for paying bills out of a wallet."""

from __future__ import annotations

import re
from typing import Any

from zai_payment.config import CORE_BASE
from zai_payment.errors import ValidationError
from zai_payment.resources.base import Resource, build_body, require_fields, validate_id
from zai_payment.response import Response

BPAY_FIELDS = ("user_id", "account_name", "biller_code", "bpay_crn")
BILLER_CODE_PATTERN = re.compile(r"^\d{3,10}$")
BPAY_CRN_PATTERN = re.compile(r"^\d{2,20}$")


class BpayAccounts(Resource):
    """BPay accounts API."""

    base_endpoint = CORE_BASE

    def show(self, bpay_account_id: str) -> Response:
        validate_id(bpay_account_id, "bpay_account_id")
        return self.client.get(f"/bpay_accounts/{bpay_account_id}", data_key="bpay_accounts")

    def redact(self, bpay_account_id: str) -> Response:
        validate_id(bpay_account_id, "bpay_account_id")
        return self.client.delete(f"/bpay_accounts/{bpay_account_id}")

    def show_user(self, bpay_account_id: str) -> Response:
        validate_id(bpay_account_id, "bpay_account_id")
        return self.client.get(f"/bpay_accounts/{bpay_account_id}/users", data_key="users")

    def create(self, **attributes: Any) -> Response:
        require_fields(attributes, BPAY_FIELDS)
        if not BILLER_CODE_PATTERN.match(str(attributes["biller_code"])):
            raise ValidationError("biller_code must be a numeric value with 3 to 10 digits")
        if not BPAY_CRN_PATTERN.match(str(attributes["bpay_crn"])):
            raise ValidationError("bpay_crn must contain between 2 and 20 digits")
        return self.client.post(
            "/bpay_accounts", body=build_body(attributes, BPAY_FIELDS), data_key="bpay_accounts"
        )
