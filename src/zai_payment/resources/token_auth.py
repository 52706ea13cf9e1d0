"""Token auths: short-lived tokens for collecting card or bank details client-side."""

from __future__ import annotations

from zai_payment.config import CORE_BASE
from zai_payment.resources.base import Resource, validate_choice, validate_id
from zai_payment.response import Response

TOKEN_TYPE_BANK = "bank"
TOKEN_TYPE_CARD = "card"
TOKEN_TYPES = (TOKEN_TYPE_BANK, TOKEN_TYPE_CARD)


class TokenAuths(Resource):
    base_endpoint = CORE_BASE

    def generate(self, user_id: str, token_type: str = TOKEN_TYPE_BANK) -> Response:
        """Generate a card or bank token for ``user_id``."""
        validate_id(user_id, "user_id")
        validate_choice(token_type, "token_type", TOKEN_TYPES)
        return self.client.post(
            "/token_auths",
            body={"token_type": token_type, "user_id": user_id},
            data_key="token_auth",
        )
