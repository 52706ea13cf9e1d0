"""Batch transactions, including the prelive settlement simulation.

In prelive, batch transactions never settle on their own. Export the
pending ones, then move them through the bank states:

    exported = batch_transactions.export_transactions()
    ids = [entry["id"] for entry in exported.data]
    batch_transactions.process_to_bank_processing(batch_id, ids)
    batch_transactions.process_to_successful(batch_id, ids)
"""

from __future__ import annotations

from collections.abc import Sequence

from zai_payment.config import CORE_BASE, Environment
from zai_payment.errors import ConfigurationError, ValidationError
from zai_payment.resources.base import Resource, compact, is_blank, validate_choice, validate_id
from zai_payment.response import Response

STATE_BANK_PROCESSING = 12700
STATE_SUCCESSFUL = 12000
SIMULATION_STATES = (STATE_BANK_PROCESSING, STATE_SUCCESSFUL)

TRANSACTION_TYPES = ("payment", "refund", "disbursement", "fee", "deposit", "withdrawal")
TRANSACTION_TYPE_METHODS = (
    "credit_card",
    "npp",
    "bpay",
    "wallet_account_transfer",
    "wire_transfer",
    "misc",
    "direct_credit",
    "direct_debit",
)
DIRECTIONS = ("debit", "credit")


class BatchTransactions(Resource):
    """Batch transactions API."""

    base_endpoint = CORE_BASE

    def list(
        self,
        limit: int = 10,
        offset: int = 0,
        account_id: str | None = None,
        batch_id: str | None = None,
        item_id: str | None = None,
        transaction_type: str | None = None,
        transaction_type_method: str | None = None,
        direction: str | None = None,
        created_before: str | None = None,
        created_after: str | None = None,
        disbursement_bank: str | None = None,
        processing_bank: str | None = None,
    ) -> Response:
        """List batch transactions matching the given filters.

        Raises:
            ValidationError: If an enumerated filter has an unknown value.
        """
        if transaction_type is not None:
            validate_choice(transaction_type, "transaction_type", TRANSACTION_TYPES)
        if transaction_type_method is not None:
            validate_choice(
                transaction_type_method, "transaction_type_method", TRANSACTION_TYPE_METHODS
            )
        if direction is not None:
            validate_choice(direction, "direction", DIRECTIONS)

        params = compact(
            {
                "limit": limit,
                "offset": offset,
                "account_id": account_id,
                "batch_id": batch_id,
                "item_id": item_id,
                "transaction_type": transaction_type,
                "transaction_type_method": transaction_type_method,
                "direction": direction,
                "created_before": created_before,
                "created_after": created_after,
                "disbursement_bank": disbursement_bank,
                "processing_bank": processing_bank,
            }
        )
        return self.client.get("/batch_transactions", params=params, data_key="batch_transactions")

    def show(self, batch_transaction_id: str) -> Response:
        validate_id(batch_transaction_id, "batch_transaction_id")
        return self.client.get(
            f"/batch_transactions/{batch_transaction_id}", data_key="batch_transactions"
        )

    def export_transactions(self) -> Response:
        """Export pending batch transactions. Prelive only."""
        self._ensure_prelive()
        return self.client.get(
            "/batch_transactions/export_transactions", data_key="batch_transactions"
        )

    def update_transaction_states(
        self,
        batch_id: str,
        exported_ids: Sequence[str],
        state: int,
    ) -> Response:
        """Move exported transactions to ``state`` (12700 or 12000). Prelive only.

        Raises:
            ConfigurationError: Outside the prelive environment.
            ValidationError: If the ids are missing or the state is unknown.
        """
        self._ensure_prelive()
        validate_id(batch_id, "batch_id")
        if isinstance(exported_ids, (str, bytes)) or not exported_ids:
            raise ValidationError("exported_ids is required and must be a non-empty list")
        if any(is_blank(exported_id) for exported_id in exported_ids):
            raise ValidationError("exported_ids cannot contain empty values")
        if state not in SIMULATION_STATES:
            raise ValidationError(
                f"state must be 12700 (bank_processing) or 12000 (successful), got: {state}"
            )

        return self.client.patch(
            f"/batches/{batch_id}/transaction_states",
            body={"exported_ids": list(exported_ids), "state": state},
            data_key="batches",
        )

    def process_to_bank_processing(self, batch_id: str, exported_ids: Sequence[str]) -> Response:
        return self.update_transaction_states(batch_id, exported_ids, STATE_BANK_PROCESSING)

    def process_to_successful(self, batch_id: str, exported_ids: Sequence[str]) -> Response:
        return self.update_transaction_states(batch_id, exported_ids, STATE_SUCCESSFUL)

    def _ensure_prelive(self) -> None:
        if self.config.environment is not Environment.PRELIVE:
            raise ConfigurationError(
                "Batch transaction simulation is only available in the prelive environment "
                f"(current environment: {self.config.environment.value})"
            )
