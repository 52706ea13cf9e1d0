"""Resource wrappers for the Zai REST APIs."""

from zai_payment.resources.bank_account import BankAccounts
from zai_payment.resources.base import Resource
from zai_payment.resources.batch_transaction import BatchTransactions
from zai_payment.resources.bpay_account import BpayAccounts
from zai_payment.resources.item import Items
from zai_payment.resources.pay_id import PayIds
from zai_payment.resources.token_auth import TokenAuths
from zai_payment.resources.user import Users
from zai_payment.resources.virtual_account import VirtualAccounts
from zai_payment.resources.wallet_account import WalletAccounts
from zai_payment.resources.webhook import Webhooks

__all__ = [
    "BankAccounts",
    "BatchTransactions",
    "BpayAccounts",
    "Items",
    "PayIds",
    "Resource",
    "TokenAuths",
    "Users",
    "VirtualAccounts",
    "WalletAccounts",
    "Webhooks",
]
