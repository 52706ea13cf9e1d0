"""Access token lifecycle."""

from zai_payment.auth.token_provider import TokenProvider
from zai_payment.auth.token_store import MemoryTokenStore, Token, TokenStore

__all__ = [
    "MemoryTokenStore",
    "Token",
    "TokenProvider",
    "TokenStore",
]
