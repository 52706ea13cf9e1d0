"""In-memory storage for the cached access token.

A Token is immutable; refreshing replaces the stored object wholesale, so a
reader always sees either the previous entry or the new one, never a mix.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Token:
    """Cached access token and its expiry."""

    access_token: str = field(repr=False)
    expires_at: datetime
    token_type: str = "Bearer"

    @property
    def bearer(self) -> str:
        """Authorization header value."""
        return f"{self.token_type} {self.access_token}"

    def is_fresh(self, now: datetime, margin: float = 0) -> bool:
        """True while ``now`` is before the expiry minus ``margin`` seconds."""
        return now < self.expires_at - timedelta(seconds=margin)


class TokenStore(ABC):
    """Holds at most one Token."""

    @abstractmethod
    def fetch(self) -> Token | None:
        """Return the stored token, or None."""

    @abstractmethod
    def write(self, token: Token) -> None:
        """Replace the stored token."""

    @abstractmethod
    def clear(self) -> None:
        """Drop the stored token."""


class MemoryTokenStore(TokenStore):
    """Process-local token store."""

    def __init__(self) -> None:
        self._token: Token | None = None
        self._lock = threading.Lock()

    def fetch(self) -> Token | None:
        with self._lock:
            return self._token

    def write(self, token: Token) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            self._token = None
