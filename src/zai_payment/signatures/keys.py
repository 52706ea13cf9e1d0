"""Named webhook secret keys.

Several keys can be active at once so a secret can be rotated without
rejecting webhooks signed with the previous one:

    registry.create_secret_key(new_secret, name="2024-06")
    # ... deploy, wait for in-flight deliveries ...
    registry.remove("default")
"""

from __future__ import annotations

import threading

import structlog

from zai_payment.errors import ValidationError

logger = structlog.get_logger()

DEFAULT_KEY_NAME = "default"


def to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


class SecretKeyRegistry:
    """Thread-safe mapping of key names to webhook secrets."""

    def __init__(self) -> None:
        self._keys: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def create_secret_key(self, secret_key: str | bytes, name: str = DEFAULT_KEY_NAME) -> None:
        """Register ``secret_key`` under ``name``, replacing only that slot.

        Raises:
            ValidationError: If the secret or the name is empty.
        """
        if not secret_key:
            raise ValidationError("secret_key is required and cannot be blank")
        if not name or not name.strip():
            raise ValidationError("name is required and cannot be blank")

        with self._lock:
            replaced = name in self._keys
            self._keys[name] = to_bytes(secret_key)
        logger.info("Webhook secret key registered", name=name, replaced=replaced)

    def remove(self, name: str) -> None:
        """Remove the key registered under ``name``.

        Raises:
            KeyError: If no key has that name.
        """
        with self._lock:
            if name not in self._keys:
                raise KeyError(name)
            del self._keys[name]
        logger.info("Webhook secret key removed", name=name)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()

    def names(self) -> list[str]:
        with self._lock:
            return list(self._keys)

    def secrets(self) -> list[tuple[str, bytes]]:
        """Snapshot of ``(name, secret)`` pairs in registration order."""
        with self._lock:
            return list(self._keys.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._keys

    def __bool__(self) -> bool:
        return len(self) > 0

    def __repr__(self) -> str:
        return f"SecretKeyRegistry(names={self.names()!r})"
