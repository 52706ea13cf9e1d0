"""Zai Webhook Signature Verification.

Zai signs each delivery with HMAC-SHA256 over ``"<timestamp>.<body>"`` and
sends the result in a header of the form::

    t=1257894000,v=MHs6orLEJg1W1wPqkL_8X24UjUVe-ZiAXtk2ICHotuQ

Signatures are URL-safe base64 without padding. A header may carry several
``v`` entries while a secret is being rotated.

Security Features:
- Constant-time comparison of every candidate against every key
- Timestamp validation to prevent replay attacks, in both directions
- Several secret keys accepted at once for rotation

Usage:
    from zai_payment.signatures import WebhookVerifier

    verifier = WebhookVerifier(secret_keys=registry)
    result = verifier.verify(request_body, request.headers["Webhooks-signature"])
    if not result:
        print(result.status, result.error)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from zai_payment.errors import ConfigurationError, SignatureHeaderError, ValidationError
from zai_payment.signatures.keys import DEFAULT_KEY_NAME, SecretKeyRegistry, to_bytes

logger = structlog.get_logger()

DEFAULT_TOLERANCE = 300

SecretKeys = str | bytes | Iterable[str | bytes] | SecretKeyRegistry

_FIELD_SEPARATOR = re.compile(r"[,\s]+")
_TIMESTAMP = re.compile(r"[0-9]+")


class VerificationStatus(Enum):
    """Status of webhook signature verification."""

    VALID = "valid"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED_TIMESTAMP = "expired_timestamp"


@dataclass
class VerificationResult:
    """Result of webhook signature verification."""

    valid: bool
    """Whether the signature is valid."""

    status: VerificationStatus
    """Detailed verification status."""

    error: str | None = None
    """Reason for rejection."""

    timestamp: int | None = None
    """Timestamp taken from the signature header."""

    key_name: str | None = None
    """Name of the secret key that matched."""

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.valid


@dataclass(frozen=True)
class SignatureHeader:
    """Parsed signature header."""

    timestamp: int
    signatures: tuple[str, ...]


def parse_signature_header(header: str) -> SignatureHeader:
    """Parse a ``t=<ts>,v=<sig>[,v=<sig>...]`` signature header.

    Fields may be separated by commas, whitespace or both. Unknown keys are
    ignored.

    Raises:
        SignatureHeaderError: If the header is blank, has no valid timestamp,
            has more than one timestamp, or carries no signature.
    """
    if header is None or not header.strip():
        raise SignatureHeaderError("Signature header is required and cannot be blank")

    timestamp: int | None = None
    signatures: list[str] = []

    for item in _FIELD_SEPARATOR.split(header.strip()):
        key, sep, value = item.partition("=")
        if not sep:
            raise SignatureHeaderError(f"Malformed signature header field: {item!r}")
        key = key.strip()
        value = value.strip()
        if key == "t":
            if timestamp is not None:
                raise SignatureHeaderError("Signature header has more than one timestamp")
            if not _TIMESTAMP.fullmatch(value) or int(value) == 0:
                raise SignatureHeaderError("Invalid timestamp in signature header")
            timestamp = int(value)
        elif key == "v":
            if value:
                signatures.append(value)

    if timestamp is None:
        raise SignatureHeaderError("Timestamp missing from signature header")
    if not signatures:
        raise SignatureHeaderError("No signature found in signature header")

    return SignatureHeader(timestamp=timestamp, signatures=tuple(signatures))


def generate_signature(
    payload: str | bytes,
    secret_key: str | bytes,
    timestamp: int | None = None,
) -> str:
    """Compute the signature Zai sends for ``payload`` at ``timestamp``.

    Args:
        payload: Raw request body.
        secret_key: Webhook secret key.
        timestamp: Unix timestamp; defaults to now.

    Returns:
        URL-safe base64 signature without padding.
    """
    if timestamp is None:
        timestamp = int(time.time())
    signed_payload = f"{timestamp}.".encode() + to_bytes(payload)
    digest = hmac.new(to_bytes(secret_key), signed_payload, hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _constant_time_compare(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def _resolve_keys(secret_key: SecretKeys) -> list[tuple[str, bytes]]:
    if isinstance(secret_key, SecretKeyRegistry):
        return secret_key.secrets()
    if isinstance(secret_key, (str, bytes)):
        return [(DEFAULT_KEY_NAME, to_bytes(secret_key))] if secret_key else []
    return [(f"key-{index}", to_bytes(key)) for index, key in enumerate(secret_key) if key]


class WebhookVerifier:
    """Verifies Zai webhook signatures against one or more secret keys."""

    def __init__(
        self,
        secret_keys: SecretKeyRegistry | None = None,
        tolerance: int = DEFAULT_TOLERANCE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the webhook verifier.

        Args:
            secret_keys: Registry consulted when no key is passed to verify().
            tolerance: Maximum age of the timestamp in seconds (default 5 min).
            clock: Returns the current Unix time.
        """
        if tolerance < 0:
            raise ValidationError("tolerance must be a non-negative number of seconds")
        self.secret_keys = secret_keys if secret_keys is not None else SecretKeyRegistry()
        self.tolerance = tolerance
        self._clock = clock

    def verify(
        self,
        payload: str | bytes,
        signature_header: str,
        secret_key: SecretKeys | None = None,
        tolerance: int | None = None,
    ) -> VerificationResult:
        """Verify a webhook delivery.

        Args:
            payload: The raw request body.
            signature_header: Value of the signature header.
            secret_key: Key(s) to check against; defaults to the registry.
            tolerance: Override for the allowed timestamp age in seconds.

        Returns:
            VerificationResult with status and details.

        Raises:
            ValidationError: If the payload is None or the tolerance is negative.
            SignatureHeaderError: If the header cannot be parsed.
            ConfigurationError: If no secret key is available.
        """
        if payload is None:
            raise ValidationError("payload is required")
        tolerance = self.tolerance if tolerance is None else tolerance
        if tolerance < 0:
            raise ValidationError("tolerance must be a non-negative number of seconds")

        header = parse_signature_header(signature_header)

        keys = _resolve_keys(self.secret_keys if secret_key is None else secret_key)
        if not keys:
            raise ConfigurationError("No webhook secret key configured")

        age = int(self._clock()) - header.timestamp
        if abs(age) > tolerance:
            logger.warning(
                "Webhook timestamp outside tolerance",
                timestamp=header.timestamp,
                age=age,
                tolerance=tolerance,
            )
            return VerificationResult(
                valid=False,
                status=VerificationStatus.EXPIRED_TIMESTAMP,
                error=f"Timestamp {header.timestamp} is outside tolerance window",
                timestamp=header.timestamp,
            )

        body = to_bytes(payload)
        matched: str | None = None
        # Every pair is compared so timing does not reveal which one matched.
        for name, key in keys:
            expected = generate_signature(body, key, header.timestamp)
            for candidate in header.signatures:
                if _constant_time_compare(candidate, expected) and matched is None:
                    matched = name

        if matched is None:
            logger.warning(
                "Webhook signature mismatch",
                timestamp=header.timestamp,
                candidates=len(header.signatures),
            )
            return VerificationResult(
                valid=False,
                status=VerificationStatus.INVALID_SIGNATURE,
                error="Signature mismatch",
                timestamp=header.timestamp,
            )

        return VerificationResult(
            valid=True,
            status=VerificationStatus.VALID,
            timestamp=header.timestamp,
            key_name=matched,
        )

    def verify_signature(
        self,
        payload: str | bytes,
        signature_header: str,
        secret_key: SecretKeys | None = None,
        tolerance: int | None = None,
    ) -> bool:
        """Return True if the delivery is authentic and recent."""
        return self.verify(payload, signature_header, secret_key, tolerance).valid


def verify_signature(
    payload: str | bytes,
    signature_header: str,
    secret_key: SecretKeys,
    tolerance: int = DEFAULT_TOLERANCE,
) -> bool:
    """Verify a webhook delivery against ``secret_key``.

    Example:
        verify_signature(body, header, "my-secret-key")
    """
    return WebhookVerifier(tolerance=tolerance).verify_signature(
        payload, signature_header, secret_key=secret_key
    )
