"""Zai webhook signature verification.

Usage:
    from zai_payment.signatures import SecretKeyRegistry, WebhookVerifier

    registry = SecretKeyRegistry()
    registry.create_secret_key("my-webhook-secret")

    verifier = WebhookVerifier(secret_keys=registry)
    if verifier.verify_signature(request_body, signature_header):
        print("Webhook verified!")
"""

from zai_payment.signatures.keys import DEFAULT_KEY_NAME, SecretKeyRegistry
from zai_payment.signatures.verifier import (
    DEFAULT_TOLERANCE,
    SignatureHeader,
    VerificationResult,
    VerificationStatus,
    WebhookVerifier,
    generate_signature,
    parse_signature_header,
    verify_signature,
)

__all__ = [
    "DEFAULT_KEY_NAME",
    "DEFAULT_TOLERANCE",
    "SecretKeyRegistry",
    "SignatureHeader",
    "VerificationResult",
    "VerificationStatus",
    "WebhookVerifier",
    "generate_signature",
    "parse_signature_header",
    "verify_signature",
]
