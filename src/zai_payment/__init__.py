"""Zai Payment - Python client for the Zai payments platform.

Usage:
    import zai_payment

    zai_payment.configure(
        environment="prelive",
        client_id="...",
        client_secret="...",
        scope="...",
    )

    user = zai_payment.users().show("user-123").parse(zai_payment.models.User)

    if zai_payment.webhooks().verify_signature(body, signature_header):
        ...
"""

from zai_payment import models
from zai_payment.auth import MemoryTokenStore, Token, TokenProvider, TokenStore
from zai_payment.client import Client
from zai_payment.config import Environment, ZaiConfig
from zai_payment.context import (
    ZaiContext,
    bank_accounts,
    batch_transactions,
    bpay_accounts,
    clear_token,
    configure,
    get_config,
    get_context,
    items,
    pay_ids,
    refresh_token,
    reset,
    secret_keys,
    token,
    token_auths,
    token_expiry,
    token_type,
    users,
    virtual_accounts,
    wallet_accounts,
    webhooks,
)
from zai_payment.errors import (
    ApiError,
    ApiValidationError,
    AuthError,
    BadRequestError,
    ConfigurationError,
    ForbiddenError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    NotFoundError,
    RateLimitError,
    ServerError,
    SignatureHeaderError,
    UnauthorizedError,
    ValidationError,
    ZaiError,
)
from zai_payment.response import Response
from zai_payment.signatures import (
    SecretKeyRegistry,
    VerificationResult,
    VerificationStatus,
    WebhookVerifier,
    generate_signature,
    parse_signature_header,
    verify_signature,
)

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiValidationError",
    "AuthError",
    "BadRequestError",
    "Client",
    "ConfigurationError",
    "Environment",
    "ForbiddenError",
    "MemoryTokenStore",
    "NetworkConnectionError",
    "NetworkError",
    "NetworkTimeoutError",
    "NotFoundError",
    "RateLimitError",
    "Response",
    "SecretKeyRegistry",
    "ServerError",
    "SignatureHeaderError",
    "Token",
    "TokenProvider",
    "TokenStore",
    "UnauthorizedError",
    "ValidationError",
    "VerificationResult",
    "VerificationStatus",
    "WebhookVerifier",
    "ZaiConfig",
    "ZaiContext",
    "ZaiError",
    "__version__",
    "bank_accounts",
    "batch_transactions",
    "bpay_accounts",
    "clear_token",
    "configure",
    "generate_signature",
    "get_config",
    "get_context",
    "items",
    "models",
    "parse_signature_header",
    "pay_ids",
    "refresh_token",
    "reset",
    "secret_keys",
    "token",
    "token_auths",
    "token_expiry",
    "token_type",
    "users",
    "verify_signature",
    "virtual_accounts",
    "wallet_accounts",
    "webhooks",
]
