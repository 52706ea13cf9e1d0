"""Zai Payment error hierarchy.

Every error raised by the library derives from ZaiError so callers can
catch the whole family, while the subclasses keep the distinct failure
kinds apart:

- ConfigurationError: missing or invalid setup, raised before any request
- ValidationError: client-side input validation, raised before any request
- AuthError: the token endpoint rejected the credentials or answered badly
- NetworkError: timeouts and connection failures ("retry later")
- ApiError: non-2xx responses from the resource APIs, keyed by status

Usage:
    from zai_payment.errors import NetworkError, NotFoundError

    try:
        users.show("user-123")
    except NotFoundError:
        ...
    except NetworkError:
        ...
"""

from __future__ import annotations

from typing import Any


class ZaiError(Exception):
    """Base class for all Zai Payment errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ZaiError):
    """Library is not configured well enough to perform the call."""


class ValidationError(ZaiError):
    """Input rejected on the client side before anything was sent."""


class SignatureHeaderError(ValidationError):
    """Webhook signature header is malformed."""


class AuthError(ZaiError):
    """Access token could not be obtained."""


class NetworkError(ZaiError):
    """Request failed at the transport level."""


class NetworkTimeoutError(NetworkError):
    """Connecting, reading or writing timed out."""


class NetworkConnectionError(NetworkError):
    """Connection could not be established or was dropped."""


class ApiError(ZaiError):
    """Non-success response from the API."""


class BadRequestError(ApiError):
    """HTTP 400."""


class UnauthorizedError(ApiError):
    """HTTP 401."""


class ForbiddenError(ApiError):
    """HTTP 403."""


class NotFoundError(ApiError):
    """HTTP 404."""


class ApiValidationError(ApiError):
    """HTTP 422, the API rejected the submitted attributes."""


class RateLimitError(ApiError):
    """HTTP 429."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, body=body)
        self.retry_after = retry_after


class ServerError(ApiError):
    """HTTP 5xx."""
