"""OAuth2 client-credentials token provider.

Issues bearer tokens for API calls, caching the current one until it is
within ``expiry_margin`` seconds of expiring. Concurrent callers that find
the cache stale share a single refresh request.

Usage:
    from zai_payment import ZaiConfig
    from zai_payment.auth import TokenProvider

    config = ZaiConfig(client_id="...", client_secret="...", scope="...")
    with TokenProvider(config) as provider:
        headers = {"Authorization": provider.bearer_token()}
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from zai_payment.auth.token_store import MemoryTokenStore, Token, TokenStore
from zai_payment.config import ZaiConfig
from zai_payment.errors import AuthError
from zai_payment.http import create_http_client, send_request, translate_transport_errors
from zai_payment.models import TokenResponse
from zai_payment.response import decode_body, extract_error_message

logger = structlog.get_logger()

DEFAULT_EXPIRY_MARGIN = 60
GRANT_TYPE = "client_credentials"


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenProvider:
    """Fetches and caches access tokens for one set of credentials."""

    def __init__(
        self,
        config: ZaiConfig,
        store: TokenStore | None = None,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] | None = None,
        expiry_margin: float = DEFAULT_EXPIRY_MARGIN,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Credentials and environment.
            store: Token cache (defaults to an in-memory store).
            http_client: Client used for the token request. When omitted one is
                created from the config timeouts and closed by ``close()``.
            clock: Returns the current aware UTC time.
            expiry_margin: Seconds before expiry at which a token counts as stale.
        """
        self.config = config
        self.store = store or MemoryTokenStore()
        self.expiry_margin = expiry_margin
        self._clock = clock or utc_now
        self._owns_client = http_client is None
        self._http = http_client or create_http_client(config)
        self._refresh_lock = threading.Lock()

    @property
    def token_url(self) -> str:
        return f"{self.config.endpoints.auth_base}/tokens"

    def bearer_token(self) -> str:
        """Return ``"<token_type> <access_token>"``, refreshing when stale.

        Raises:
            ConfigurationError: If a credential is missing.
            AuthError: If the token endpoint rejects the request.
            NetworkError: On timeouts and connection failures.
        """
        token = self.store.fetch()
        if token is not None and token.is_fresh(self._clock(), self.expiry_margin):
            return token.bearer

        with self._refresh_lock:
            # Another caller may have refreshed while we waited.
            token = self.store.fetch()
            if token is not None and token.is_fresh(self._clock(), self.expiry_margin):
                return token.bearer
            return self._refresh().bearer

    def refresh_token(self) -> str:
        """Fetch a new token regardless of the cache.

        The cached token is only replaced once the new one has been obtained,
        so a failed refresh leaves the previous token in place.
        """
        with self._refresh_lock:
            return self._refresh().bearer

    def clear_token(self) -> None:
        """Drop the cached token; the next bearer_token() call refreshes."""
        self.store.clear()
        logger.debug("Access token cleared")

    def token_type(self) -> str | None:
        token = self.store.fetch()
        return token.token_type if token else None

    def token_expiry(self) -> datetime | None:
        token = self.store.fetch()
        return token.expires_at if token else None

    def _refresh(self) -> Token:
        token = self._request_token()
        self.store.write(token)
        return token

    def _request_token(self) -> Token:
        self.config.validate_credentials()

        form = {
            "grant_type": GRANT_TYPE,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "scope": self.config.scope,
        }
        with translate_transport_errors("Token request"):
            response = send_request(
                self._http,
                "POST",
                self.token_url,
                deadline=self.config.timeout,
                data=form,
                headers={"Accept": "application/json"},
            )

        body = decode_body(response)
        if response.status_code >= 400:
            message = extract_error_message(response.status_code, body)
            logger.warning(
                "Token request rejected",
                status_code=response.status_code,
                environment=self.config.environment.value,
            )
            raise AuthError(
                f"Token request failed: {message}",
                status_code=response.status_code,
                body=body,
            )

        if not isinstance(body, dict):
            logger.warning("Token response is not JSON", status_code=response.status_code)
            raise AuthError(
                "Token response is not a JSON object",
                status_code=response.status_code,
            )

        try:
            parsed = TokenResponse.model_validate(body)
        except PydanticValidationError as e:
            logger.warning("Token response is malformed", status_code=response.status_code)
            raise AuthError(
                "Token response is missing a valid access token",
                status_code=response.status_code,
            ) from e

        expires_at = self._clock() + timedelta(seconds=parsed.expires_in)
        logger.info(
            "Access token refreshed",
            token_type=parsed.token_type,
            expires_in=parsed.expires_in,
        )
        return Token(
            access_token=parsed.access_token,
            token_type=parsed.token_type,
            expires_at=expires_at,
        )

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> TokenProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"TokenProvider(environment={self.config.environment.value!r}, "
            f"client_id={self.config.client_id!r})"
        )
