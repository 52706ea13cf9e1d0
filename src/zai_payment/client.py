"""Authenticated HTTP client for the Zai resource APIs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from zai_payment.auth.token_provider import TokenProvider
from zai_payment.config import VA_BASE, ZaiConfig
from zai_payment.http import create_http_client, send_request, translate_transport_errors
from zai_payment.response import Response

logger = structlog.get_logger()


class Client:
    """Sends JSON requests to one Zai base endpoint.

    Every request carries an Authorization header obtained from the token
    provider at send time, so an expired token is refreshed transparently.
    Non-2xx responses raise the mapped ApiError subclass.
    """

    def __init__(
        self,
        config: ZaiConfig,
        token_provider: TokenProvider,
        base_endpoint: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self.token_provider = token_provider
        self.base_endpoint = base_endpoint or VA_BASE
        self.base_url = config.endpoints.url_for(self.base_endpoint)
        self._owns_client = http_client is None
        self._http = http_client or create_http_client(config)

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        data_key: str | None = None,
    ) -> Response:
        return self.request("GET", path, params=params, data_key=data_key)

    def post(
        self,
        path: str,
        body: Mapping[str, Any] | None = None,
        data_key: str | None = None,
    ) -> Response:
        return self.request("POST", path, body=body, data_key=data_key)

    def patch(
        self,
        path: str,
        body: Mapping[str, Any] | None = None,
        data_key: str | None = None,
    ) -> Response:
        return self.request("PATCH", path, body=body, data_key=data_key)

    def delete(self, path: str, data_key: str | None = None) -> Response:
        return self.request("DELETE", path, data_key=data_key)

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
        data_key: str | None = None,
    ) -> Response:
        """Send a request and wrap the result.

        Raises:
            ApiError: For non-2xx responses (subclass chosen by status).
            NetworkError: On timeouts and connection failures.
            AuthError: If a token cannot be obtained.
        """
        headers = {
            "Authorization": self.token_provider.bearer_token(),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        url = f"{self.base_url}{path}"

        with translate_transport_errors(f"{method} {path}"):
            raw = send_request(
                self._http,
                method,
                url,
                deadline=self.config.timeout,
                params=dict(params) if params else None,
                json=dict(body) if body else None,
                headers=headers,
            )

        response = Response.from_httpx(raw, data_key=data_key)
        logger.debug("API request", method=method, path=path, status=response.status)
        return response.raise_for_status()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __repr__(self) -> str:
        return f"Client(base_endpoint={self.base_endpoint!r}, base_url={self.base_url!r})"
