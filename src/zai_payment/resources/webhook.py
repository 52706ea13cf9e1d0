"""Webhooks: subscriptions, delivery jobs and signature secrets.

Example:
    webhooks.create(url="https://example.com/hooks", object_type="transactions")
    webhooks.create_secret_key("x" * 32)

    # In the endpoint receiving deliveries:
    if not webhooks.verify_signature(request_body, request.headers["Webhooks-signature"]):
        abort(401)
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from zai_payment.client import Client
from zai_payment.config import ZaiConfig
from zai_payment.errors import ValidationError
from zai_payment.resources.base import Resource, compact, is_blank, validate_id
from zai_payment.response import Response
from zai_payment.signatures.keys import DEFAULT_KEY_NAME, SecretKeyRegistry
from zai_payment.signatures.verifier import SecretKeys, WebhookVerifier, generate_signature

MIN_SECRET_KEY_BYTES = 32


def validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("url must be a valid HTTP or HTTPS URL")


def validate_secret_key(secret_key: str) -> None:
    if is_blank(secret_key):
        raise ValidationError("secret_key is required and cannot be blank")
    if not secret_key.isascii():
        raise ValidationError("secret_key must contain only ASCII characters")
    if len(secret_key.encode("ascii")) < MIN_SECRET_KEY_BYTES:
        raise ValidationError(f"secret_key must be at least {MIN_SECRET_KEY_BYTES} bytes in size")


class Webhooks(Resource):
    """Webhooks API plus local signature verification."""

    def __init__(
        self,
        client: Client,
        secret_keys: SecretKeyRegistry | None = None,
        verifier: WebhookVerifier | None = None,
    ) -> None:
        super().__init__(client)
        self.secret_keys = secret_keys if secret_keys is not None else SecretKeyRegistry()
        self.verifier = verifier or WebhookVerifier(secret_keys=self.secret_keys)

    @classmethod
    def endpoint_for(cls, config: ZaiConfig) -> str:
        return config.webhook_base_endpoint

    def list(self, limit: int = 10, offset: int = 0) -> Response:
        return self.client.get(
            "/webhooks", params={"limit": limit, "offset": offset}, data_key="webhooks"
        )

    def show(self, webhook_id: str) -> Response:
        validate_id(webhook_id, "webhook_id")
        return self.client.get(f"/webhooks/{webhook_id}", data_key="webhooks")

    def create(
        self,
        url: str | None = None,
        object_type: str | None = None,
        enabled: bool = True,
        description: str | None = None,
    ) -> Response:
        if is_blank(url):
            raise ValidationError("url is required and cannot be blank")
        if is_blank(object_type):
            raise ValidationError("object_type is required and cannot be blank")
        validate_url(url)

        body: dict[str, Any] = {"url": url, "object_type": object_type, "enabled": enabled}
        if description:
            body["description"] = description
        return self.client.post("/webhooks", body=body, data_key="webhooks")

    def update(
        self,
        webhook_id: str,
        url: str | None = None,
        object_type: str | None = None,
        enabled: bool | None = None,
        description: str | None = None,
    ) -> Response:
        validate_id(webhook_id, "webhook_id")
        if url:
            validate_url(url)

        body: dict[str, Any] = {}
        if url:
            body["url"] = url
        if object_type:
            body["object_type"] = object_type
        if enabled is not None:
            body["enabled"] = enabled
        if description:
            body["description"] = description
        if not body:
            raise ValidationError("At least one attribute must be provided for update")

        return self.client.patch(f"/webhooks/{webhook_id}", body=body, data_key="webhooks")

    def delete(self, webhook_id: str) -> Response:
        validate_id(webhook_id, "webhook_id")
        return self.client.delete(f"/webhooks/{webhook_id}")

    def list_jobs(
        self,
        webhook_id: str,
        limit: int = 10,
        offset: int = 0,
        status: str | None = None,
        object_id: str | None = None,
    ) -> Response:
        """List delivery jobs for a webhook, optionally filtered by status or object."""
        validate_id(webhook_id, "webhook_id")
        params = compact(
            {"limit": limit, "offset": offset, "status": status, "object_id": object_id}
        )
        return self.client.get(f"/webhooks/{webhook_id}/jobs", params=params, data_key="jobs")

    def show_job(self, webhook_id: str, job_id: str) -> Response:
        validate_id(webhook_id, "webhook_id")
        validate_id(job_id, "job_id")
        return self.client.get(f"/webhooks/{webhook_id}/jobs/{job_id}", data_key="jobs")

    def create_secret_key(self, secret_key: str, name: str = DEFAULT_KEY_NAME) -> Response:
        """Upload the secret Zai signs deliveries with and register it locally.

        The key is only registered once the API has accepted it.

        Raises:
            ValidationError: If the key is not ASCII or shorter than 32 bytes.
        """
        validate_secret_key(secret_key)
        response = self.client.post("/webhooks/secret_key", body={"secret_key": secret_key})
        self.secret_keys.create_secret_key(secret_key, name=name)
        return response

    def generate_signature(
        self,
        payload: str | bytes,
        secret_key: str | bytes,
        timestamp: int | None = None,
    ) -> str:
        return generate_signature(payload, secret_key, timestamp)

    def verify_signature(
        self,
        payload: str | bytes,
        signature_header: str,
        secret_key: SecretKeys | None = None,
        tolerance: int | None = None,
    ) -> bool:
        """Check a delivery against the registered keys (or ``secret_key``)."""
        return self.verifier.verify_signature(payload, signature_header, secret_key, tolerance)
