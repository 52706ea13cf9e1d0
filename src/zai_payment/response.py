"""API response wrapper and status-to-error mapping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from zai_payment.errors import (
    ApiError,
    ApiValidationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

ERROR_STATUS_MAP: dict[int, type[ApiError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    422: ApiValidationError,
    429: RateLimitError,
}


def error_class_for_status(status: int) -> type[ApiError]:
    """Return the ApiError subclass raised for an HTTP status."""
    if 500 <= status <= 599:
        return ServerError
    return ERROR_STATUS_MAP.get(status, ApiError)


def _format_errors(errors: Any) -> str | None:
    if errors is None:
        return None
    if isinstance(errors, list):
        return ", ".join(str(e) for e in errors)
    if isinstance(errors, Mapping):
        return ", ".join(f"{key}: {value}" for key, value in errors.items())
    return str(errors)


def extract_error_message(status: int, body: Any) -> str:
    """Build a human-readable message from an error response body.

    Looks at the ``error``, ``message`` and ``errors`` fields in that order
    and falls back to ``HTTP <status>``.
    """
    if isinstance(body, Mapping):
        for candidate in (body.get("error"), body.get("message"), _format_errors(body.get("errors"))):
            if candidate:
                return str(candidate)
        return f"HTTP {status}"
    if body:
        return f"HTTP {status}: {body}"
    return f"HTTP {status}"


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON when possible, else as text."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def _retry_after(headers: Mapping[str, str]) -> int | None:
    value = headers.get("retry-after")
    if value and value.strip().isascii() and value.strip().isdigit():
        return int(value)
    return None


class Response:
    """Wrapper for API responses.

    Attributes:
        status: HTTP status code.
        body: Decoded JSON body, raw text, or None for an empty body.
        headers: Response headers.
        data_key: Envelope key the calling resource expects its payload under.
    """

    def __init__(
        self,
        status: int,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        data_key: str | None = None,
    ) -> None:
        self.status = status
        self.body = body
        self.headers = httpx.Headers(headers or {})
        self.data_key = data_key

    @classmethod
    def from_httpx(cls, response: httpx.Response, data_key: str | None = None) -> Response:
        """Wrap an httpx response."""
        return cls(
            status=response.status_code,
            body=decode_body(response),
            headers=response.headers,
            data_key=data_key,
        )

    @property
    def success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status <= 299

    @property
    def client_error(self) -> bool:
        """True for 4xx statuses."""
        return 400 <= self.status <= 499

    @property
    def server_error(self) -> bool:
        """True for 5xx statuses."""
        return 500 <= self.status <= 599

    @property
    def data(self) -> Any:
        """Payload under the declared envelope key, or the whole body."""
        if self.data_key and isinstance(self.body, Mapping) and self.data_key in self.body:
            return self.body[self.data_key]
        return self.body

    @property
    def meta(self) -> Any:
        """Pagination/metadata block, if the body carries one."""
        if isinstance(self.body, Mapping):
            return self.body.get("meta")
        return None

    def parse(self, model: type[ModelT]) -> ModelT | list[ModelT]:
        """Decode ``data`` into a model, or a list of models for list payloads."""
        data = self.data
        if isinstance(data, list):
            return [model.model_validate(entry) for entry in data]
        return model.model_validate(data)

    def raise_for_status(self) -> Response:
        """Raise the mapped ApiError for a non-2xx status.

        Returns:
            The response itself, for chaining.
        """
        if self.success:
            return self

        error_class = error_class_for_status(self.status)
        message = extract_error_message(self.status, self.body)
        if error_class is RateLimitError:
            raise RateLimitError(
                message,
                status_code=self.status,
                body=self.body,
                retry_after=_retry_after(self.headers),
            )
        raise error_class(message, status_code=self.status, body=self.body)

    def __repr__(self) -> str:
        return f"Response(status={self.status}, data_key={self.data_key!r})"
