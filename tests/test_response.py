"""Tests for the response wrapper and HTTP status to error mapping."""

from __future__ import annotations

import httpx
import pytest

from zai_payment.errors import (
    ApiError,
    ApiValidationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ZaiError,
)
from zai_payment.models import User, Webhook
from zai_payment.response import Response, error_class_for_status, extract_error_message


class TestStatusMapping:
    """Test error class selection."""

    @pytest.mark.parametrize(
        ("status", "error_class"),
        [
            (400, BadRequestError),
            (401, UnauthorizedError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (422, ApiValidationError),
            (429, RateLimitError),
            (500, ServerError),
            (502, ServerError),
            (599, ServerError),
            (409, ApiError),
            (418, ApiError),
        ],
    )
    def test_error_class_for_status(self, status, error_class):
        """Test mapped and unmapped statuses."""
        assert error_class_for_status(status) is error_class

    def test_hierarchy(self):
        """Test all API errors share the ZaiError base."""
        for error_class in (BadRequestError, RateLimitError, ServerError):
            assert issubclass(error_class, ApiError)
            assert issubclass(error_class, ZaiError)


class TestExtractErrorMessage:
    """Test message extraction from error bodies."""

    def test_error_field(self):
        """Test 'error' wins."""
        assert extract_error_message(400, {"error": "bad", "message": "other"}) == "bad"

    def test_message_field(self):
        """Test 'message' is used when 'error' is absent."""
        assert extract_error_message(400, {"message": "Nope"}) == "Nope"

    def test_errors_list(self):
        """Test list of errors is joined."""
        assert extract_error_message(422, {"errors": ["a", "b"]}) == "a, b"

    def test_errors_mapping(self):
        """Test mapping of errors renders key: value pairs."""
        body = {"errors": {"email": ["is invalid"], "name": "missing"}}
        assert extract_error_message(422, body) == "email: ['is invalid'], name: missing"

    def test_empty_json_body(self):
        """Test fallback to the status."""
        assert extract_error_message(500, {}) == "HTTP 500"

    def test_text_body(self):
        """Test non-JSON bodies are included."""
        assert extract_error_message(502, "Bad Gateway") == "HTTP 502: Bad Gateway"

    def test_no_body(self):
        """Test empty body."""
        assert extract_error_message(503, None) == "HTTP 503"


class TestResponse:
    """Test Response wrapper."""

    def test_status_predicates(self):
        """Test success/client_error/server_error."""
        assert Response(204).success
        assert Response(404).client_error
        assert Response(503).server_error
        assert not Response(302).success

    def test_data_uses_declared_key(self):
        """Test data unwraps the declared envelope key."""
        response = Response(200, {"users": [{"id": "1"}], "meta": {"total": 1}}, data_key="users")
        assert response.data == [{"id": "1"}]
        assert response.meta == {"total": 1}

    def test_data_without_key_returns_body(self):
        """Test data falls back to the whole body."""
        body = {"id": "1", "email": "a@b.co"}
        assert Response(200, body, data_key="users").data == body
        assert Response(200, body).data == body

    def test_data_does_not_guess_keys(self):
        """Test other envelope keys are not picked up."""
        body = {"webhooks": [1], "users": [2]}
        assert Response(200, body, data_key="users").data == [2]
        assert Response(200, body).data == body

    def test_meta_for_non_mapping(self):
        """Test meta is None for list or text bodies."""
        assert Response(200, [1, 2]).meta is None
        assert Response(200, "text").meta is None

    def test_parse_single_model(self):
        """Test parse decodes a single object."""
        user = Response(200, {"users": {"id": "u1", "email": "a@b.co"}}, data_key="users").parse(User)
        assert isinstance(user, User)
        assert user.email == "a@b.co"

    def test_parse_list(self):
        """Test parse decodes a list of objects and keeps unknown fields."""
        response = Response(
            200,
            {"webhooks": [{"uuid": "w1", "url": "https://x.io", "extra": True}]},
            data_key="webhooks",
        )
        webhooks = response.parse(Webhook)
        assert webhooks[0].id == "w1"
        assert webhooks[0].extra is True

    def test_raise_for_status_success(self):
        """Test 2xx returns the response."""
        response = Response(200, {})
        assert response.raise_for_status() is response

    def test_raise_for_status_error(self):
        """Test non-2xx raises the mapped error with status and body."""
        body = {"message": "User not found"}
        with pytest.raises(NotFoundError) as exc_info:
            Response(404, body).raise_for_status()

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == body
        assert str(exc_info.value) == "User not found"

    def test_rate_limit_retry_after(self):
        """Test Retry-After is exposed on RateLimitError."""
        with pytest.raises(RateLimitError) as exc_info:
            Response(429, {"error": "slow down"}, headers={"Retry-After": "30"}).raise_for_status()
        assert exc_info.value.retry_after == 30

    def test_rate_limit_without_retry_after(self):
        """Test missing Retry-After leaves retry_after unset."""
        with pytest.raises(RateLimitError) as exc_info:
            Response(429).raise_for_status()
        assert exc_info.value.retry_after is None

    @pytest.mark.parametrize("value", ["soon", "²", "Wed, 21 Oct 2015 07:28:00 GMT"])
    def test_rate_limit_unparseable_retry_after(self, value):
        """Test a non-numeric Retry-After still raises RateLimitError."""
        with pytest.raises(RateLimitError) as exc_info:
            Response(429, headers={"Retry-After": value}).raise_for_status()
        assert exc_info.value.retry_after is None

    def test_from_httpx_json(self):
        """Test JSON bodies are decoded."""
        raw = httpx.Response(200, json={"items": []})
        response = Response.from_httpx(raw, data_key="items")
        assert response.data == []
        assert response.headers["content-type"] == "application/json"

    def test_from_httpx_text_and_empty(self):
        """Test text bodies stay text and empty bodies become None."""
        assert Response.from_httpx(httpx.Response(502, text="Bad Gateway")).body == "Bad Gateway"
        assert Response.from_httpx(httpx.Response(204)).body is None

    def test_from_httpx_invalid_json(self):
        """Test a JSON content type with a broken body falls back to text."""
        raw = httpx.Response(500, content=b"{oops", headers={"Content-Type": "application/json"})
        assert Response.from_httpx(raw).body == "{oops"
