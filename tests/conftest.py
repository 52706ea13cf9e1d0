"""Shared fixtures: a fake Zai platform served through httpx.MockTransport."""

from __future__ import annotations

import os
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from zai_payment import context
from zai_payment.auth import TokenProvider
from zai_payment.client import Client
from zai_payment.config import ZaiConfig

TOKEN_PATH = "/tokens"


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeZai:
    """In-process stand-in for the Zai token endpoint and resource APIs."""

    def __init__(self, expires_in: int = 3600) -> None:
        self.expires_in = expires_in
        self.requests: list[httpx.Request] = []
        self.token_calls = 0
        self.token_failure: Callable[[httpx.Request], httpx.Response] | Exception | None = None
        self.on_token: Callable[[], None] | None = None
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Answer ``method path`` with a fresh response on every call."""
        self._routes[(method, path)] = lambda request: httpx.Response(
            status, json=json, headers=headers
        )

    def fail_token(self, status: int = 401, json: Any = None, text: str | None = None) -> None:
        if text is not None:
            self.token_failure = lambda request: httpx.Response(status, text=text)
        else:
            self.token_failure = lambda request: httpx.Response(status, json=json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == TOKEN_PATH:
            return self._token(request)
        responder = self._routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"error": "Not found"})
        return responder(request)

    def _token(self, request: httpx.Request) -> httpx.Response:
        self.token_calls += 1
        if self.on_token is not None:
            self.on_token()
        if isinstance(self.token_failure, Exception):
            raise self.token_failure
        if self.token_failure is not None:
            return self.token_failure(request)
        return httpx.Response(
            200,
            json={
                "access_token": f"token-{self.token_calls}",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            },
        )

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != TOKEN_PATH]


class DripStream(httpx.SyncByteStream):
    """Response body that trickles out one byte at a time."""

    def __init__(self, body: bytes, delay: float) -> None:
        self.body = body
        self.delay = delay

    def __iter__(self):
        for byte in self.body:
            time.sleep(self.delay)
            yield bytes([byte])

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep ZAI_* variables and .env files from leaking into tests."""
    for name in list(os.environ):
        if name.startswith("ZAI_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    context.reset()
    yield
    context.reset()


@pytest.fixture
def config() -> ZaiConfig:
    return ZaiConfig(client_id="client-id", client_secret="client-secret", scope="scope-a")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_zai() -> FakeZai:
    return FakeZai()


@pytest.fixture
def provider(config: ZaiConfig, fake_zai: FakeZai, clock: FakeClock) -> TokenProvider:
    return TokenProvider(config, http_client=fake_zai.http_client(), clock=clock)


@pytest.fixture
def make_client(config: ZaiConfig, provider: TokenProvider, fake_zai: FakeZai):
    """Build a Client for a base endpoint, backed by the fake platform."""

    def factory(base_endpoint: str | None = None) -> Client:
        return Client(config, provider, base_endpoint=base_endpoint, http_client=fake_zai.http_client())

    return factory


@pytest.fixture
def drip_client():
    """Build an HTTP client whose every response body arrives slowly."""

    def factory(body: bytes, delay: float = 0.02, status: int = 200) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status,
                headers={"Content-Type": "application/json"},
                stream=DripStream(body, delay),
            )

        return httpx.Client(transport=httpx.MockTransport(handler))

    return factory
