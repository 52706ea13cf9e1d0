"""Client context and the process-wide default.

A ZaiContext bundles everything needed to talk to Zai with one set of
credentials: the configuration, a token provider, the webhook secret keys,
one shared HTTP connection pool and the resource wrappers. Applications that
need several accounts create several contexts.

Most applications only need one, so the module keeps a lazily built default
context behind plain functions:

    import zai_payment

    zai_payment.configure(client_id="...", client_secret="...", scope="...")
    zai_payment.users().show("user-123")

Calling configure() again discards the default context, so a token fetched
with the old credentials is never reused.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, TypeVar

import httpx
import structlog

from zai_payment.auth.token_provider import TokenProvider
from zai_payment.auth.token_store import TokenStore
from zai_payment.client import Client
from zai_payment.config import ZaiConfig
from zai_payment.http import create_http_client
from zai_payment.resources import (
    BankAccounts,
    BatchTransactions,
    BpayAccounts,
    Items,
    PayIds,
    Resource,
    TokenAuths,
    Users,
    VirtualAccounts,
    WalletAccounts,
    Webhooks,
)
from zai_payment.signatures.keys import SecretKeyRegistry

logger = structlog.get_logger()

ResourceT = TypeVar("ResourceT", bound=Resource)


class ZaiContext:
    """Configuration, token provider, secret keys and resources for one account."""

    def __init__(
        self,
        config: ZaiConfig,
        http_client: httpx.Client | None = None,
        token_store: TokenStore | None = None,
        secret_keys: SecretKeyRegistry | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            config: Credentials and environment.
            http_client: Shared HTTP client. When omitted one is created from the
                config timeouts and closed by ``close()``.
            token_store: Token cache for the provider.
            secret_keys: Webhook secret keys (a fresh registry by default).
        """
        self.config = config
        self._owns_client = http_client is None
        self.http_client = http_client or create_http_client(config)
        self.token_provider = TokenProvider(config, store=token_store, http_client=self.http_client)
        self.secret_keys = secret_keys if secret_keys is not None else SecretKeyRegistry()
        self._resources: dict[type[Resource], Resource] = {}
        self._lock = threading.Lock()

    def client_for(self, base_endpoint: str) -> Client:
        """Build an API client for ``base_endpoint`` sharing this context's pool."""
        return Client(
            self.config,
            self.token_provider,
            base_endpoint=base_endpoint,
            http_client=self.http_client,
        )

    def resource(self, resource_cls: type[ResourceT]) -> ResourceT:
        """Return this context's instance of ``resource_cls``, creating it once."""
        with self._lock:
            instance = self._resources.get(resource_cls)
            if instance is None:
                client = self.client_for(resource_cls.endpoint_for(self.config))
                if issubclass(resource_cls, Webhooks):
                    instance = resource_cls(client, secret_keys=self.secret_keys)
                else:
                    instance = resource_cls(client)
                self._resources[resource_cls] = instance
            return instance  # type: ignore[return-value]

    @property
    def users(self) -> Users:
        return self.resource(Users)

    @property
    def items(self) -> Items:
        return self.resource(Items)

    @property
    def webhooks(self) -> Webhooks:
        return self.resource(Webhooks)

    @property
    def token_auths(self) -> TokenAuths:
        return self.resource(TokenAuths)

    @property
    def batch_transactions(self) -> BatchTransactions:
        return self.resource(BatchTransactions)

    @property
    def virtual_accounts(self) -> VirtualAccounts:
        return self.resource(VirtualAccounts)

    @property
    def pay_ids(self) -> PayIds:
        return self.resource(PayIds)

    @property
    def bank_accounts(self) -> BankAccounts:
        return self.resource(BankAccounts)

    @property
    def bpay_accounts(self) -> BpayAccounts:
        return self.resource(BpayAccounts)

    @property
    def wallet_accounts(self) -> WalletAccounts:
        return self.resource(WalletAccounts)

    def token(self) -> str:
        """Return a bearer token, refreshing it when stale."""
        return self.token_provider.bearer_token()

    def refresh_token(self) -> str:
        return self.token_provider.refresh_token()

    def clear_token(self) -> None:
        self.token_provider.clear_token()

    def token_type(self) -> str | None:
        return self.token_provider.token_type()

    def token_expiry(self) -> datetime | None:
        return self.token_provider.token_expiry()

    def close(self) -> None:
        """Close the shared HTTP client if this context created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self) -> ZaiContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ZaiContext(environment={self.config.environment.value!r})"


_config: ZaiConfig | None = None
_context: ZaiContext | None = None
_lock = threading.Lock()


def configure(config: ZaiConfig | None = None, **options: Any) -> ZaiConfig:
    """Set the default configuration and discard the default context.

    Options are applied on top of ``config`` if given, else on top of the
    current configuration, else on top of the environment.

    Example:
        configure(environment="production", client_id="...", client_secret="...", scope="...")

    Raises:
        ConfigurationError: If an option is invalid.
    """
    global _config, _context
    with _lock:
        base = config if config is not None else _config
        if base is None:
            new_config = ZaiConfig.build(**options)
        elif options:
            new_config = ZaiConfig.build(**{**base.model_dump(), **options})
        else:
            new_config = base

        if _context is not None:
            _context.close()
        _config = new_config
        _context = None

    logger.info("Zai client configured", environment=new_config.environment.value)
    return new_config


def _load_config() -> ZaiConfig:
    global _config
    if _config is None:
        _config = ZaiConfig.build()
    return _config


def get_config() -> ZaiConfig:
    """Get the default configuration, reading the environment on first use."""
    with _lock:
        return _load_config()


def get_context() -> ZaiContext:
    """Get the default context, creating it on first use."""
    global _context
    with _lock:
        if _context is None:
            _context = ZaiContext(_load_config())
        return _context


def reset() -> None:
    """Discard the default configuration and context.

    The next call re-reads the environment. Useful for testing.
    """
    global _config, _context
    with _lock:
        if _context is not None:
            _context.close()
        _config = None
        _context = None


def token() -> str:
    """Return a bearer token for the default context."""
    return get_context().token()


def refresh_token() -> str:
    return get_context().refresh_token()


def clear_token() -> None:
    get_context().clear_token()


def token_type() -> str | None:
    return get_context().token_type()


def token_expiry() -> datetime | None:
    return get_context().token_expiry()


def users() -> Users:
    return get_context().users


def items() -> Items:
    return get_context().items


def webhooks() -> Webhooks:
    return get_context().webhooks


def token_auths() -> TokenAuths:
    return get_context().token_auths


def batch_transactions() -> BatchTransactions:
    return get_context().batch_transactions


def virtual_accounts() -> VirtualAccounts:
    return get_context().virtual_accounts


def pay_ids() -> PayIds:
    return get_context().pay_ids


def bank_accounts() -> BankAccounts:
    return get_context().bank_accounts


def bpay_accounts() -> BpayAccounts:
    return get_context().bpay_accounts


def wallet_accounts() -> WalletAccounts:
    return get_context().wallet_accounts


def secret_keys() -> SecretKeyRegistry:
    return get_context().secret_keys
