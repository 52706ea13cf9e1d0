"""Configuration types with environment variable support.

All settings can be configured via environment variables with the ZAI_ prefix.
Example: ZAI_ENVIRONMENT=production selects the production endpoints.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from zai_payment.errors import ConfigurationError

CORE_BASE = "core_base"
VA_BASE = "va_base"
AUTH_BASE = "auth_base"


def load_config_from_file(path: str | Path) -> dict[str, Any]:
    """Load configuration from a YAML or TOML file.

    Args:
        path: Path to the configuration file (.yaml, .yml, or .toml)

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config file has encoding errors, invalid syntax, or unsupported format
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Config file encoding error in {path}: {e}") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(content) or {}
        elif path.suffix == ".toml":
            return tomllib.loads(content)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


class Environment(str, Enum):
    """Zai deployment the client talks to."""

    PRELIVE = "prelive"
    PRODUCTION = "production"


@dataclass(frozen=True)
class Endpoints:
    """Base URLs for one environment."""

    core_base: str
    va_base: str
    auth_base: str

    def url_for(self, name: str) -> str:
        """Return the base URL registered under ``name``."""
        if name not in (CORE_BASE, VA_BASE, AUTH_BASE):
            raise ConfigurationError(f"Unknown base endpoint: {name}")
        return getattr(self, name)


ENDPOINTS: dict[Environment, Endpoints] = {
    Environment.PRELIVE: Endpoints(
        core_base="https://test.api.promisepay.com",
        va_base="https://sandbox.au-0000.api.assemblypay.com",
        auth_base="https://au-0000.sandbox.auth.assemblypay.com",
    ),
    Environment.PRODUCTION: Endpoints(
        core_base="https://au-0000.api.assemblypay.com",
        va_base="https://secure.api.promisepay.com",
        auth_base="https://au-0000.auth.assemblypay.com",
    ),
}


class ZaiConfig(BaseSettings):
    """Client configuration.

    Settings can be passed as keyword arguments or read from the
    environment (ZAI_CLIENT_ID, ZAI_CLIENT_SECRET, ZAI_SCOPE, ...).

    Example:
        config = ZaiConfig(client_id="...", client_secret="...", scope="...")
        config.validate_credentials()
        print(config.endpoints.auth_base)
    """

    model_config = SettingsConfigDict(
        env_prefix="ZAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Field(
        default=Environment.PRELIVE,
        description="Target environment: 'prelive' or 'production'.",
    )
    client_id: str | None = Field(
        default=None,
        description="OAuth2 client identifier.",
    )
    client_secret: str | None = Field(
        default=None,
        repr=False,
        description="OAuth2 client secret.",
    )
    scope: str | None = Field(
        default=None,
        description="Scope requested with every access token.",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Overall request deadline (seconds), also bounds the write and pool phases.",
    )
    open_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Connection open timeout (seconds).",
    )
    read_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Read timeout (seconds).",
    )

    @property
    def endpoints(self) -> Endpoints:
        """Base URLs for the configured environment."""
        return ENDPOINTS[self.environment]

    @property
    def webhook_base_endpoint(self) -> str:
        """Base endpoint name serving the webhooks API.

        Production serves webhooks from core_base, prelive from va_base.
        """
        if self.environment is Environment.PRODUCTION:
            return CORE_BASE
        return VA_BASE

    def validate_credentials(self) -> None:
        """Ensure the credentials needed for a token request are present.

        Raises:
            ConfigurationError: If client_id, client_secret or scope is empty.
        """
        for name in ("client_id", "client_secret", "scope"):
            value = getattr(self, name)
            if value is None or not value.strip():
                raise ConfigurationError(f"{name} is required")

    @classmethod
    def build(cls, **options: Any) -> ZaiConfig:
        """Create a config, reporting invalid options as ConfigurationError."""
        try:
            return cls(**options)
        except PydanticValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {fields}") from e

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> ZaiConfig:
        """Load a config from a YAML or TOML file.

        The file may hold the options at top level or under a ``zai`` section.
        """
        data = load_config_from_file(path)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping of options")
        if isinstance(data.get("zai"), dict):
            data = data["zai"]
        return cls.build(**{**data, **overrides})
