"""Tests for configuration loading from environment variables and files."""

from __future__ import annotations

import os
from unittest.mock import patch

import httpx
import pytest

from zai_payment.config import (
    AUTH_BASE,
    CORE_BASE,
    VA_BASE,
    Endpoints,
    Environment,
    ZaiConfig,
    load_config_from_file,
)
from zai_payment.errors import ConfigurationError
from zai_payment.http import build_timeout, create_http_client


class TestZaiConfig:
    """Test ZaiConfig settings."""

    def test_default_values(self) -> None:
        """Test default values."""
        config = ZaiConfig()
        assert config.environment is Environment.PRELIVE
        assert config.client_id is None
        assert config.client_secret is None
        assert config.scope is None
        assert config.timeout == 30.0
        assert config.open_timeout == 10.0
        assert config.read_timeout == 30.0

    def test_env_override(self) -> None:
        """Test ZAI_* env vars."""
        env = {
            "ZAI_ENVIRONMENT": "production",
            "ZAI_CLIENT_ID": "env-id",
            "ZAI_CLIENT_SECRET": "env-secret",
            "ZAI_SCOPE": "env-scope",
            "ZAI_READ_TIMEOUT": "45",
        }
        with patch.dict(os.environ, env):
            config = ZaiConfig()
            assert config.environment is Environment.PRODUCTION
            assert config.client_id == "env-id"
            assert config.client_secret == "env-secret"
            assert config.scope == "env-scope"
            assert config.read_timeout == 45.0

    def test_keyword_arguments_win_over_env(self) -> None:
        """Test explicit options take precedence."""
        with patch.dict(os.environ, {"ZAI_CLIENT_ID": "env-id"}):
            assert ZaiConfig(client_id="explicit").client_id == "explicit"

    def test_dotenv_file(self, tmp_path) -> None:
        """Test .env in the working directory is read."""
        (tmp_path / ".env").write_text("ZAI_SCOPE=from-dotenv\n")
        assert ZaiConfig().scope == "from-dotenv"

    def test_secret_hidden_from_repr(self) -> None:
        """Test client_secret is not shown in repr."""
        config = ZaiConfig(client_secret="do-not-print")
        assert "do-not-print" not in repr(config)

    def test_validate_credentials_passes(self) -> None:
        """Test complete credentials validate."""
        ZaiConfig(client_id="a", client_secret="b", scope="c").validate_credentials()

    @pytest.mark.parametrize(
        ("options", "missing"),
        [
            ({"client_secret": "b", "scope": "c"}, "client_id"),
            ({"client_id": "a", "scope": "c"}, "client_secret"),
            ({"client_id": "a", "client_secret": "b", "scope": "  "}, "scope"),
        ],
    )
    def test_validate_credentials_names_missing_field(self, options, missing) -> None:
        """Test the first missing credential is named."""
        with pytest.raises(ConfigurationError, match=f"{missing} is required"):
            ZaiConfig(**options).validate_credentials()

    def test_build_wraps_invalid_options(self) -> None:
        """Test invalid options raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="environment"):
            ZaiConfig.build(environment="staging")
        with pytest.raises(ConfigurationError, match="timeout"):
            ZaiConfig.build(timeout=0)


class TestEndpoints:
    """Test environment endpoint selection."""

    def test_prelive_endpoints(self) -> None:
        """Test prelive URLs."""
        endpoints = ZaiConfig(environment="prelive").endpoints
        assert endpoints.core_base == "https://test.api.promisepay.com"
        assert endpoints.va_base == "https://sandbox.au-0000.api.assemblypay.com"
        assert endpoints.auth_base == "https://au-0000.sandbox.auth.assemblypay.com"

    def test_production_endpoints(self) -> None:
        """Test production URLs."""
        endpoints = ZaiConfig(environment="production").endpoints
        assert endpoints.core_base == "https://au-0000.api.assemblypay.com"
        assert endpoints.va_base == "https://secure.api.promisepay.com"
        assert endpoints.auth_base == "https://au-0000.auth.assemblypay.com"

    def test_webhook_base_endpoint(self) -> None:
        """Test webhooks live on core_base in production and va_base in prelive."""
        assert ZaiConfig(environment="production").webhook_base_endpoint == CORE_BASE
        assert ZaiConfig(environment="prelive").webhook_base_endpoint == VA_BASE

    def test_url_for(self) -> None:
        """Test lookup by endpoint name."""
        endpoints = Endpoints(core_base="c", va_base="v", auth_base="a")
        assert endpoints.url_for(CORE_BASE) == "c"
        assert endpoints.url_for(VA_BASE) == "v"
        assert endpoints.url_for(AUTH_BASE) == "a"

    def test_url_for_unknown(self) -> None:
        """Test unknown endpoint names are rejected."""
        with pytest.raises(ConfigurationError):
            Endpoints(core_base="c", va_base="v", auth_base="a").url_for("nope")


class TestConfigFile:
    """Test loading configuration files."""

    def test_yaml_top_level(self, tmp_path) -> None:
        """Test YAML file with top-level options."""
        path = tmp_path / "zai.yaml"
        path.write_text("environment: production\nclient_id: file-id\ntimeout: 12\n")
        config = ZaiConfig.from_file(path)
        assert config.environment is Environment.PRODUCTION
        assert config.client_id == "file-id"
        assert config.timeout == 12.0

    def test_toml_section(self, tmp_path) -> None:
        """Test TOML file with a [zai] section."""
        path = tmp_path / "settings.toml"
        path.write_text('[zai]\nclient_id = "toml-id"\nscope = "s"\n')
        config = ZaiConfig.from_file(path)
        assert config.client_id == "toml-id"
        assert config.scope == "s"

    def test_overrides_win(self, tmp_path) -> None:
        """Test keyword overrides beat file values."""
        path = tmp_path / "zai.yml"
        path.write_text("client_id: file-id\n")
        assert ZaiConfig.from_file(path, client_id="override").client_id == "override"

    def test_missing_file(self, tmp_path) -> None:
        """Test missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config_from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path) -> None:
        """Test unknown extensions are rejected."""
        path = tmp_path / "zai.ini"
        path.write_text("[zai]\n")
        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config_from_file(path)

    def test_invalid_yaml(self, tmp_path) -> None:
        """Test YAML syntax errors are reported as ValueError."""
        path = tmp_path / "zai.yaml"
        path.write_text("client_id: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config_from_file(path)

    def test_empty_yaml(self, tmp_path) -> None:
        """Test an empty YAML file yields an empty mapping."""
        path = tmp_path / "zai.yaml"
        path.write_text("")
        assert load_config_from_file(path) == {}

    @pytest.mark.parametrize("content", ["- client_id\n- scope\n", "just text\n", "42\n"])
    def test_non_mapping_yaml(self, tmp_path, content) -> None:
        """Test a YAML list or scalar at top level raises ConfigurationError."""
        path = tmp_path / "zai.yaml"
        path.write_text(content)
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            ZaiConfig.from_file(path)


class TestHttpTimeouts:
    """Test mapping of configured timeouts onto httpx."""

    def test_build_timeout(self) -> None:
        """Test open/read/general timeouts map to connect/read/write+pool."""
        timeout = build_timeout(ZaiConfig(timeout=20, open_timeout=5, read_timeout=40))
        assert timeout == httpx.Timeout(20, connect=5, read=40)
        assert timeout.write == 20
        assert timeout.pool == 20

    def test_create_http_client(self) -> None:
        """Test client carries timeouts and a User-Agent."""
        with create_http_client(ZaiConfig(open_timeout=3)) as client:
            assert client.timeout.connect == 3
            assert client.headers["User-Agent"] == "zai-payment-python"
