"""Tests for the zai-payment CLI."""

from __future__ import annotations

import json
import time
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from zai_payment.cli import main, mask_token
from zai_payment.signatures import generate_signature

PAYLOAD = b'{"event": "status_updated"}'
SECRET = "xPpcHHoAOM"
TIMESTAMP = 1257894000
SIGNATURE = "MHs6orLEJg1W1wPqkL_8X24UjUVe-ZiAXtk2ICHotuQ"

CREDENTIALS = {
    "ZAI_CLIENT_ID": "client-id",
    "ZAI_CLIENT_SECRET": "client-secret",
    "ZAI_SCOPE": "scope-a",
}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_bytes(PAYLOAD)
    return path


class TestCLIBasics:
    """Basic CLI tests."""

    def test_main_with_help(self, runner):
        """Test --help lists the commands."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Zai Payment" in result.output
        for command in ("token", "sign", "verify", "version"):
            assert command in result.output

    def test_version_command(self, runner):
        """Test version command."""
        result = runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "Version:" in result.output
        assert "0.1.0" in result.output
        assert "Python:" in result.output


class TestMaskToken:
    """Tests for mask_token."""

    def test_long_token(self):
        assert mask_token("abcdefghijklmnop") == "abcdef...mnop"

    def test_short_token(self):
        assert mask_token("short") == "*****"


class TestSignCommand:
    """Tests for sign command."""

    def test_sign_with_timestamp(self, runner, payload_file):
        """Test the signature header for a fixed timestamp."""
        result = runner.invoke(
            main, ["sign", str(payload_file), "--secret", SECRET, "--timestamp", str(TIMESTAMP)]
        )

        assert result.exit_code == 0
        assert result.output.strip() == f"t={TIMESTAMP},v={SIGNATURE}"

    def test_sign_secret_from_env(self, runner, payload_file):
        """Test the secret can come from ZAI_WEBHOOK_SECRET."""
        result = runner.invoke(
            main,
            ["sign", str(payload_file), "-t", str(TIMESTAMP)],
            env={"ZAI_WEBHOOK_SECRET": SECRET},
        )

        assert result.exit_code == 0
        assert SIGNATURE in result.output

    def test_sign_requires_secret(self, runner, payload_file):
        """Test a missing secret is a usage error."""
        result = runner.invoke(main, ["sign", str(payload_file)])
        assert result.exit_code == 2


class TestVerifyCommand:
    """Tests for verify command."""

    def _header(self, secret: str = SECRET) -> str:
        timestamp = int(time.time())
        return f"t={timestamp},v={generate_signature(PAYLOAD, secret, timestamp)}"

    def test_valid(self, runner, payload_file):
        """Test a fresh, correctly signed delivery exits 0."""
        result = runner.invoke(
            main, ["verify", str(payload_file), "--header", self._header(), "--secret", SECRET]
        )

        assert result.exit_code == 0
        assert "Valid" in result.output
        assert "secret-1" in result.output

    def test_rotated_secret(self, runner, payload_file):
        """Test the second of two secrets can match."""
        result = runner.invoke(
            main,
            [
                "verify",
                str(payload_file),
                "-H",
                self._header("new-secret"),
                "-s",
                SECRET,
                "-s",
                "new-secret",
            ],
        )

        assert result.exit_code == 0
        assert "secret-2" in result.output

    def test_wrong_secret(self, runner, payload_file):
        """Test a mismatch exits 1."""
        result = runner.invoke(
            main, ["verify", str(payload_file), "-H", self._header("other"), "-s", SECRET]
        )

        assert result.exit_code == 1
        assert "Rejected" in result.output
        assert "invalid_signature" in result.output

    def test_expired_timestamp(self, runner, payload_file):
        """Test the known old vector is rejected as expired."""
        result = runner.invoke(
            main,
            ["verify", str(payload_file), "-H", f"t={TIMESTAMP},v={SIGNATURE}", "-s", SECRET],
        )

        assert result.exit_code == 1
        assert "expired_timestamp" in result.output

    def test_malformed_header(self, runner, payload_file):
        """Test an unparseable header exits 2."""
        result = runner.invoke(main, ["verify", str(payload_file), "-H", "garbage", "-s", SECRET])

        assert result.exit_code == 2
        assert "Invalid input" in result.output

    def test_negative_tolerance_rejected(self, runner, payload_file):
        """Test --tolerance must be non-negative."""
        result = runner.invoke(
            main,
            ["verify", str(payload_file), "-H", self._header(), "-s", SECRET, "--tolerance", "-1"],
        )
        assert result.exit_code == 2


class TestTokenCommand:
    """Tests for token command."""

    def test_token_json(self, runner, fake_zai):
        """Test --json prints masked token details."""
        with patch(
            "zai_payment.auth.token_provider.create_http_client",
            return_value=fake_zai.http_client(),
        ):
            result = runner.invoke(main, ["token", "--json"], env=CREDENTIALS)

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["environment"] == "prelive"
        assert data["token_type"] == "Bearer"
        assert data["expires_at"] is not None
        assert data["access_token"] == "*******"
        assert fake_zai.token_calls == 1

    def test_token_table(self, runner, fake_zai):
        """Test the default output is a table."""
        with patch(
            "zai_payment.auth.token_provider.create_http_client",
            return_value=fake_zai.http_client(),
        ):
            result = runner.invoke(main, ["token", "--refresh"], env=CREDENTIALS)

        assert result.exit_code == 0
        assert "Access token" in result.output
        assert "Bearer" in result.output

    def test_token_from_config_file(self, runner, fake_zai, tmp_path):
        """Test --config loads credentials from a YAML file."""
        path = tmp_path / "zai.yaml"
        path.write_text("client_id: file-id\nclient_secret: file-secret\nscope: file-scope\n")

        with patch(
            "zai_payment.auth.token_provider.create_http_client",
            return_value=fake_zai.http_client(),
        ):
            result = runner.invoke(main, ["--config", str(path), "token", "--json"])

        assert result.exit_code == 0
        assert b"client_id=file-id" in fake_zai.requests[0].content

    def test_missing_credentials(self, runner, fake_zai):
        """Test missing credentials exit 2 without a request."""
        with patch(
            "zai_payment.auth.token_provider.create_http_client",
            return_value=fake_zai.http_client(),
        ):
            result = runner.invoke(main, ["token"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output
        assert fake_zai.requests == []

    def test_token_rejected(self, runner, fake_zai):
        """Test an auth failure exits 1."""
        fake_zai.fail_token(401, json={"error": "invalid_client"})
        with patch(
            "zai_payment.auth.token_provider.create_http_client",
            return_value=fake_zai.http_client(),
        ):
            result = runner.invoke(main, ["token"], env=CREDENTIALS)

        assert result.exit_code == 1
        assert "invalid_client" in result.output
