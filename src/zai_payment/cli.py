"""Zai Payment CLI - Command line interface."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from zai_payment.auth import TokenProvider
from zai_payment.config import ZaiConfig
from zai_payment.errors import ConfigurationError, ValidationError, ZaiError
from zai_payment.signatures import (
    DEFAULT_TOLERANCE,
    SecretKeyRegistry,
    WebhookVerifier,
    generate_signature,
)

console = Console()

EXIT_REJECTED = 1
EXIT_USAGE = 2


def configure_logging(log_level: str, verbose: bool) -> None:
    effective_log_level = "debug" if verbose else log_level
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, effective_log_level.upper())
        ),
    )


def mask_token(value: str) -> str:
    if len(value) <= 10:
        return "*" * len(value)
    return f"{value[:6]}...{value[-4:]}"


def _load_config(ctx: click.Context) -> ZaiConfig:
    config_file = ctx.obj.get("config_file")
    if config_file:
        return ZaiConfig.from_file(config_file)
    return ZaiConfig.build()


@click.group()
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to YAML or TOML config file (defaults to ZAI_* environment variables)",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Log level (default: warning, use --verbose for debug)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str, verbose: bool):
    """Zai Payment - tools for the Zai payments API.

    Examples:

        zai-payment token

        zai-payment sign payload.json --secret "$ZAI_WEBHOOK_SECRET"

        zai-payment verify payload.json --header "t=...,v=..." --secret "$ZAI_WEBHOOK_SECRET"
    """
    configure_logging(log_level, verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


@main.command()
@click.option("--refresh", is_flag=True, help="Always request a new token")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def token(ctx: click.Context, refresh: bool, json_output: bool):
    """Fetch an access token with the configured credentials.

    The token itself is masked; only its type and expiry are shown in full.
    """
    try:
        config = _load_config(ctx)
        with TokenProvider(config) as provider:
            bearer = provider.refresh_token() if refresh else provider.bearer_token()
            token_type = provider.token_type()
            expiry = provider.token_expiry()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(EXIT_USAGE)
    except (ZaiError, ValueError, FileNotFoundError) as e:
        console.print(f"[red]Token request failed:[/red] {e}")
        sys.exit(EXIT_REJECTED)

    access_token = bearer.split(" ", 1)[-1]
    expires_at = expiry.isoformat() if expiry else None

    if json_output:
        click.echo(
            json.dumps(
                {
                    "environment": config.environment.value,
                    "token_type": token_type,
                    "expires_at": expires_at,
                    "access_token": mask_token(access_token),
                },
                indent=2,
            )
        )
        return

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Environment", config.environment.value)
    table.add_row("Token type", token_type or "")
    table.add_row("Expires at", expires_at or "")
    table.add_row("Access token", mask_token(access_token))
    console.print(Panel(table, title="Access token", border_style="green"))


@main.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--secret", "-s", required=True, envvar="ZAI_WEBHOOK_SECRET", help="Webhook secret key")
@click.option("--timestamp", "-t", type=int, default=None, help="Unix timestamp (default: now)")
def sign(payload_file: str, secret: str, timestamp: int | None):
    """Print a signature header for PAYLOAD_FILE.

    Useful for sending signed test deliveries to your own webhook endpoint.
    """
    payload = Path(payload_file).read_bytes()
    if timestamp is None:
        timestamp = int(time.time())
    signature = generate_signature(payload, secret, timestamp)
    click.echo(f"t={timestamp},v={signature}")


@main.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--header", "-H", "signature_header", required=True, help="Signature header value")
@click.option(
    "--secret",
    "-s",
    "secrets",
    multiple=True,
    required=True,
    help="Webhook secret key (repeat for rotation)",
)
@click.option(
    "--tolerance",
    type=click.IntRange(min=0),
    default=DEFAULT_TOLERANCE,
    help=f"Maximum timestamp age in seconds (default: {DEFAULT_TOLERANCE})",
)
def verify(payload_file: str, signature_header: str, secrets: tuple[str, ...], tolerance: int):
    """Verify a webhook delivery stored in PAYLOAD_FILE.

    Exits 0 when the signature is valid, 1 when it is rejected and 2 when the
    header is malformed.
    """
    registry = SecretKeyRegistry()
    try:
        for index, secret in enumerate(secrets, start=1):
            registry.create_secret_key(secret, name=f"secret-{index}")
        verifier = WebhookVerifier(secret_keys=registry, tolerance=tolerance)
        result = verifier.verify(Path(payload_file).read_bytes(), signature_header)
    except (ValidationError, ConfigurationError) as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        sys.exit(EXIT_USAGE)

    if result:
        console.print(f"[green]Valid[/green] (key: {result.key_name}, timestamp: {result.timestamp})")
        return

    console.print(f"[red]Rejected:[/red] {result.status.value} - {result.error}")
    sys.exit(EXIT_REJECTED)


@main.command()
def version():
    """Show version information."""
    from zai_payment import __version__

    console.print(f"[bold]Version:[/bold] {__version__}")
    console.print(f"[bold]Python:[/bold] {sys.version}")


if __name__ == "__main__":
    main()
