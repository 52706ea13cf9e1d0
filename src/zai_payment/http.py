"""HTTP transport helpers shared by the token provider and the API client.

httpx exceptions never leave this module's context manager: timeouts and
connection failures are re-raised as the library's NetworkError kinds.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
import structlog

from zai_payment.config import ZaiConfig
from zai_payment.errors import (
    ConfigurationError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
)

logger = structlog.get_logger()

USER_AGENT = "zai-payment-python"


def build_timeout(config: ZaiConfig) -> httpx.Timeout:
    """Map the three configured timeouts onto an httpx.Timeout.

    open_timeout bounds connecting and read_timeout bounds each read. The
    general timeout covers writing and waiting for a pooled connection here,
    and is also enforced as the overall deadline by send_request.
    """
    return httpx.Timeout(
        config.timeout,
        connect=config.open_timeout,
        read=config.read_timeout,
    )


def create_http_client(config: ZaiConfig) -> httpx.Client:
    """Create a synchronous HTTP client honouring the configured timeouts."""
    return httpx.Client(
        timeout=build_timeout(config),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=False,
    )


def send_request(
    http_client: httpx.Client,
    method: str,
    url: str,
    *,
    deadline: float,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request and read its body within an overall deadline.

    httpx only bounds individual phases, so a server that keeps trickling
    bytes never trips read_timeout. The body is streamed and the elapsed time
    is checked after the headers and after every chunk.

    Args:
        http_client: Client to send through.
        method: HTTP method.
        url: Absolute request URL.
        deadline: Seconds allowed for the whole exchange.
        **kwargs: Passed to httpx.Client.build_request.

    Returns:
        A fully read httpx.Response.

    Raises:
        NetworkTimeoutError: If the deadline passes before the body is read.
        ConfigurationError: If the client was closed by a reconfiguration.
    """
    if http_client.is_closed:
        raise _closed_client_error()

    started = time.monotonic()
    request = http_client.build_request(method, url, **kwargs)
    try:
        response = http_client.send(request, stream=True)
    except RuntimeError as e:
        if http_client.is_closed:
            raise _closed_client_error() from e
        raise

    try:
        chunks = []
        _check_deadline(started, deadline, method)
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            _check_deadline(started, deadline, method)
    finally:
        response.close()

    # The chunks are already decoded.
    headers = response.headers.copy()
    headers.pop("Content-Encoding", None)
    headers.pop("Content-Length", None)
    return httpx.Response(
        response.status_code,
        headers=headers,
        content=b"".join(chunks),
        request=request,
    )


def _check_deadline(started: float, deadline: float, method: str) -> None:
    elapsed = time.monotonic() - started
    if elapsed > deadline:
        logger.warning("Request deadline exceeded", method=method, elapsed=round(elapsed, 3), deadline=deadline)
        raise NetworkTimeoutError(f"Request exceeded the overall timeout of {deadline}s")


def _closed_client_error() -> ConfigurationError:
    logger.warning("Request on closed HTTP client")
    return ConfigurationError(
        "HTTP client has been closed; the context was reconfigured or closed, "
        "obtain a new resource handle"
    )


@contextmanager
def translate_transport_errors(operation: str) -> Iterator[None]:
    """Convert httpx transport exceptions into NetworkError kinds.

    Args:
        operation: Short description used in the error message and log event.

    Raises:
        NetworkTimeoutError: On any httpx timeout.
        NetworkConnectionError: On connection and other transport failures.
        NetworkError: On any remaining httpx request error.
    """
    try:
        yield
    except httpx.TimeoutException as e:
        logger.warning("Request timed out", operation=operation, error_type=type(e).__name__)
        raise NetworkTimeoutError(f"{operation} timed out: {e}") from e
    except httpx.TransportError as e:
        logger.warning("Connection failed", operation=operation, error_type=type(e).__name__)
        raise NetworkConnectionError(f"{operation} failed to connect: {e}") from e
    except httpx.RequestError as e:
        logger.error("Request error", operation=operation, error_type=type(e).__name__)
        raise NetworkError(f"{operation} failed: {e}") from e
