"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, and shared test
doubles. Fixtures here are autouse unless noted.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import suppress
import logging
import os

import httpx
import pytest
import pytest_asyncio

from courier.config import TransportConfig
from courier.transport import HttpTransport

BASE_URL = "https://api.example.test"

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_courier_env(request, monkeypatch):
    """Clear COURIER_* env vars so configuration tests start from defaults.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("COURIER_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Transport Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def make_transport() -> AsyncIterator[Callable[..., HttpTransport]]:
    """Yield a factory for transports backed by ``httpx.MockTransport``.

    The handler receives each ``httpx.Request`` and returns a response or
    raises, exactly like a real network backend would. Clients are injected,
    so the transport leaves them open; they are closed here on teardown.
    """
    clients: list[httpx.AsyncClient] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        config: TransportConfig | None = None,
    ) -> HttpTransport:
        client = httpx.AsyncClient(
            base_url=BASE_URL, transport=httpx.MockTransport(handler)
        )
        clients.append(client)
        return HttpTransport(client, config=config or TransportConfig(base_url=BASE_URL))

    yield _make

    for client in clients:
        await client.aclose()
