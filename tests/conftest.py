"""Shared test fixtures for netzwerk.

Provides a silent global logger for every test, configuration isolation,
and helpers for building clients on top of :class:`httpx.MockTransport`.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest

from netzwerk.client import HttpxTransport, NetzwerkClient
from netzwerk.logger import NetworkLogger, reset_logger, set_logger
from netzwerk.models import ClientConfig

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global logger state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_logger() -> Iterator[NetworkLogger]:
    """Install a quiet global logger and reset it after every test."""
    logger = NetworkLogger(quiet=True, no_color=True)
    set_logger(logger)
    yield logger
    reset_logger()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and HOME into tmp_path, clears all NETZWERK_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ["NETZWERK_CONFIG", "NETZWERK_ENABLE_LOG", "NETZWERK_TIMEOUT"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Client helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client() -> Iterator[Callable[..., NetzwerkClient]]:
    """Factory building clients whose transport is an ``httpx.MockTransport``.

    Every client created through the factory is closed after the test.
    """
    clients: list[tuple[NetzwerkClient, HttpxTransport]] = []

    def factory(
        handler: Handler,
        config: ClientConfig | None = None,
        client_class: type[NetzwerkClient] = NetzwerkClient,
        **kwargs: Any,
    ) -> NetzwerkClient:
        config = config or ClientConfig(enable_log=False)
        transport = HttpxTransport(config.request, transport=httpx.MockTransport(handler))
        client = client_class(config, transport=transport, **kwargs)
        clients.append((client, transport))
        return client

    yield factory
    for client, transport in clients:
        client.close()
        transport.close()
