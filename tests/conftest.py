"""Shared test fixtures for reru.

Provides an isolated configuration environment and helpers for building
:class:`httpx.Client` instances backed by :class:`httpx.MockTransport`, so no
test touches the network or the real user config.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest


Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config lookups at an empty temp dir and clear RERU_* variables.

    Returns:
        The directory used as ``XDG_CONFIG_HOME``.
    """
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for var in [
        "RERU_CONFIG",
        "RERU_TIMEOUT",
        "RERU_VERIFY_SSL",
        "RERU_FOLLOW_REDIRECTS",
        "RERU_HTTP2",
    ]:
        monkeypatch.delenv(var, raising=False)
    return config_home


@pytest.fixture
def write_config(isolated_config: Path) -> Callable[[Any], Path]:
    """Return a helper that writes the user config file and returns its path."""

    def _write(data: Any) -> Path:
        path = isolated_config / "reru" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Mock transports
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client() -> Callable[[Handler], httpx.Client]:
    """Return a factory for clients whose requests go to *handler*."""
    clients: list[httpx.Client] = []

    def _make(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def echo_handler() -> Handler:
    """Return a handler replying with a JSON description of the request it received."""
    return _echo


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "headers": dict(request.headers),
            "body": request.content.decode("utf-8"),
        },
    )
