"""Integration test fixtures.

Provides a fully wired AppState: real engine, real httpx client (mocked at
the transport by respx in each test) and a fake clock for TTL control.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from websearch.engine import build_engine
from websearch.fetcher import build_http_client
from websearch.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from tests.conftest import FakeClock
    from websearch.config import Settings


@pytest.fixture()
async def app_state(settings: Settings, clock: FakeClock) -> AsyncIterator[AppState]:
    """AppState wired the same way the server lifespan wires it."""
    async with build_http_client(settings.fetcher) as client:
        yield AppState(
            settings=settings,
            engine=build_engine(settings, client, clock=clock),
            http_client=client,
        )


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Points the user config directory at an empty tmp directory so a local
    websearch.yaml cannot change the server under test.
    """
    env = os.environ.copy()
    env["XDG_CONFIG_HOME"] = str(tmp_path)
    env["WEBSEARCH__LOGGING__LEVEL"] = "WARNING"
    return env
