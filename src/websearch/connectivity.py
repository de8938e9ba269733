"""Memoized network reachability probe."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import httpx
import structlog

from websearch.models.cache import ConnectivityState

if TYPE_CHECKING:
    from collections.abc import Callable

    from websearch.config import ConnectivitySettings

log = structlog.get_logger()


class ConnectivityProber:
    """Answers "is the network reachable", reusing one result per TTL window."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: ConnectivitySettings,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._settings = settings
        self._clock = clock
        self._state: ConnectivityState | None = None

    @property
    def state(self) -> ConnectivityState | None:
        return self._state

    async def check(self) -> bool:
        """Return cached reachability, probing the network when the memo is stale.

        Transport failures count as offline and are never raised.
        """
        now = self._clock()
        if self._state is not None and now - self._state.checked_at < self._settings.ttl_seconds:
            return self._state.is_connected

        try:
            response = await self._client.head(
                self._settings.probe_url,
                timeout=self._settings.timeout_seconds,
            )
            is_connected = response.status_code < 300
        except httpx.HTTPError as exc:
            log.info("connectivity_probe_failed", error=str(exc) or type(exc).__name__)
            is_connected = False

        self._state = ConnectivityState(is_connected=is_connected, checked_at=now)
        log.info("connectivity_checked", connected=is_connected)
        return is_connected

    def reset(self) -> None:
        self._state = None
