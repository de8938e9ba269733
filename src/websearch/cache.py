"""In-memory content cache with per-entry TTL and batch eviction.

Expiry is checked lazily on lookup; nothing sweeps expired entries. They
stay in storage until overwritten or evicted, which is what lets the
engine fall back to a stale copy when a fetch times out.

When a write finds the cache full, including an overwrite of an existing
key, the oldest ``eviction_fraction`` of entries (by ``stored_at``, rounded
up, at least one) are dropped in one batch before the entry is written.
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

import structlog

from websearch.models.cache import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


class Cache:
    """Insertion-ordered in-memory cache implementing CacheProtocol."""

    def __init__(
        self,
        capacity: int = 50,
        *,
        eviction_fraction: float = 0.1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._eviction_fraction = eviction_fraction
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def capacity(self) -> int:
        return self._capacity

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry if present and unexpired, else ``None``."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            log.debug("cache_expired", key=key)
            return None
        return entry

    def peek(self, key: str) -> CacheEntry | None:
        """Return the entry regardless of expiry."""
        return self._entries.get(key)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put(self, key: str, content: str, ttl_seconds: int) -> None:
        """Insert or overwrite an entry stamped with the current time."""
        if len(self._entries) >= self._capacity:
            self._evict()
        # Re-insert so an overwrite moves to the end of the insertion order
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(
            content=content,
            stored_at=self._clock(),
            ttl_seconds=ttl_seconds,
        )

    def clear(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        count = max(1, math.ceil(len(self._entries) * self._eviction_fraction))
        oldest = sorted(self._entries.items(), key=lambda item: item[1].stored_at)[:count]
        for key, _ in oldest:
            del self._entries[key]
        log.info("cache_evicted", evicted=count, remaining=len(self._entries))
