from __future__ import annotations

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Formatted content cached for one CacheKey."""

    content: str  # Rendered text, without the response label
    stored_at: float  # Epoch seconds
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at >= self.ttl_seconds


class ConnectivityState(BaseModel):
    """Memoized result of the last reachability probe."""

    is_connected: bool
    checked_at: float  # Epoch seconds
