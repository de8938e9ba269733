"""Protocol interfaces for swappable components.

The engine references these protocols, not the concrete implementations.
This allows:
- Tests to use lightweight fakes (e.g. a fetcher that records calls)
- Future backends (e.g. a persistent cache) to be swapped without changing
  the engine
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from websearch.models.cache import CacheEntry


class CacheProtocol(Protocol):
    """Interface for the content cache backend."""

    def get(self, key: str) -> CacheEntry | None: ...

    def peek(self, key: str) -> CacheEntry | None: ...

    def put(self, key: str, content: str, ttl_seconds: int) -> None: ...

    def clear(self) -> None: ...

    def __len__(self) -> int: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP fetcher."""

    async def fetch(self, url: str) -> str: ...

    async def fetch_json(self, url: str) -> Any: ...
