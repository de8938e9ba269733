"""Domain classification and TTL policy.

The domain tables are configuration data (``DomainSettings``); this module
only answers lookups against them so the engine's control flow never
hard-codes a site.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from websearch.urls import host_matches, hostname

if TYPE_CHECKING:
    from websearch.config import CacheSettings, DomainSettings


class DomainPolicy:
    def __init__(self, domains: DomainSettings, cache: CacheSettings) -> None:
        self._profile = frozenset(d.lower() for d in domains.profile_domains)
        self._aggregator = frozenset(d.lower() for d in domains.aggregator_domains)
        self._basic_scrape = frozenset(d.lower() for d in domains.basic_scrape_domains)
        self._dynamic = frozenset(d.lower() for d in domains.dynamic_domains)
        self._cache = cache

    def is_profile_site(self, url: str) -> bool:
        return host_matches(hostname(url), self._profile)

    def is_aggregator(self, url: str) -> bool:
        return host_matches(hostname(url), self._aggregator)

    def is_basic_scrape(self, url: str) -> bool:
        return host_matches(hostname(url), self._basic_scrape)

    def is_dynamic(self, url: str) -> bool:
        return host_matches(hostname(url), self._dynamic)

    def ttl_for(self, url: str) -> int:
        """Return the cache TTL in seconds for a normalized URL.

        Evaluated in order: feed/timeline paths, profile hosts, news or
        aggregator hosts, then the default.
        """
        try:
            path = urlsplit(url).path.lower()
        except ValueError:
            path = ""
        host = hostname(url)

        if "feed" in path or "timeline" in path:
            return self._cache.feed_ttl_seconds
        if host_matches(host, self._profile):
            return self._cache.profile_ttl_seconds
        if "news" in host or host_matches(host, self._aggregator):
            return self._cache.news_ttl_seconds
        return self._cache.default_ttl_seconds

    def dynamic_ttl_for(self, url: str) -> int:
        """TTL for a dynamic site, capped regardless of the normal policy."""
        return min(self.ttl_for(url), self._cache.dynamic_max_ttl_seconds)
