"""Retrieval orchestrator.

One ``RetrievalEngine`` is built at startup and owns the cache and the
connectivity memo for the process lifetime. ``scrape_website`` walks:

    normalize → cache lookup → [structured API] → fetch + extract + score
              → cache write → labelled response

Retrieval never raises: failures are rendered as ``Error scraping ...``
text, and a timeout is answered from a stale cache entry when one exists.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from websearch.api_adapter import ApiAdapter
from websearch.cache import Cache
from websearch.connectivity import ConnectivityProber
from websearch.errors import ErrorCode, WebSearchError
from websearch.extractor import ContentExtractor
from websearch.fetcher import Fetcher
from websearch.formatter import (
    DYNAMIC_SITE_CAVEAT,
    LOW_CONFIDENCE_NOTE,
    labelled,
    render_content,
)
from websearch.policy import DomainPolicy
from websearch.scorer import score_confidence
from websearch.urls import cache_key, normalize_url

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from websearch.config import Settings
    from websearch.protocols import CacheProtocol, FetcherProtocol

CACHE_CLEARED = "Cache cleared"


class RetrievalEngine:
    def __init__(
        self,
        *,
        settings: Settings,
        cache: CacheProtocol,
        prober: ConnectivityProber,
        fetcher: FetcherProtocol,
        api: ApiAdapter,
        extractor: ContentExtractor,
        policy: DomainPolicy,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self.prober = prober
        self.fetcher = fetcher
        self.api = api
        self.extractor = extractor
        self.policy = policy

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def check_internet(self) -> str:
        connected = await self.prober.check()
        return f"Internet: {'Connected' if connected else 'Offline'}"

    def reset_cache(self) -> str:
        """Clear cached content and the connectivity memo together."""
        self.cache.clear()
        self.prober.reset()
        structlog.get_logger().info("cache_reset")
        return CACHE_CLEARED

    async def scrape_website(self, url: str) -> str:
        """Retrieve ``url`` and return a labelled text response."""
        url = normalize_url(url)
        key = cache_key(url)
        log = structlog.get_logger().bind(url=url, cache_key=key)

        cached = self.cache.get(key)
        if cached is not None:
            log.info("cache_hit")
            return labelled(f"Cached content from {url}", cached.content)

        try:
            if self.api.supports(url):
                api_response = await self._try_api(url, key)
                if api_response is not None:
                    return api_response
            return await self._scrape(url, key)
        except WebSearchError as exc:
            return self._on_failure(url, key, exc.code, exc.message)
        except Exception as exc:
            log.error("scrape_unexpected_error", exc_info=True)
            return self._on_failure(url, key, None, str(exc) or type(exc).__name__)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _try_api(self, url: str, key: str) -> str | None:
        """Return an API-sourced response, or None to fall back to scraping."""
        log = structlog.get_logger().bind(url=url)
        try:
            content = await self.api.fetch_via_api(url)
        except WebSearchError as exc:
            if exc.code == ErrorCode.NO_API_AVAILABLE:
                log.debug("api_not_available")
            else:
                log.warning("api_fetch_failed", code=exc.code, error=exc.message)
            return None

        self.cache.put(key, content, self.policy.ttl_for(url))
        log.info("api_fetch_complete", content_length=len(content))
        return labelled(f"API content from {url}", content)

    async def _scrape(self, url: str, key: str) -> str:
        log = structlog.get_logger().bind(url=url)
        html = await self.fetcher.fetch(url)
        extracted = self.extractor.extract(html, url)
        confidence = score_confidence(extracted)
        content = render_content(
            extracted,
            max_structured_data_chars=self.settings.extraction.max_structured_data_chars,
        )
        percent = round(confidence * 100)
        log.info("scrape_complete", confidence=confidence, blocks=len(extracted.main_content))

        if confidence > self.settings.extraction.min_confidence or self.policy.is_basic_scrape(url):
            self.cache.put(key, content, self.policy.ttl_for(url))
            return labelled(f"Scraped content from {url} (confidence: {percent}%)", content)

        if self.policy.is_dynamic(url):
            content = f"{content}\n\n{DYNAMIC_SITE_CAVEAT}"
            self.cache.put(key, content, self.policy.dynamic_ttl_for(url))
            return labelled(f"Scraped content from {url} (dynamic site)", content)

        # Low confidence still caches and returns; only the label degrades
        self.cache.put(key, content, self.policy.ttl_for(url))
        return labelled(
            f"Scraped content from {url} (confidence: {percent}%)",
            f"{content}\n\n{LOW_CONFIDENCE_NOTE}",
        )

    def _on_failure(self, url: str, key: str, code: ErrorCode | None, message: str) -> str:
        log = structlog.get_logger().bind(url=url)
        if code == ErrorCode.TIMEOUT:
            stale = self.cache.peek(key)
            if stale is not None:
                log.warning("scrape_timeout_served_stale", error=message)
                return labelled(f"Cached content from {url} (served during timeout)", stale.content)
        log.warning("scrape_failed", code=code, error=message)
        return f"Error scraping {url}: {message}"


def build_engine(
    settings: Settings,
    client: httpx.AsyncClient,
    *,
    clock: Callable[[], float] = time.time,
) -> RetrievalEngine:
    """Wire a RetrievalEngine around a shared httpx client."""
    fetcher = Fetcher(client, settings.fetcher)
    return RetrievalEngine(
        settings=settings,
        cache=Cache(
            settings.cache.capacity,
            eviction_fraction=settings.cache.eviction_fraction,
            clock=clock,
        ),
        prober=ConnectivityProber(client, settings.connectivity, clock=clock),
        fetcher=fetcher,
        api=ApiAdapter(fetcher, settings.api),
        extractor=ContentExtractor(settings.extraction),
        policy=DomainPolicy(settings.domains, settings.cache),
    )
