from __future__ import annotations

from websearch.models.cache import CacheEntry, ConnectivityState
from websearch.models.content import ExtractedContent, Heading, PageMetadata, SiteProfile
from websearch.models.tools import ScrapeWebsiteInput

__all__ = [
    # cache
    "CacheEntry",
    "ConnectivityState",
    # content
    "ExtractedContent",
    "PageMetadata",
    "Heading",
    "SiteProfile",
    # tools
    "ScrapeWebsiteInput",
]
