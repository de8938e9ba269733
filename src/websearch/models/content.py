from __future__ import annotations

from pydantic import BaseModel


class PageMetadata(BaseModel):
    """Document-level metadata from <title>, Open Graph and Twitter card tags."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    author: str | None = None
    published_time: str | None = None


class Heading(BaseModel):
    level: int  # 1–6
    text: str


class SiteProfile(BaseModel):
    """Profile block scraped from a known profile-hosting site."""

    username: str | None = None
    display_name: str | None = None
    bio: str | None = None
    stats: dict[str, str] = {}  # e.g. "followers" → "1.2k"
    pinned_items: list[str] = []


class ExtractedContent(BaseModel):
    """Result of a single extraction attempt. Rendered to text before caching."""

    structured_data_blocks: list[str] = []  # JSON-LD script bodies
    metadata: PageMetadata = PageMetadata()
    main_content: list[str] = []
    site_profile: SiteProfile | None = None
    headings: list[Heading] = []
