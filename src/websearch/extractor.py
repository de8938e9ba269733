"""HTML content extraction.

Pulls metadata, JSON-LD blocks, headings and main body text out of a
fetched document. Main content comes from the first semantic container
in ``MAIN_CONTENT_SELECTORS`` with enough text; pages without one fall
back to density scoring over block-level elements. Known profile sites
additionally get a ``SiteProfile`` block.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

import structlog
from bs4 import BeautifulSoup, Comment

from websearch.models.content import ExtractedContent, Heading, PageMetadata, SiteProfile
from websearch.urls import host_matches, hostname

if TYPE_CHECKING:
    from collections.abc import Callable

    from bs4 import PageElement, Tag

    from websearch.config import ExtractionSettings

log = structlog.get_logger()

MAIN_CONTENT_SELECTORS: tuple[str, ...] = (
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".entry-content",
    ".article-body",
    ".content",
    "#content",
    ".markdown-body",
    "#readme",
)

_NOISE_TAGS = ["script", "style", "noscript", "template", "nav", "header", "footer"]
_ITEM_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]
_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_BLOCK_TAGS = ["article", "section", "div", "td", "p", "blockquote"]
_SENTENCE_END_RE = re.compile(r"[.!?]")


def _text(element: Tag) -> str:
    return " ".join(element.get_text(" ", strip=True).split())


def _first(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def _meta(soup: BeautifulSoup, key: str) -> str | None:
    """Return a <meta> content value looked up by ``property`` then ``name``."""
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if tag is None:
            continue
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
    return None


def _owned_by(node: PageElement, block: Tag) -> bool:
    """True if no other block-level tag sits between ``node`` and ``block``."""
    parent = node.parent
    while parent is not None and parent is not block:
        if parent.name in _BLOCK_TAGS:
            return False
        parent = parent.parent
    return parent is block


def _own_text(block: Tag) -> tuple[str, int]:
    """Return the block's own text and anchor count, ignoring nested blocks."""
    strings = [
        str(node)
        for node in block.find_all(string=True)
        if not isinstance(node, Comment) and _owned_by(node, block)
    ]
    anchors = sum(1 for anchor in block.find_all("a") if _owned_by(anchor, block))
    return " ".join(" ".join(strings).split()), anchors


def _select_text(soup: BeautifulSoup, selector: str) -> str | None:
    element = soup.select_one(selector)
    if element is None:
        return None
    return _text(element) or None


# ---------------------------------------------------------------------------
# Site profiles
# ---------------------------------------------------------------------------


def _github_profile(soup: BeautifulSoup) -> SiteProfile | None:
    username = _select_text(soup, ".p-nickname")
    if not username:
        return None

    stats: dict[str, str] = {}
    for label in ("followers", "following"):
        count = soup.select_one(f'a[href$="tab={label}"] .text-bold')
        if count is not None:
            stats[label] = _text(count)
    repositories = soup.select_one('a[href$="tab=repositories"] .Counter')
    if repositories is not None:
        stats["repositories"] = _text(repositories)

    return SiteProfile(
        username=username,
        display_name=_select_text(soup, ".p-name"),
        bio=_first(_select_text(soup, ".p-note"), _select_text(soup, "[data-bio-text]")),
        stats=stats,
        pinned_items=[_text(el) for el in soup.select(".pinned-item-list-item .repo")][:6],
    )


SITE_PROFILE_EXTRACTORS: dict[str, Callable[[BeautifulSoup], SiteProfile | None]] = {
    "github.com": _github_profile,
}


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------


class ContentExtractor:
    def __init__(self, settings: ExtractionSettings) -> None:
        self._settings = settings

    def extract(self, html: str, url: str) -> ExtractedContent:
        """Parse ``html`` fetched from ``url`` into an ExtractedContent."""
        soup = BeautifulSoup(html, "html.parser")

        # Metadata, JSON-LD and profiles first: they live in tags stripped below
        metadata = self._metadata(soup)
        structured = self._structured_data(soup, url)
        site_profile = self._site_profile(soup, url)

        for tag in soup.find_all(_NOISE_TAGS):
            tag.decompose()

        main_content = self._from_selectors(soup)
        if not main_content:
            main_content = self._from_density(soup)
            log.debug("extraction_density_fallback", url=url, blocks=len(main_content))

        return ExtractedContent(
            structured_data_blocks=structured,
            metadata=metadata,
            main_content=main_content,
            site_profile=site_profile,
            headings=self._headings(soup),
        )

    def _metadata(self, soup: BeautifulSoup) -> PageMetadata:
        title_tag = soup.find("title")
        title = _text(title_tag) if title_tag is not None else None
        return PageMetadata(
            title=_first(title, _meta(soup, "og:title"), _meta(soup, "twitter:title")),
            description=_first(
                _meta(soup, "description"),
                _meta(soup, "og:description"),
                _meta(soup, "twitter:description"),
            ),
            image=_first(_meta(soup, "og:image"), _meta(soup, "twitter:image")),
            author=_first(
                _meta(soup, "author"),
                _meta(soup, "article:author"),
                _meta(soup, "twitter:creator"),
            ),
            published_time=_meta(soup, "article:published_time"),
        )

    def _structured_data(self, soup: BeautifulSoup, url: str) -> list[str]:
        blocks: list[str] = []
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            body = (script.string or script.get_text()).strip()
            if not body:
                continue
            try:
                data = json.loads(body)
            except json.JSONDecodeError:
                log.debug("structured_data_parse_error", url=url)
                continue
            blocks.append(json.dumps(data, ensure_ascii=False))
        return blocks

    def _site_profile(self, soup: BeautifulSoup, url: str) -> SiteProfile | None:
        host = hostname(url)
        for domain, extract_profile in SITE_PROFILE_EXTRACTORS.items():
            if host_matches(host, frozenset({domain})):
                return extract_profile(soup)
        return None

    def _headings(self, soup: BeautifulSoup) -> list[Heading]:
        headings: list[Heading] = []
        for tag in soup.find_all(_HEADING_TAGS):
            text = _text(tag)
            if not text:
                continue
            headings.append(Heading(level=int(tag.name[1]), text=text))
            if len(headings) >= self._settings.max_headings:
                break
        return headings

    def _from_selectors(self, soup: BeautifulSoup) -> list[str]:
        """Collect text items from the first qualifying semantic container.

        A container that qualifies on length but has no item longer than
        ``min_item_chars`` yields an empty list, which sends the page to the
        density fallback rather than returning no content.
        """
        for selector in MAIN_CONTENT_SELECTORS:
            for element in soup.select(selector):
                if len(_text(element)) <= self._settings.min_container_chars:
                    continue
                items: list[str] = []
                seen: set[str] = set()
                for item in element.find_all(_ITEM_TAGS):
                    text = _text(item)
                    if len(text) > self._settings.min_item_chars and text not in seen:
                        seen.add(text)
                        items.append(text)
                return items
        return []

    def _from_density(self, soup: BeautifulSoup) -> list[str]:
        """Rank block-level elements by word count, link and punctuation density.

        Each block is measured on its own text only; text inside nested block
        elements belongs to those elements, so wrappers never repeat it.
        """
        cfg = self._settings
        scored: list[tuple[int, int, str]] = []

        for element in soup.find_all(_BLOCK_TAGS):
            text, anchors = _own_text(element)
            length = len(text)
            if length < cfg.density_min_chars:
                continue

            per_hundred = length / 100
            link_density = anchors / per_hundred
            punctuation_density = len(_SENTENCE_END_RE.findall(text)) / per_hundred
            word_count = len(text.split())

            score = sum((word_count > 10, link_density < 0.3, punctuation_density > 0.5))
            if score >= cfg.density_min_score:
                scored.append((score, length, text))

        # Stable sort: equal (score, length) keep document order
        scored.sort(key=lambda block: (block[0], block[1]), reverse=True)
        return [text for _, _, text in scored[: cfg.density_max_blocks]]
