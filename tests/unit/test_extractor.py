"""Unit tests for websearch.extractor."""

from __future__ import annotations

import json

import pytest

from websearch.config import ExtractionSettings
from websearch.extractor import ContentExtractor
from websearch.scorer import score_confidence


@pytest.fixture()
def extractor() -> ContentExtractor:
    return ContentExtractor(ExtractionSettings())


# ---------------------------------------------------------------------------
# Selector cascade
# ---------------------------------------------------------------------------


class TestSelectorCascade:
    def test_article_paragraphs_become_main_content(
        self,
        extractor: ContentExtractor,
        article_html: str,
        article_paragraphs: list[str],
    ) -> None:
        content = extractor.extract(article_html, "https://example.com")
        for paragraph in article_paragraphs:
            assert paragraph in content.main_content
        assert "New battery chemistry lasts longer than expected" in content.main_content

    def test_boilerplate_stripped(self, extractor: ContentExtractor, article_html: str) -> None:
        content = extractor.extract(article_html, "https://example.com")
        joined = " ".join(content.main_content)
        assert "should never appear" not in joined
        assert "footer boilerplate" not in joined
        assert "Technology and science section" not in joined

    def test_short_items_skipped(self, extractor: ContentExtractor) -> None:
        body = "A long enough paragraph that clearly exceeds twenty characters. " * 3
        html = f"<main><p>{body}</p><p>Too short.</p><li>Short item</li></main>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [body.strip()]

    def test_small_container_skipped_for_next_selector(
        self, extractor: ContentExtractor
    ) -> None:
        long_text = "This paragraph sits in the content div and is long enough to qualify. " * 2
        html = (
            "<article><p>Tiny article teaser text.</p></article>"
            f'<div class="content"><p>{long_text}</p></div>'
        )
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [long_text.strip()]

    def test_duplicate_nested_text_reported_once(self, extractor: ContentExtractor) -> None:
        text = "A list item that wraps a paragraph with plenty of words inside it for length."
        html = f"<article><ul><li><p>{text}</p></li></ul><p>{text} Again more.</p></article>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content.count(text) == 1

    def test_container_without_long_items_uses_density_fallback(
        self, extractor: ContentExtractor
    ) -> None:
        html = f"<main><div>{STORY}</div><p>Short line.</p></main>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY]


# ---------------------------------------------------------------------------
# Density fallback
# ---------------------------------------------------------------------------

STORY = (
    "The quick brown fox jumps over the lazy dog. It was a sunny day! "
    "Everyone enjoyed the weather. Why not?"
)
NO_PUNCTUATION = (
    "words without any sentence ending marks keep going on and on for quite a while "
    "so that this block is the longest on the page by far"
)
LINKS = (
    '<a href="/1">Home page link</a> <a href="/2">About us link</a> '
    '<a href="/3">Contact link here</a> <a href="/4">Another link text</a>'
)


class TestDensityFallback:
    def test_link_heavy_block_rejected(self, extractor: ContentExtractor) -> None:
        html = f"<body><div>{LINKS}</div><div><span>{STORY}</span></div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY]

    def test_sorted_by_score_then_length(self, extractor: ContentExtractor) -> None:
        html = f"<body><div>{NO_PUNCTUATION}</div><div>{STORY}</div></body>"
        content = extractor.extract(html, "https://example.com")
        # STORY scores 3, NO_PUNCTUATION scores 2 despite being longer
        assert content.main_content == [STORY, NO_PUNCTUATION]

    def test_blocks_under_minimum_ignored(self, extractor: ContentExtractor) -> None:
        html = "<body><div>Short block. Really short!</div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == []

    def test_top_blocks_limited(self) -> None:
        extractor = ContentExtractor(ExtractionSettings(density_max_blocks=3))
        html = "<body>" + "".join(f"<p>{STORY} Block {i}.</p>" for i in range(8)) + "</body>"
        content = extractor.extract(html, "https://example.com")
        assert len(content.main_content) == 3

    def test_thresholds_configurable(self) -> None:
        extractor = ContentExtractor(ExtractionSettings(density_min_score=3))
        html = f"<body><div>{NO_PUNCTUATION}</div><div>{STORY}</div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY]

    def test_nested_wrappers_do_not_repeat_text(self, extractor: ContentExtractor) -> None:
        html = f"<body><div><div><div><p>{STORY}</p></div></div></div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY]

    def test_wrapper_keeps_only_its_own_text(self, extractor: ContentExtractor) -> None:
        html = f"<body><div>{NO_PUNCTUATION}<p>{STORY}</p></div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY, NO_PUNCTUATION]

    def test_wrappers_do_not_inflate_confidence(self, extractor: ContentExtractor) -> None:
        nested = f"<body><section><div><div><p>{STORY}</p></div></div></section></body>"
        flat = f"<body><p>{STORY}</p></body>"
        nested_score = score_confidence(extractor.extract(nested, "https://example.com"))
        flat_score = score_confidence(extractor.extract(flat, "https://example.com"))
        assert nested_score == flat_score == 0.1

    def test_links_in_nested_blocks_not_counted(self, extractor: ContentExtractor) -> None:
        html = f"<body><div><span>{STORY}</span><div>{LINKS}</div></div></body>"
        content = extractor.extract(html, "https://example.com")
        assert content.main_content == [STORY]


# ---------------------------------------------------------------------------
# Metadata, structured data and headings
# ---------------------------------------------------------------------------


class TestMetadata:
    def test_title_tag_wins_over_open_graph(
        self, extractor: ContentExtractor, article_html: str
    ) -> None:
        meta = extractor.extract(article_html, "https://example.com").metadata
        assert meta.title == "New battery lasts longer"
        assert meta.description == "A ceramic coating keeps electrodes intact."
        assert meta.image == "https://example.com/battery.png"
        assert meta.author == "Jane Reporter"
        assert meta.published_time == "2026-03-01T09:00:00Z"

    def test_falls_back_to_open_graph_then_twitter(self, extractor: ContentExtractor) -> None:
        html = """<html><head><title>  </title>
          <meta property="og:description" content="OG description">
          <meta name="twitter:title" content="Twitter title">
          <meta name="twitter:image" content="https://example.com/t.png">
        </head><body></body></html>"""
        meta = extractor.extract(html, "https://example.com").metadata
        assert meta.title == "Twitter title"
        assert meta.description == "OG description"
        assert meta.image == "https://example.com/t.png"

    def test_missing_metadata_is_none(self, extractor: ContentExtractor) -> None:
        meta = extractor.extract("<p>nothing</p>", "https://example.com").metadata
        assert meta.title is None
        assert meta.description is None


class TestStructuredData:
    def test_json_ld_collected(self, extractor: ContentExtractor, article_html: str) -> None:
        blocks = extractor.extract(article_html, "https://example.com").structured_data_blocks
        assert len(blocks) == 1
        assert json.loads(blocks[0]) == {"@type": "NewsArticle", "headline": "New battery"}

    def test_malformed_json_ld_skipped(self, extractor: ContentExtractor) -> None:
        html = """<head>
          <script type="application/ld+json">{not valid json</script>
          <script type="application/ld+json">{"@type": "Person"}</script>
        </head>"""
        blocks = extractor.extract(html, "https://example.com").structured_data_blocks
        assert blocks == ['{"@type": "Person"}']


class TestHeadings:
    def test_levels_and_text(self, extractor: ContentExtractor, article_html: str) -> None:
        headings = extractor.extract(article_html, "https://example.com").headings
        assert [(h.level, h.text) for h in headings] == [
            (1, "New battery chemistry lasts longer than expected"),
            (2, "What comes next"),
        ]

    def test_first_ten_only(self, extractor: ContentExtractor) -> None:
        html = "".join(f"<h3>Heading {i}</h3>" for i in range(15))
        headings = extractor.extract(html, "https://example.com").headings
        assert len(headings) == 10
        assert headings[-1].text == "Heading 9"


# ---------------------------------------------------------------------------
# Site profiles
# ---------------------------------------------------------------------------

GITHUB_PROFILE_HTML = """<html><body><main>
  <h1 class="vcard-names">
    <span class="p-name">The Octocat</span>
    <span class="p-nickname">octocat</span>
  </h1>
  <div class="p-note"><div>Mascot of a code hosting site.</div></div>
  <a href="https://github.com/octocat?tab=followers"><span class="text-bold">12k</span> followers</a>
  <a href="https://github.com/octocat?tab=following"><span class="text-bold">9</span> following</a>
  <a href="/octocat?tab=repositories">Repositories <span class="Counter">8</span></a>
  <ol>
    <li class="pinned-item-list-item"><span class="repo">Hello-World</span></li>
    <li class="pinned-item-list-item"><span class="repo">Spoon-Knife</span></li>
  </ol>
</main></body></html>"""


class TestSiteProfile:
    def test_github_profile_extracted(self, extractor: ContentExtractor) -> None:
        profile = extractor.extract(GITHUB_PROFILE_HTML, "https://github.com/octocat").site_profile
        assert profile is not None
        assert profile.username == "octocat"
        assert profile.display_name == "The Octocat"
        assert profile.bio == "Mascot of a code hosting site."
        assert profile.stats == {"followers": "12k", "following": "9", "repositories": "8"}
        assert profile.pinned_items == ["Hello-World", "Spoon-Knife"]

    def test_other_domains_have_no_profile(self, extractor: ContentExtractor) -> None:
        content = extractor.extract(GITHUB_PROFILE_HTML, "https://example.com/octocat")
        assert content.site_profile is None

    def test_non_profile_github_page(self, extractor: ContentExtractor) -> None:
        content = extractor.extract("<p>repo page</p>", "https://github.com/octocat/repo")
        assert content.site_profile is None
