"""Shared test fixtures for the websearch test suite."""

from __future__ import annotations

import pytest

from websearch.config import Settings

ARTICLE_PARAGRAPHS = [
    "Researchers announced on Tuesday that the new battery chemistry retains more than "
    "ninety percent of its capacity after two thousand charge cycles in lab conditions.",
    "The team attributes the improvement to a ceramic coating that prevents the electrode "
    "from cracking as lithium ions move in and out during each charge and discharge.",
    "Independent experts cautioned that laboratory results often fail to translate to "
    "mass production, where impurities and cost pressures change the picture considerably.",
    "Still, several manufacturers have already requested samples, and a pilot production "
    "line is expected to open next year if early reliability tests continue to go well.",
]


class FakeClock:
    """Deterministic clock for TTL tests. Call to read, ``advance`` to move."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def article_html() -> str:
    """A rich article page: metadata, JSON-LD, boilerplate and an <article>."""
    paragraphs = "\n".join(f"<p>{text}</p>" for text in ARTICLE_PARAGRAPHS)
    return f"""<!doctype html>
<html>
<head>
  <title>New battery lasts longer</title>
  <meta name="description" content="A ceramic coating keeps electrodes intact.">
  <meta property="og:title" content="OG battery title">
  <meta property="og:image" content="https://example.com/battery.png">
  <meta name="author" content="Jane Reporter">
  <meta property="article:published_time" content="2026-03-01T09:00:00Z">
  <script type="application/ld+json">{{"@type": "NewsArticle", "headline": "New battery"}}</script>
  <script>var tracking = "should never appear";</script>
  <style>.x {{ color: red; }}</style>
</head>
<body>
  <header><h1>Site Banner Heading</h1></header>
  <nav><a href="/">Home</a> <a href="/tech">Technology and science section</a></nav>
  <article>
    <h1>New battery chemistry lasts longer than expected</h1>
    {paragraphs}
    <h2>What comes next</h2>
  </article>
  <footer><p>Copyright notice and other footer boilerplate text here.</p></footer>
</body>
</html>"""


@pytest.fixture()
def thin_html() -> str:
    """A page with a title and almost nothing else."""
    return "<html><head><title>Thin page</title></head><body><div>Hi.</div></body></html>"


@pytest.fixture()
def article_paragraphs() -> list[str]:
    return list(ARTICLE_PARAGRAPHS)
