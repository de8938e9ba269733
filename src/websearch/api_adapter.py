"""Structured-API adapter.

For a fixed set of domains, fetch the same information a page would show
from the site's public JSON API instead of scraping HTML. Unsupported
routes raise ``NO_API_AVAILABLE`` so the engine falls back to extraction.

Sub-requests run concurrently through ``join_branches``, which reports a
per-branch success flag. Each adapter decides which branches are essential
(failure propagates) and which degrade to an empty result.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlsplit

import structlog

from websearch.errors import ErrorCode, WebSearchError
from websearch.urls import host_matches, hostname

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from urllib.parse import SplitResult

    from websearch.config import ApiSettings
    from websearch.protocols import FetcherProtocol

log = structlog.get_logger()

GITHUB_API = "https://api.github.com"
HACKER_NEWS_API = "https://hacker-news.firebaseio.com/v0"

# First path segments on github.com that are site routes, not user profiles
_GITHUB_RESERVED = frozenset({
    "about", "apps", "codespaces", "collections", "customer-stories", "enterprise",
    "explore", "features", "issues", "join", "login", "marketplace", "new",
    "notifications", "orgs", "organizations", "pricing", "pulls", "search",
    "security", "settings", "sponsors", "topics", "trending",
})  # fmt: skip

# Hacker News listing routes (trailing slash stripped) → Firebase list name
_HN_LISTINGS = {
    "": "topstories",
    "/news": "topstories",
    "/front": "topstories",
    "/newest": "newstories",
    "/best": "beststories",
}


@dataclass(frozen=True)
class BranchResult:
    """Outcome of one branch of a concurrent join."""

    ok: bool
    value: Any = None
    error: Exception | None = None


async def join_branches(*branches: Awaitable[Any]) -> list[BranchResult]:
    """Run awaitables concurrently; never abort the join on a branch failure.

    Cancellation is not a branch failure and is re-raised.
    """
    outcomes = await asyncio.gather(*branches, return_exceptions=True)
    results: list[BranchResult] = []
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            results.append(BranchResult(ok=False, error=outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(BranchResult(ok=True, value=outcome))
    return results


def _no_api(url: str) -> WebSearchError:
    return WebSearchError(
        code=ErrorCode.NO_API_AVAILABLE,
        message=f"No API available for {url}",
        recoverable=True,
    )


def _count(value: Any) -> int:
    return value if isinstance(value, int) else 0


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_github_profile(profile: dict, repos: list, events: list) -> str:
    login = profile.get("login") or "unknown"
    lines = [f"GitHub user: {profile.get('name') or login} (@{login})"]
    for label, key in (
        ("Bio", "bio"),
        ("Company", "company"),
        ("Location", "location"),
        ("Blog", "blog"),
    ):
        if profile.get(key):
            lines.append(f"{label}: {profile[key]}")
    lines.append(
        f"Public repositories: {_count(profile.get('public_repos'))} | "
        f"Followers: {_count(profile.get('followers'))} | "
        f"Following: {_count(profile.get('following'))}"
    )
    if profile.get("html_url"):
        lines.append(f"Profile: {profile['html_url']}")

    if repos:
        lines.append("")
        lines.append("Recent repositories:")
        for index, repo in enumerate(repos, start=1):
            fork = " (fork)" if repo.get("fork") else ""
            lines.append(f"{index}. {repo.get('name', '?')}{fork}")
            if repo.get("description"):
                lines.append(f"   {repo['description']}")
            lines.append(
                f"   Language: {repo.get('language') or 'n/a'} | "
                f"Stars: {_count(repo.get('stargazers_count'))} | "
                f"Forks: {_count(repo.get('forks_count'))}"
            )

    if events:
        lines.append("")
        lines.append("Recent activity:")
        for event in events:
            kind = str(event.get("type") or "Unknown").removesuffix("Event")
            target = (event.get("repo") or {}).get("name", "?")
            lines.append(f"- {kind}: {target}")

    return "\n".join(lines)


def format_story_list(stories: list[dict]) -> str:
    lines: list[str] = []
    for index, story in enumerate(stories, start=1):
        lines.append(f"{index}. {story.get('title') or '(untitled)'}")
        lines.append(
            f"   {_count(story.get('score'))} points | "
            f"{_count(story.get('descendants'))} comments"
        )
        if story.get("url"):
            lines.append(f"   {story['url']}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class ApiAdapter:
    """Fetches content for registered domains through their public APIs."""

    def __init__(self, fetcher: FetcherProtocol, settings: ApiSettings) -> None:
        self._fetcher = fetcher
        self._settings = settings
        self._routes: dict[str, Callable[[str, SplitResult], Awaitable[str]]] = {
            "github.com": self._github,
            "news.ycombinator.com": self._hacker_news,
        }

    def supports(self, url: str) -> bool:
        """True if the URL's host is registered, regardless of path."""
        return self._route_for(url) is not None

    async def fetch_via_api(self, url: str) -> str:
        """Return formatted API content for ``url``.

        Raises WebSearchError: NO_API_AVAILABLE for unmapped hosts or paths,
        or the error of an essential sub-request.
        """
        handler = self._route_for(url)
        if handler is None:
            raise _no_api(url)
        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise _no_api(url) from exc
        return await handler(url, parts)

    def _route_for(self, url: str) -> Callable[[str, SplitResult], Awaitable[str]] | None:
        host = hostname(url)
        for domain, handler in self._routes.items():
            if host_matches(host, frozenset({domain})):
                return handler
        return None

    async def _github(self, url: str, parts: SplitResult) -> str:
        segments = [segment for segment in parts.path.split("/") if segment]
        if len(segments) != 1 or segments[0].lower() in _GITHUB_RESERVED:
            raise _no_api(url)

        base = f"{GITHUB_API}/users/{quote(segments[0])}"
        profile, repos, events = await join_branches(
            self._fetcher.fetch_json(base),
            self._fetcher.fetch_json(
                f"{base}/repos?sort=updated&per_page={self._settings.max_repositories}"
            ),
            self._fetcher.fetch_json(
                f"{base}/events/public?per_page={self._settings.max_events}"
            ),
        )
        for branch in (profile, repos):
            if not branch.ok:
                raise branch.error  # type: ignore[misc]
        if not events.ok:
            log.info("api_branch_degraded", branch="events", url=url, error=str(events.error))

        if not isinstance(profile.value, dict) or not isinstance(repos.value, list):
            raise WebSearchError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Unexpected API response shape for {url}",
            )
        event_list = events.value if events.ok and isinstance(events.value, list) else []
        return format_github_profile(
            profile.value,
            repos.value[: self._settings.max_repositories],
            event_list[: self._settings.max_events],
        )

    async def _hacker_news(self, url: str, parts: SplitResult) -> str:
        listing = _HN_LISTINGS.get(parts.path.rstrip("/"))
        if listing is None:
            raise _no_api(url)

        ids = await self._fetcher.fetch_json(f"{HACKER_NEWS_API}/{listing}.json")
        if not isinstance(ids, list):
            raise WebSearchError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Unexpected story list from {HACKER_NEWS_API}",
            )

        branches = await join_branches(
            *(
                self._fetcher.fetch_json(f"{HACKER_NEWS_API}/item/{story_id}.json")
                for story_id in ids[: self._settings.top_stories_limit]
            )
        )
        stories = [b.value for b in branches if b.ok and isinstance(b.value, dict)]
        skipped = len(branches) - len(stories)
        if skipped:
            log.info("api_branch_degraded", branch="story", url=url, skipped=skipped)
        if not stories:
            raise WebSearchError(
                code=ErrorCode.FETCH_FAILED,
                message=f"No stories could be loaded for {url}",
                recoverable=True,
            )
        return format_story_list(stories)
