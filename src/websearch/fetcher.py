"""HTTP fetcher for pages and JSON APIs.

All network I/O for retrieval goes through a single Fetcher instance shared
across tool calls. The Fetcher receives an httpx.AsyncClient via constructor
injection; the lifespan owns the client lifecycle. Every httpx failure is
translated into a WebSearchError so callers branch on ``ErrorCode`` only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

import httpx
import structlog

from websearch.errors import ErrorCode, WebSearchError

if TYPE_CHECKING:
    from websearch.config import FetcherSettings

log = structlog.get_logger()


def build_http_client(settings: FetcherSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        },
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        ),
    )


def _translate(exc: httpx.HTTPError, url: str, timeout: float) -> WebSearchError:
    if isinstance(exc, httpx.TimeoutException):
        return WebSearchError(
            code=ErrorCode.TIMEOUT,
            message=f"Timed out after {timeout:g}s fetching {url}",
            suggestion="The site may be slow or unreachable. Try again later.",
            recoverable=True,
        )
    if isinstance(exc, httpx.ConnectError):
        return WebSearchError(
            code=ErrorCode.NETWORK_UNREACHABLE,
            message=f"Could not connect to {url}: {exc}",
            suggestion="Check the address and your internet connection.",
            recoverable=True,
        )
    return WebSearchError(
        code=ErrorCode.FETCH_FAILED,
        message=f"Network error fetching {url}: {exc}",
        suggestion="The site may be temporarily unavailable.",
        recoverable=True,
    )


class Fetcher:
    """Fetches documents with bounded redirects and status validation."""

    def __init__(self, client: httpx.AsyncClient, settings: FetcherSettings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self, url: str) -> str:
        """Fetch a page and return its text.

        Follows up to ``max_redirects`` redirects. Any final status below 400
        is accepted. Raises WebSearchError on network errors, too many
        redirects and status >= 400.
        """
        timeout = self._settings.timeout_seconds
        max_redirects = self._settings.max_redirects
        current_url = url

        try:
            for hop in range(max_redirects + 1):
                response = await self._client.get(current_url, timeout=timeout)

                if response.is_redirect and "location" in response.headers:
                    if hop == max_redirects:
                        raise WebSearchError(
                            code=ErrorCode.FETCH_FAILED,
                            message=f"Too many redirects fetching {url}",
                            suggestion="The site has an unusually long redirect chain.",
                            recoverable=False,
                        )
                    current_url = urljoin(current_url, response.headers["location"])
                    continue

                if response.status_code >= 400:
                    raise WebSearchError(
                        code=ErrorCode.FETCH_FAILED,
                        message=f"HTTP {response.status_code} fetching {url}",
                        suggestion="The page may not exist or the site may be unavailable.",
                        recoverable=response.status_code >= 500,
                    )

                log.info(
                    "fetch_complete",
                    url=url,
                    final_url=current_url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                return response.text

        except WebSearchError:
            raise
        except httpx.HTTPError as exc:
            raise _translate(exc, url, timeout) from exc

        # Unreachable but satisfies the type checker
        raise WebSearchError(code=ErrorCode.FETCH_FAILED, message="Redirect loop")

    async def fetch_json(self, url: str) -> Any:
        """GET a JSON API endpoint with the short API timeout."""
        timeout = self._settings.api_timeout_seconds
        try:
            response = await self._client.get(
                url,
                timeout=timeout,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            raise _translate(exc, url, timeout) from exc

        if not response.is_success:
            raise WebSearchError(
                code=ErrorCode.FETCH_FAILED,
                message=f"HTTP {response.status_code} from {url}",
                suggestion="The API may be rate limiting or temporarily unavailable.",
                recoverable=True,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise WebSearchError(
                code=ErrorCode.PARSE_ERROR,
                message=f"Invalid JSON from {url}",
                recoverable=False,
            ) from exc
