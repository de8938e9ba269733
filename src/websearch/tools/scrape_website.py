"""Tool handler for scrape_website.

Validates the input and delegates to the engine, which never raises for
retrieval failures. No MCP or FastMCP imports; server.py handles the
MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from websearch.errors import ErrorCode, WebSearchError
from websearch.models.tools import ScrapeWebsiteInput

if TYPE_CHECKING:
    from websearch.state import AppState


async def handle(url: str, state: AppState) -> str:
    """Handle a scrape_website tool call."""
    log = structlog.get_logger().bind(tool="scrape_website", url=url)
    log.info("handler_called")

    try:
        validated = ScrapeWebsiteInput(url=url)
    except ValidationError as exc:
        raise WebSearchError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a non-empty website address (max 2048 chars).",
            recoverable=False,
        ) from exc

    result = await state.engine.scrape_website(validated.url)
    log.info("scrape_returned", length=len(result))
    return result
