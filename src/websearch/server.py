"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Run the stdio transport
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

from websearch import __version__
from websearch.config import Settings
from websearch.engine import build_engine
from websearch.errors import WebSearchError
from websearch.fetcher import build_http_client
from websearch.state import AppState
from websearch.tools import dispatch

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Mapping
    from typing import Any

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__, name=settings.server.name)

    http_client = build_http_client(settings.fetcher)
    state = AppState(
        settings=settings,
        engine=build_engine(settings, http_client),
        http_client=http_client,
    )

    log.info(
        "server_started",
        version=__version__,
        cache_capacity=settings.cache.capacity,
    )

    try:
        yield state
    finally:
        await http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("web-search", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: WebSearchError) -> CallToolResult:
    """Convert a WebSearchError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _call(name: str, arguments: Mapping[str, Any], ctx: Context) -> object:
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await dispatch(name, arguments, state)
    except WebSearchError as exc:
        log.warning(
            "tool_error",
            tool=name,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=name, exc_info=True)
        raise


@mcp.tool()
async def check_internet(ctx: Context) -> object:
    """Check if internet is available."""
    return await _call("check_internet", {}, ctx)


@mcp.tool()
async def scrape_website(url: str, ctx: Context) -> object:
    """Scrape content from a website and cache it.

    Known sites with public APIs are answered from the API; other pages are
    fetched and reduced to their main text. Responses are labelled with their
    source (cache, API, or scrape with a confidence estimate).
    """
    return await _call("scrape_website", {"url": url}, ctx)


@mcp.tool()
async def reset_cache(ctx: Context) -> object:
    """Clear all cached website data."""
    return await _call("reset_cache", {}, ctx)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
