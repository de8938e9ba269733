"""Operation dispatch.

Maps operation names to handlers taking a mapping of named arguments.
An unknown name is an integration error and fails the call outright.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from websearch.errors import ErrorCode, WebSearchError
from websearch.tools import check_internet, reset_cache, scrape_website

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from websearch.state import AppState


def _scrape(arguments: Mapping[str, Any], state: AppState) -> Awaitable[str]:
    url = arguments.get("url")
    if not isinstance(url, str):
        raise WebSearchError(
            code=ErrorCode.INVALID_INPUT,
            message="url is required and must be a string",
            suggestion="Call scrape_website with {'url': '<address>'}.",
        )
    return scrape_website.handle(url, state)


OPERATIONS: dict[str, Callable[[Mapping[str, Any], AppState], Awaitable[str]]] = {
    "check_internet": lambda _args, state: check_internet.handle(state),
    "scrape_website": _scrape,
    "reset_cache": lambda _args, state: reset_cache.handle(state),
}


async def dispatch(name: str, arguments: Mapping[str, Any] | None, state: AppState) -> str:
    """Run the named operation. Raises UNKNOWN_OPERATION for unregistered names."""
    operation = OPERATIONS.get(name)
    if operation is None:
        raise WebSearchError(
            code=ErrorCode.UNKNOWN_OPERATION,
            message=f"Unknown tool: {name}",
            suggestion=f"Use one of: {', '.join(sorted(OPERATIONS))}.",
        )
    return await operation(arguments or {}, state)
