"""Tool handler for reset_cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from websearch.state import AppState


async def handle(state: AppState) -> str:
    """Handle a reset_cache tool call."""
    structlog.get_logger().bind(tool="reset_cache").info("handler_called")
    return state.engine.reset_cache()
