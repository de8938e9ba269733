"""Tool handler for check_internet."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from websearch.state import AppState


async def handle(state: AppState) -> str:
    """Handle a check_internet tool call."""
    log = structlog.get_logger().bind(tool="check_internet")
    log.info("handler_called")
    return await state.engine.check_internet()
