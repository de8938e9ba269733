from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_UNREACHABLE = "NETWORK_UNREACHABLE"
    TIMEOUT = "TIMEOUT"
    NO_API_AVAILABLE = "NO_API_AVAILABLE"
    PARSE_ERROR = "PARSE_ERROR"
    FETCH_FAILED = "FETCH_FAILED"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"


class WebSearchError(Exception):
    """Raised for all expected failure conditions.

    Retrieval failures are caught by the engine and rendered as text.
    Only INVALID_INPUT and UNKNOWN_OPERATION reach server.py, which
    serialises them into the MCP error response.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
