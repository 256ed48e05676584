from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Canonical error identifiers shared across HTTP and websocket APIs."""

    INVALID_REQUEST = "invalid_request"
    PAYLOAD_NOT_OBJECT = "payload_not_object"
    SESSION_NOT_FOUND = "session_not_found"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return str(self.value)


__all__ = ["ErrorCode"]
