from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def clean_str(value: Any) -> Optional[str]:
    """Return a stripped string for scalars, ``None`` for blanks and other types."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def error_message(exc: BaseException, default: str) -> str:
    """Human readable message for a caught exception, falling back to ``default``."""

    text = str(exc).strip()
    return text or default
