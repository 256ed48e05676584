"""File logging for watch sessions.

Stages, the scheduler and the catalog client report through two channels:
``verbose_log`` for session lifecycle and stage failures, ``debug_verbose``
for trigger bookkeeping and outbound catalog requests. Lines are appended to
``<ANIMEWATCH_CACHE>/logs.txt`` as ``[CHANNEL][timestamp] label: payload``.
"""

from __future__ import annotations

import os
import sys
from typing import Any

from .config import CACHE_FOLDER
from .utils import now_iso

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


DEBUG = _env_flag("ANIMEWATCH_DEBUG", False)
VERBOSE = _env_flag("ANIMEWATCH_VERBOSE", True)

LOG_FILE = os.path.join(CACHE_FOLDER, "logs.txt")


def _write_line(channel: str, label: str, payload: Any) -> None:
    line = f"[{channel}][{now_iso()}] {label}: {payload}"
    # Payloads carry upstream titles; keep them writable on narrow consoles.
    encoding = getattr(sys.stdout, "encoding", None) or "utf-8"
    line = line.encode(encoding, errors="replace").decode(encoding)
    os.makedirs(os.path.dirname(LOG_FILE), exist_ok=True)
    with open(LOG_FILE, "a", encoding=encoding) as handle:
        handle.write(line + "\n")


def verbose_log(label: str, payload: Any) -> None:
    """Record a session event (reset, fetch start/failure, stale result)."""
    if VERBOSE:
        _write_line("VERBOSE", label, payload)


def debug_verbose(label: str, payload: Any) -> None:
    """Record scheduler and request detail; also written in verbose mode."""
    if DEBUG or VERBOSE:
        _write_line("DEBUG", label, payload)


__all__ = ["DEBUG", "VERBOSE", "LOG_FILE", "verbose_log", "debug_verbose"]
