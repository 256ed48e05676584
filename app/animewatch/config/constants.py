from __future__ import annotations

from enum import Enum
from typing import Final, Tuple

from .environment import get_service_environment

# ---------------------------------------------------------------------------
# Application bootstrap defaults
# ---------------------------------------------------------------------------
_SERVICE_ENV = get_service_environment()

DEFAULT_HOST: Final[str] = _SERVICE_ENV.host
DEFAULT_PORT: Final[int] = _SERVICE_ENV.port
DEFAULT_LOG_LEVEL: Final[str] = _SERVICE_ENV.log_level
CACHE_FOLDER: Final[str] = _SERVICE_ENV.cache_folder
CANONICAL_SERVERS: Final[Tuple[str, str]] = _SERVICE_ENV.canonical_servers

# ---------------------------------------------------------------------------
# API routing conventions
# ---------------------------------------------------------------------------
API_PREFIX: Final[str] = "/api"
HEALTH_CHECK_PATH: Final[str] = "/"


class ApiRoute(str, Enum):
    SESSIONS = f"{API_PREFIX}/sessions"
    SESSION_DETAIL = f"{API_PREFIX}/sessions/{{session_id}}"
    SESSION_SERIES = f"{API_PREFIX}/sessions/{{session_id}}/series"
    SESSION_EPISODE = f"{API_PREFIX}/sessions/{{session_id}}/episode"
    SESSION_SERVER = f"{API_PREFIX}/sessions/{{session_id}}/server"
    SESSION_OVERVIEW = f"{API_PREFIX}/sessions/{{session_id}}/overview"


# ---------------------------------------------------------------------------
# Pipeline vocabulary
# ---------------------------------------------------------------------------
class AudioType(str, Enum):
    SUB = "sub"
    DUB = "dub"
    RAW = "raw"


class TrackKind(str, Enum):
    CAPTIONS = "captions"
    THUMBNAILS = "thumbnails"


DEFAULT_ERROR_MESSAGE: Final[str] = "An error occurred."
SERVER_NOT_FOUND_MESSAGE: Final[str] = "No server found with the activeServerId."

# Audio types in the order the default-server policy walks them; within each
# audio type the first canonical server wins over the second.
SERVER_AUDIO_PRIORITY: Final[Tuple[AudioType, ...]] = (
    AudioType.SUB,
    AudioType.DUB,
    AudioType.RAW,
)


def server_priority(
    canonical: Tuple[str, str] = CANONICAL_SERVERS,
) -> Tuple[Tuple[str, str], ...]:
    """Return ``(audio_type, server_name)`` pairs in default-selection order."""

    return tuple(
        (audio.value, name) for audio in SERVER_AUDIO_PRIORITY for name in canonical
    )


# ---------------------------------------------------------------------------
# Websocket events and routing
# ---------------------------------------------------------------------------
class SocketEvent(str, Enum):
    SNAPSHOT = "snapshot"
    STATE = "state"


class SocketRoom(str, Enum):
    SESSION_PREFIX = "session:"

    @classmethod
    def for_session(cls, session_id: str) -> str:
        return f"{cls.SESSION_PREFIX.value}{session_id}"


__all__ = [
    "API_PREFIX",
    "ApiRoute",
    "AudioType",
    "CACHE_FOLDER",
    "CANONICAL_SERVERS",
    "DEFAULT_ERROR_MESSAGE",
    "DEFAULT_HOST",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PORT",
    "HEALTH_CHECK_PATH",
    "SERVER_AUDIO_PRIORITY",
    "SERVER_NOT_FOUND_MESSAGE",
    "SocketEvent",
    "SocketRoom",
    "TrackKind",
    "server_priority",
]
