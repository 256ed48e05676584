"""Configuration and shared constants for the Animewatch backend."""

from .environment import ServiceEnvironmentConfig, get_service_environment
from .constants import (
    API_PREFIX,
    ApiRoute,
    AudioType,
    CACHE_FOLDER,
    CANONICAL_SERVERS,
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    HEALTH_CHECK_PATH,
    SERVER_AUDIO_PRIORITY,
    SERVER_NOT_FOUND_MESSAGE,
    SocketEvent,
    SocketRoom,
    TrackKind,
    server_priority,
)

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
    "ServiceEnvironmentConfig",
    "SocketEvent",
    "SocketRoom",
    "TrackKind",
    "get_service_environment",
    "server_priority",
]
