"""Animewatch backend application package."""

from .server import create_app  # noqa: F401
from .session import SessionManager, WatchSession  # noqa: F401
from .sockets import SocketManager  # noqa: F401

__all__ = [
    "create_app",
    "SessionManager",
    "SocketManager",
    "WatchSession",
]
