"""Application bootstrap for the Animewatch backend."""

from __future__ import annotations

from starlette.applications import Starlette

from .server import create_app
from .session import SessionManager
from .sockets import SocketManager

_app: Starlette
_manager: SessionManager
_socket_manager: SocketManager
_app, _manager, _socket_manager = create_app()
app = _app


__all__ = ["app", "create_app", "_manager", "_socket_manager"]
