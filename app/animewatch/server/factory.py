from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple

from starlette.applications import Starlette

from ..api.http import register_http_routes
from ..api.websockets import register_websocket_routes
from ..catalog import Catalog, HttpCatalog
from ..config import CANONICAL_SERVERS
from ..session import SessionManager
from ..sockets import SocketManager


def create_app(
    catalog: Optional[Catalog] = None,
    *,
    canonical_servers: Tuple[str, str] = CANONICAL_SERVERS,
) -> Tuple[Starlette, SessionManager, SocketManager]:
    """Instantiate the Starlette app along with its supporting managers.

    Without an explicit ``catalog`` an :class:`HttpCatalog` is built from the
    environment and closed when the application shuts down.
    """

    owned_catalog: Optional[HttpCatalog] = None
    if catalog is None:
        owned_catalog = HttpCatalog.from_environment()
        catalog = owned_catalog
    socket_manager = SocketManager()
    manager = SessionManager(
        catalog, socket_manager, canonical_servers=canonical_servers
    )

    @asynccontextmanager
    async def lifespan(_: Starlette) -> AsyncIterator[None]:
        loop = asyncio.get_running_loop()
        socket_manager.bind_loop(loop)
        try:
            yield
        finally:
            await manager.aclose()
            await socket_manager.aclose()
            if owned_catalog is not None:
                await owned_catalog.aclose()

    app = Starlette(lifespan=lifespan)
    register_http_routes(app, manager)
    register_websocket_routes(app, manager, socket_manager)
    app.state.session_manager = manager
    app.state.socket_manager = socket_manager
    return app, manager, socket_manager


__all__ = ["create_app"]
