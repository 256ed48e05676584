from __future__ import annotations

from starlette.applications import Starlette
from starlette.websockets import WebSocket, WebSocketDisconnect

from ..config import SocketEvent
from ..exceptions import SessionNotFound
from ..log_config import verbose_log
from ..models.api import ErrorCode
from ..session import SessionManager
from ..sockets import SocketManager

SESSION_SOCKET_PATH = "/ws/sessions/{session_id}"
# Application-defined close code mirroring HTTP 404.
SESSION_NOT_FOUND_CLOSE_CODE = 4404


def register_websocket_routes(
    app: Starlette,
    manager: SessionManager,
    socket_manager: SocketManager,
) -> None:
    """Attach the websocket endpoint streaming session state to the player."""

    async def session_socket(websocket: WebSocket) -> None:
        session_id = str(websocket.path_params["session_id"])
        try:
            session = manager.get_session(session_id)
        except SessionNotFound:
            await websocket.close(
                code=SESSION_NOT_FOUND_CLOSE_CODE,
                reason=ErrorCode.SESSION_NOT_FOUND.value,
            )
            return
        await websocket.accept()
        socket_manager.register_session(session_id, websocket)
        try:
            await websocket.send_json(
                {"event": SocketEvent.SNAPSHOT.value, "payload": session.snapshot()}
            )
            while True:
                # Inbound messages carry no commands; reading detects disconnects.
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            socket_manager.unregister_session(session_id, websocket)
            verbose_log("session_socket_closed", {"session_id": session_id})

    app.router.add_websocket_route(SESSION_SOCKET_PATH, session_socket)


__all__ = ["SESSION_SOCKET_PATH", "register_websocket_routes"]
