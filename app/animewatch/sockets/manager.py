from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Set

from starlette.websockets import WebSocket, WebSocketState

from ..log_config import verbose_log
from ..config import SocketRoom


class SocketManager:
    """Manages websocket rooms and dispatches session events to subscribers."""

    def __init__(self) -> None:
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._room_clients: Dict[str, Set[WebSocket]] = {}
        self._pending: Set["asyncio.Task[None]"] = set()
        self._shutting_down = False

    def bind_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Bind the running asyncio loop used to schedule sends."""
        self._loop = loop

    def register_session(self, session_id: str, websocket: WebSocket) -> None:
        """Attach a websocket to a specific session room."""
        if self._shutting_down:
            return
        room = SocketRoom.for_session(session_id)
        self._room_clients.setdefault(room, set()).add(websocket)

    def unregister_session(self, session_id: str, websocket: WebSocket) -> None:
        """Detach a websocket from a specific session room."""
        room = SocketRoom.for_session(session_id)
        clients = self._room_clients.get(room)
        if not clients:
            return
        clients.discard(websocket)
        if not clients:
            self._room_clients.pop(room, None)

    def subscriber_count(self, room: str) -> int:
        """Return the number of active subscribers for the given room."""
        clients = self._room_clients.get(room)
        return len(clients) if clients else 0

    def has_subscribers(self, room: str) -> bool:
        return self.subscriber_count(room) > 0

    def emit(self, event: str, payload: Any, *, room: str) -> None:
        """Broadcast an event payload to every websocket in ``room``."""
        if self._shutting_down:
            return
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        targets = self._resolve_targets(room)
        if not targets:
            return
        message = {"event": event, "payload": payload}
        for websocket in targets:
            task = loop.create_task(self._send(websocket, dict(message)))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def aclose(self) -> None:
        """Close all tracked websockets and prevent further emissions."""
        if self._shutting_down:
            return
        self._shutting_down = True
        clients: Set[WebSocket] = set()
        for sockets in self._room_clients.values():
            clients.update(sockets)
        self._room_clients.clear()
        for websocket in clients:
            try:
                await websocket.close()
            except RuntimeError:
                continue
            except Exception as exc:  # noqa: BLE001 - best effort shutdown
                verbose_log("socket_close_failed", {"error": repr(exc)})
        self._loop = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_targets(self, room: str) -> List[WebSocket]:
        """Return a list of active websockets that should receive an event."""
        alive: List[WebSocket] = []
        for websocket in list(self._room_clients.get(room, set())):
            if self._is_open(websocket):
                alive.append(websocket)
            else:
                self._remove(websocket)
        return alive

    async def _send(self, websocket: WebSocket, message: Dict[str, Any]) -> None:
        try:
            await websocket.send_json(message)
        except Exception:  # noqa: BLE001 - log and drop the socket
            verbose_log("socket_send_failed", {"event": message.get("event")})
            self._remove(websocket)

    def _remove(self, websocket: WebSocket) -> None:
        to_prune: List[str] = []
        for room, clients in self._room_clients.items():
            clients.discard(websocket)
            if not clients:
                to_prune.append(room)
        for room in to_prune:
            self._room_clients.pop(room, None)

    @staticmethod
    def _is_open(websocket: WebSocket) -> bool:
        client_state = getattr(websocket, "client_state", None)
        if client_state is not None and client_state != WebSocketState.CONNECTED:
            return False
        application_state = getattr(websocket, "application_state", None)
        if (
            application_state is not None
            and application_state != WebSocketState.CONNECTED
        ):
            return False
        return True


__all__ = ["SocketManager"]
