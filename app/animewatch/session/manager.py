from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ..catalog import Catalog
from ..config import CANONICAL_SERVERS, SocketEvent, SocketRoom
from ..exceptions import SessionNotFound
from ..log_config import verbose_log
from ..sockets import SocketManager
from .session import WatchSession
from .state_store import StateField


class SessionManager:
    """Coordinates watch sessions and websocket notifications."""

    def __init__(
        self,
        catalog: Catalog,
        socket_manager: Optional[SocketManager] = None,
        *,
        canonical_servers: Tuple[str, str] = CANONICAL_SERVERS,
    ) -> None:
        self.catalog = catalog
        self.socket_manager = socket_manager
        self.canonical_servers = canonical_servers
        self.sessions: Dict[str, WatchSession] = {}

    def create_session(self, series_id: Any, episode_hint: Any = None) -> WatchSession:
        session = WatchSession(self.catalog, canonical_servers=self.canonical_servers)
        self.sessions[session.session_id] = session
        session.add_observer(
            lambda changed: self.emit_session_update(session.session_id, changed)
        )
        session.open(series_id, episode_hint)
        verbose_log(
            "session_created",
            {
                "session_id": session.session_id,
                "series_id": series_id,
                "episode_hint": episode_hint,
            },
        )
        return session

    def get_session(self, session_id: str) -> WatchSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def list_sessions(self) -> List[WatchSession]:
        return list(self.sessions.values())

    async def delete_session(self, session_id: str) -> None:
        session = self.sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        await session.aclose()
        verbose_log("session_deleted", {"session_id": session_id})

    async def aclose(self) -> None:
        sessions = list(self.sessions.values())
        self.sessions.clear()
        for session in sessions:
            await session.aclose()

    def emit_session_update(
        self, session_id: str, changed: FrozenSet[StateField]
    ) -> None:
        if self.socket_manager is None:
            return
        room = SocketRoom.for_session(session_id)
        if not self.socket_manager.has_subscribers(room):
            return
        session = self.sessions.get(session_id)
        if session is None:
            return
        ordered = [field for field in StateField if field in changed]
        payload = session.store.snapshot(ordered)
        payload["sessionId"] = session_id
        self.socket_manager.emit(SocketEvent.STATE.value, payload, room=room)


__all__ = ["SessionManager"]
