from __future__ import annotations

import uuid
from typing import Any, Optional, Tuple

from ..catalog import Catalog
from ..config import CANONICAL_SERVERS
from ..models.shared import JsonDict
from ..utils import clean_str
from .pipeline import build_pipeline
from .scheduler import FlushObserver, PipelineScheduler
from .state_store import SessionStateStore, StateField


class WatchSession:
    """Viewer state for one series, resolved by the stage pipeline.

    Mutating methods commit into the store and must be called from the event
    loop that runs the pipeline; the resulting cascade starts on the next loop
    iteration. ``wait_idle`` awaits the whole cascade.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        session_id: Optional[str] = None,
        canonical_servers: Tuple[str, str] = CANONICAL_SERVERS,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.store = SessionStateStore()
        self.scheduler = PipelineScheduler(
            self.store, build_pipeline(catalog, canonical_servers)
        )

    # ------------------------------------------------------------------
    # Caller inputs
    # ------------------------------------------------------------------
    def open(self, series_id: Any, episode_hint: Any = None) -> None:
        """Point the session at a series, optionally starting from an episode."""

        self.store.commit(StateField.REQUESTED_EPISODE_ID, clean_str(episode_hint))
        self.store.commit(StateField.SERIES_ID, clean_str(series_id))

    def select_episode(self, episode_id: Any) -> None:
        self.store.commit(StateField.EPISODE_ID, clean_str(episode_id))

    def select_server(self, server_id: Any) -> None:
        self.store.commit(StateField.ACTIVE_SERVER_ID, clean_str(server_id))

    def set_full_overview(self, enabled: bool) -> None:
        self.store.commit(StateField.FULL_OVERVIEW, bool(enabled))

    # ------------------------------------------------------------------
    # Read view
    # ------------------------------------------------------------------
    def get(self, field: StateField) -> Any:
        return self.store.get(field)

    def snapshot(self) -> JsonDict:
        payload = self.store.snapshot()
        payload["sessionId"] = self.session_id
        return payload

    def add_observer(self, observer: FlushObserver) -> None:
        self.scheduler.add_observer(observer)

    async def wait_idle(self) -> None:
        await self.scheduler.wait_idle()

    async def aclose(self) -> None:
        await self.scheduler.aclose()


__all__ = ["WatchSession"]
