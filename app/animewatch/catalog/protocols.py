"""Contracts for the upstream lookups a watch session depends on."""

from __future__ import annotations

from typing import Any, Protocol


class Catalog(Protocol):
    """Asynchronous upstream lookups; every call may raise."""

    async def fetch_series_metadata(self, series_id: str) -> Any:
        """Return ``{"data": {...}, "seasons": [...]}`` for the series."""
        ...

    async def fetch_episode_list(self, series_id: str) -> Any:
        """Return ``{"episodes": [{"id", "episode_no"}], "totalEpisodes": n}``."""
        ...

    async def fetch_schedule(self, series_id: str) -> Any:
        """Return the opaque next-episode schedule payload."""
        ...

    async def fetch_servers(self, series_id: str, episode_id: str) -> Any:
        """Return ``[{"serverName", "type", "data_id"}]`` for one episode."""
        ...

    async def fetch_stream_manifest(
        self,
        series_id: str,
        episode_id: str,
        server_name: str,
        audio_type: str,
    ) -> Any:
        """Return ``{"streamingLink": {"link", "intro", "outro", "tracks"}}``."""
        ...


__all__ = ["Catalog"]
