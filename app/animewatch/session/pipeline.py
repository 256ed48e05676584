"""Concrete stages resolving a watch session, leaves first."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

from ..catalog import Catalog
from ..config import CANONICAL_SERVERS, DEFAULT_ERROR_MESSAGE
from ..exceptions import ServerNotFound
from ..log_config import verbose_log
from ..schemas import (
    load_episode_list,
    load_series_metadata,
    load_servers,
    load_stream_manifest,
)
from ..utils import error_message
from .selection import (
    filter_canonical_servers,
    find_server,
    initial_episode_id,
    resolve_episode_no,
    select_default_server,
)
from .stages import AsyncStage, Stage, StageContext, StageName, SyncStage
from .state_store import SessionStateStore, StateField


class ResetStage(SyncStage):
    """Clears every derived field when the series changes."""

    name = StageName.RESET
    inputs = frozenset({StateField.SERIES_ID})
    eager = True

    def run(self, ctx: StageContext) -> None:
        has_series = ctx.read(StateField.SERIES_ID) is not None
        cleared: Dict[StateField, Any] = {
            StateField.EPISODE_LIST: None,
            StateField.EPISODE_ID: None,
            StateField.ACTIVE_EPISODE_NO: None,
            StateField.SERVERS: None,
            StateField.ACTIVE_SERVER_ID: None,
            StateField.STREAM_MANIFEST: None,
            StateField.STREAM_URL: None,
            StateField.SUBTITLES: [],
            StateField.THUMBNAIL: None,
            StateField.INTRO: None,
            StateField.OUTRO: None,
            StateField.BUFFERING: True,
            StateField.SERVER_LOADING: True,
            StateField.ERROR: None,
            StateField.SERIES_METADATA: None,
            StateField.NEXT_EPISODE_SCHEDULE: None,
            StateField.METADATA_LOADING: has_series,
        }
        for field, value in cleared.items():
            ctx.commit(field, value)
        verbose_log(
            "session_reset",
            {"series_id": ctx.read(StateField.SERIES_ID), "epoch": ctx.epoch},
        )


class EpisodeResolverStage(SyncStage):
    """Keeps the active episode number in step with the episode id and list."""

    name = StageName.EPISODE_RESOLVER
    inputs = frozenset({StateField.EPISODE_ID, StateField.EPISODE_LIST})

    def run(self, ctx: StageContext) -> None:
        episode_no = resolve_episode_no(
            ctx.read(StateField.EPISODE_ID), ctx.read(StateField.EPISODE_LIST)
        )
        if ctx.read(StateField.ACTIVE_EPISODE_NO) != episode_no:
            ctx.commit(StateField.ACTIVE_EPISODE_NO, episode_no)


class MetadataStage(AsyncStage):
    """Fetches series metadata and the episode list together."""

    name = StageName.METADATA
    inputs = frozenset({StateField.SERIES_ID, StateField.REQUESTED_EPISODE_ID})

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def should_run(self, store: SessionStateStore) -> bool:
        return store.get(StateField.SERIES_ID) is not None

    async def run(self, ctx: StageContext) -> None:
        series_id = ctx.read(StateField.SERIES_ID)
        requested = ctx.read(StateField.REQUESTED_EPISODE_ID)
        try:
            metadata_payload, episodes_payload = await asyncio.gather(
                self.catalog.fetch_series_metadata(series_id),
                self.catalog.fetch_episode_list(series_id),
            )
            metadata = load_series_metadata(metadata_payload)
            episode_list = load_episode_list(episodes_payload)
            ctx.commit(StateField.SERIES_METADATA, metadata)
            ctx.commit(StateField.EPISODE_LIST, episode_list)
            ctx.commit(StateField.EPISODE_ID, initial_episode_id(requested, episode_list))
        except Exception as exc:  # noqa: BLE001 - surfaced through the error field
            verbose_log(
                "metadata_fetch_failed", {"series_id": series_id, "error": repr(exc)}
            )
            ctx.commit(StateField.ERROR, error_message(exc, DEFAULT_ERROR_MESSAGE))
        finally:
            ctx.commit(StateField.METADATA_LOADING, False)


class ScheduleStage(AsyncStage):
    """Best-effort lookup of the next broadcast; failures are only logged."""

    name = StageName.SCHEDULE
    inputs = frozenset({StateField.SERIES_ID})

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def should_run(self, store: SessionStateStore) -> bool:
        return store.get(StateField.SERIES_ID) is not None

    async def run(self, ctx: StageContext) -> None:
        series_id = ctx.read(StateField.SERIES_ID)
        try:
            schedule = await self.catalog.fetch_schedule(series_id)
        except Exception as exc:  # noqa: BLE001 - schedule is optional
            verbose_log(
                "schedule_fetch_failed", {"series_id": series_id, "error": repr(exc)}
            )
            return
        ctx.commit(StateField.NEXT_EPISODE_SCHEDULE, schedule)


class ServerStage(AsyncStage):
    """Lists the servers for the active episode and picks the default one."""

    name = StageName.SERVERS
    inputs = frozenset({StateField.EPISODE_ID, StateField.EPISODE_LIST})
    guarded = True

    def __init__(
        self, catalog: Catalog, canonical: Tuple[str, str] = CANONICAL_SERVERS
    ) -> None:
        self.catalog = catalog
        self.canonical = canonical

    def should_run(self, store: SessionStateStore) -> bool:
        return bool(store.get(StateField.EPISODE_ID)) and (
            store.get(StateField.EPISODE_LIST) is not None
        )

    async def run(self, ctx: StageContext) -> None:
        series_id = ctx.read(StateField.SERIES_ID)
        episode_id = ctx.read(StateField.EPISODE_ID)
        ctx.commit(StateField.SERVER_LOADING, True)
        verbose_log(
            "server_fetch_started", {"series_id": series_id, "episode_id": episode_id}
        )
        try:
            payload = await self.catalog.fetch_servers(series_id, episode_id)
            servers = filter_canonical_servers(load_servers(payload), self.canonical)
            ctx.commit(StateField.SERVERS, servers)
            chosen = select_default_server(servers, self.canonical)
            ctx.commit(
                StateField.ACTIVE_SERVER_ID, chosen.server_id if chosen else None
            )
        except Exception as exc:  # noqa: BLE001 - surfaced through the error field
            verbose_log(
                "server_fetch_failed",
                {"series_id": series_id, "episode_id": episode_id, "error": repr(exc)},
            )
            ctx.commit(StateField.ERROR, error_message(exc, DEFAULT_ERROR_MESSAGE))
        finally:
            ctx.commit(StateField.SERVER_LOADING, False)


class StreamStage(AsyncStage):
    """Resolves the stream manifest for the selected episode and server."""

    name = StageName.STREAM
    inputs = frozenset(
        {StateField.EPISODE_ID, StateField.ACTIVE_SERVER_ID, StateField.SERVERS}
    )
    guarded = True
    blocked_by = (StageName.SERVERS,)

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def should_run(self, store: SessionStateStore) -> bool:
        return (
            bool(store.get(StateField.EPISODE_ID))
            and store.get(StateField.ACTIVE_SERVER_ID) is not None
            and store.get(StateField.SERVERS) is not None
        )

    async def run(self, ctx: StageContext) -> None:
        series_id = ctx.read(StateField.SERIES_ID)
        episode_id = ctx.read(StateField.EPISODE_ID)
        server_id = ctx.read(StateField.ACTIVE_SERVER_ID)
        ctx.commit(StateField.BUFFERING, True)
        verbose_log(
            "stream_fetch_started",
            {"series_id": series_id, "episode_id": episode_id, "server_id": server_id},
        )
        try:
            server = find_server(ctx.read(StateField.SERVERS), server_id)
            payload = await self.catalog.fetch_stream_manifest(
                series_id,
                episode_id,
                server.server_name.lower(),
                server.audio_type.lower(),
            )
            manifest = load_stream_manifest(payload)
            ctx.commit(StateField.STREAM_MANIFEST, manifest)
            ctx.commit(StateField.STREAM_URL, manifest.file or None)
            ctx.commit(StateField.INTRO, manifest.intro)
            ctx.commit(StateField.OUTRO, manifest.outro)
            ctx.commit(StateField.SUBTITLES, manifest.subtitles())
            ctx.commit(StateField.THUMBNAIL, manifest.thumbnail())
        except ServerNotFound as exc:
            verbose_log(
                "stream_server_missing", {"episode_id": episode_id, "server_id": server_id}
            )
            ctx.commit(StateField.ERROR, str(exc))
        except Exception as exc:  # noqa: BLE001 - surfaced through the error field
            verbose_log(
                "stream_fetch_failed",
                {
                    "series_id": series_id,
                    "episode_id": episode_id,
                    "server_id": server_id,
                    "error": repr(exc),
                },
            )
            ctx.commit(StateField.ERROR, error_message(exc, DEFAULT_ERROR_MESSAGE))
        finally:
            ctx.commit(StateField.BUFFERING, False)


def build_pipeline(
    catalog: Catalog, canonical: Tuple[str, str] = CANONICAL_SERVERS
) -> List[Stage]:
    """Stages in evaluation order; synchronous ones settle before any launch."""

    return [
        ResetStage(),
        EpisodeResolverStage(),
        MetadataStage(catalog),
        ScheduleStage(catalog),
        ServerStage(catalog, canonical),
        StreamStage(catalog),
    ]


__all__ = [
    "EpisodeResolverStage",
    "MetadataStage",
    "ResetStage",
    "ScheduleStage",
    "ServerStage",
    "StreamStage",
    "build_pipeline",
]
