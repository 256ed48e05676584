"""Schemas that turn raw catalog responses into domain models."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, cast

from marshmallow import Schema, ValidationError, fields, post_load

from ..exceptions import CatalogPayloadError
from ..models import (
    Episode,
    EpisodeList,
    SeriesMetadata,
    Server,
    StreamManifest,
    StreamTrack,
    TimeRange,
)
from ..models.shared import JsonDict, clone_json_dict
from .base import IdentifierField, WatchSchema


class SeriesMetadataSchema(WatchSchema):
    data = fields.Dict(allow_none=True, load_default=None)
    seasons = fields.List(fields.Raw(), allow_none=True, load_default=None)

    @post_load
    def make_metadata(self, data: Mapping[str, Any], **_: Any) -> SeriesMetadata:
        return SeriesMetadata(info=dict(data.get("data") or {}), seasons=data.get("seasons"))


class EpisodeSchema(WatchSchema):
    id = IdentifierField(required=True)
    episode_no = fields.Integer(data_key="episode_no", allow_none=True, load_default=None)
    title = fields.String(allow_none=True, load_default=None)

    @post_load
    def make_episode(self, data: Mapping[str, Any], **_: Any) -> Episode:
        return Episode(**data)


class EpisodeListSchema(WatchSchema):
    episodes = fields.List(
        fields.Nested(EpisodeSchema), allow_none=True, load_default=None
    )
    total_episodes = fields.Integer(allow_none=True, load_default=None)


class ServerSchema(WatchSchema):
    server_id = IdentifierField(data_key="data_id", required=True)
    server_name = fields.String(required=True)
    audio_type = fields.String(data_key="type", required=True)

    @post_load
    def make_server(self, data: Mapping[str, Any], **_: Any) -> Server:
        return Server(**data)


class TimeRangeSchema(WatchSchema):
    start = fields.Float(load_default=0.0)
    end = fields.Float(load_default=0.0)

    @post_load
    def make_range(self, data: Mapping[str, Any], **_: Any) -> TimeRange:
        return TimeRange(**data)


class StreamTrackSchema(WatchSchema):
    kind = fields.String(allow_none=True, load_default=None)
    file = fields.String(allow_none=True, load_default=None)
    label = fields.String(allow_none=True, load_default=None)

    @post_load
    def make_track(self, data: Mapping[str, Any], **_: Any) -> StreamTrack:
        return StreamTrack(**data)


class StreamLinkSchema(WatchSchema):
    file = fields.String(allow_none=True, load_default=None)


class StreamingLinkSchema(WatchSchema):
    link = fields.Nested(StreamLinkSchema, allow_none=True, load_default=None)
    intro = fields.Nested(TimeRangeSchema, allow_none=True, load_default=None)
    outro = fields.Nested(TimeRangeSchema, allow_none=True, load_default=None)
    tracks = fields.List(
        fields.Nested(StreamTrackSchema), allow_none=True, load_default=None
    )


class StreamManifestSchema(WatchSchema):
    streaming_link = fields.Nested(
        StreamingLinkSchema, allow_none=True, load_default=None
    )


def _load(schema: Schema, payload: Any, label: str) -> Any:
    try:
        return schema.load(payload)
    except ValidationError as exc:
        raise CatalogPayloadError(
            f"Invalid {label} payload: {exc.normalized_messages()}"
        ) from exc


def _require_mapping(payload: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise CatalogPayloadError(f"Invalid {label} payload: expected an object")
    return cast(Mapping[str, Any], payload)


def load_series_metadata(payload: Any) -> SeriesMetadata:
    return _load(
        SeriesMetadataSchema(), _require_mapping(payload, "series metadata"), "series metadata"
    )


def load_episode_list(payload: Any) -> Optional[EpisodeList]:
    """Parse an episode-list response; ``None`` when it carries no episode array."""

    loaded = _load(
        EpisodeListSchema(), _require_mapping(payload, "episode list"), "episode list"
    )
    episodes = loaded.get("episodes")
    if episodes is None:
        return None
    return EpisodeList(episodes=list(episodes), total_episodes=loaded.get("total_episodes"))


def load_servers(payload: Any) -> List[Server]:
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        raise CatalogPayloadError("Invalid server list payload: expected an array")
    return list(_load(ServerSchema(many=True), list(payload), "server list"))


def load_stream_manifest(payload: Any) -> StreamManifest:
    mapping = _require_mapping(payload, "stream manifest")
    loaded = _load(StreamManifestSchema(), mapping, "stream manifest")
    streaming_link = loaded.get("streaming_link") or {}
    link = streaming_link.get("link") or {}
    raw: JsonDict = clone_json_dict(cast(JsonDict, dict(mapping)))
    return StreamManifest(
        file=link.get("file"),
        intro=streaming_link.get("intro"),
        outro=streaming_link.get("outro"),
        tracks=list(streaming_link.get("tracks") or []),
        raw=raw,
    )


__all__ = [
    "EpisodeListSchema",
    "EpisodeSchema",
    "SeriesMetadataSchema",
    "ServerSchema",
    "StreamManifestSchema",
    "load_episode_list",
    "load_series_metadata",
    "load_servers",
    "load_stream_manifest",
]
