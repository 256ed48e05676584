"""Dataclasses describing the catalog entities a watch session resolves."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..config import TrackKind
from .shared import JSONValue, JsonDict, JsonList, clone_json_dict, get_str

_EPISODE_TOKEN_RE = re.compile(r"ep=(\d+)")


def extract_episode_id(identifier: Optional[str]) -> Optional[str]:
    """Return the numeric ``ep=<n>`` token embedded in an episode identifier.

    ``None`` is returned when the identifier is missing or carries no token.
    """

    if not identifier:
        return None
    match = _EPISODE_TOKEN_RE.search(identifier)
    if match is None:
        return None
    return match.group(1)


def _empty_episode_list() -> List["Episode"]:
    return []


def _empty_track_list() -> List["StreamTrack"]:
    return []


@dataclass(frozen=True, slots=True)
class SeriesMetadata:
    """Descriptive series information plus its season list."""

    info: JsonDict
    seasons: Optional[JsonList] = None

    @property
    def title(self) -> Optional[str]:
        return get_str(self.info, "title") or get_str(self.info, "name")

    @property
    def description(self) -> Optional[str]:
        return get_str(self.info, "description")


@dataclass(frozen=True, slots=True)
class Episode:
    id: str
    episode_no: Optional[int] = None
    title: Optional[str] = None

    @property
    def episode_id(self) -> Optional[str]:
        return extract_episode_id(self.id)

    def to_json(self) -> JsonDict:
        payload: JsonDict = {"id": self.id, "episode_no": self.episode_no}
        if self.title:
            payload["title"] = self.title
        return payload


@dataclass(frozen=True, slots=True)
class EpisodeList:
    episodes: List[Episode] = field(default_factory=_empty_episode_list)
    total_episodes: Optional[int] = None

    def first_episode_id(self) -> Optional[str]:
        if not self.episodes:
            return None
        return self.episodes[0].episode_id

    def find(self, episode_id: Optional[str]) -> Optional[Episode]:
        if not episode_id:
            return None
        for episode in self.episodes:
            if episode.episode_id == episode_id:
                return episode
        return None


@dataclass(frozen=True, slots=True)
class Server:
    server_id: str
    server_name: str
    audio_type: str

    def matches(self, audio_type: str, server_name: str) -> bool:
        return self.audio_type == audio_type and self.server_name == server_name

    def to_json(self) -> JsonDict:
        return {
            "data_id": self.server_id,
            "serverName": self.server_name,
            "type": self.audio_type,
        }


@dataclass(frozen=True, slots=True)
class TimeRange:
    start: float
    end: float

    def to_json(self) -> JsonDict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True, slots=True)
class StreamTrack:
    kind: Optional[str] = None
    file: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SubtitleTrack:
    file: Optional[str]
    label: Optional[str]

    def to_json(self) -> JsonDict:
        return {"file": self.file, "label": self.label}


@dataclass(frozen=True, slots=True)
class StreamManifest:
    """Playable stream description for one (episode, server) pair."""

    file: Optional[str] = None
    intro: Optional[TimeRange] = None
    outro: Optional[TimeRange] = None
    tracks: List[StreamTrack] = field(default_factory=_empty_track_list)
    raw: JsonDict = field(default_factory=dict)

    def subtitles(self) -> List[SubtitleTrack]:
        return [
            SubtitleTrack(file=track.file, label=track.label)
            for track in self.tracks
            if track.kind == TrackKind.CAPTIONS.value
        ]

    def thumbnail(self) -> Optional[str]:
        for track in self.tracks:
            if track.kind == TrackKind.THUMBNAILS.value and track.file:
                return track.file
        return None

    def to_json(self) -> JSONValue:
        return clone_json_dict(self.raw)


__all__ = [
    "Episode",
    "EpisodeList",
    "SeriesMetadata",
    "Server",
    "StreamManifest",
    "StreamTrack",
    "SubtitleTrack",
    "TimeRange",
    "extract_episode_id",
]
