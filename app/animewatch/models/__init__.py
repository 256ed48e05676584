"""Domain models shared by the session pipeline and the API layer."""

from .watch import (
    Episode,
    EpisodeList,
    SeriesMetadata,
    Server,
    StreamManifest,
    StreamTrack,
    SubtitleTrack,
    TimeRange,
    extract_episode_id,
)

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
