from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..models import EpisodeList, SeriesMetadata, StreamManifest
from ..models.shared import JSONValue, JsonDict, clone_json_value


class StateField(str, Enum):
    """Every value a watch session resolves or accepts from its caller."""

    SERIES_ID = "series_id"
    REQUESTED_EPISODE_ID = "requested_episode_id"
    SERIES_METADATA = "series_metadata"
    EPISODE_LIST = "episode_list"
    METADATA_LOADING = "metadata_loading"
    EPISODE_ID = "episode_id"
    ACTIVE_EPISODE_NO = "active_episode_no"
    SERVERS = "servers"
    ACTIVE_SERVER_ID = "active_server_id"
    SERVER_LOADING = "server_loading"
    STREAM_MANIFEST = "stream_manifest"
    STREAM_URL = "stream_url"
    SUBTITLES = "subtitles"
    THUMBNAIL = "thumbnail"
    INTRO = "intro"
    OUTRO = "outro"
    BUFFERING = "buffering"
    NEXT_EPISODE_SCHEDULE = "next_episode_schedule"
    ERROR = "error"
    FULL_OVERVIEW = "full_overview"


def _initial_values() -> Dict[StateField, Any]:
    return {
        StateField.SERIES_ID: None,
        StateField.REQUESTED_EPISODE_ID: None,
        StateField.SERIES_METADATA: None,
        StateField.EPISODE_LIST: None,
        StateField.METADATA_LOADING: False,
        StateField.EPISODE_ID: None,
        StateField.ACTIVE_EPISODE_NO: None,
        StateField.SERVERS: None,
        StateField.ACTIVE_SERVER_ID: None,
        StateField.SERVER_LOADING: True,
        StateField.STREAM_MANIFEST: None,
        StateField.STREAM_URL: None,
        StateField.SUBTITLES: [],
        StateField.THUMBNAIL: None,
        StateField.INTRO: None,
        StateField.OUTRO: None,
        StateField.BUFFERING: True,
        StateField.NEXT_EPISODE_SCHEDULE: None,
        StateField.ERROR: None,
        StateField.FULL_OVERVIEW: False,
    }


def _to_json(value: Any) -> JSONValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    to_json = getattr(value, "to_json", None)
    if callable(to_json):
        return to_json()
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    if isinstance(value, dict):
        return clone_json_value(value)
    return str(value)


def _series_view(value: Optional[SeriesMetadata]) -> List[Tuple[str, JSONValue]]:
    if value is None:
        return [("seriesInfo", None), ("seasons", None)]
    return [
        ("seriesInfo", clone_json_value(value.info)),
        ("seasons", clone_json_value(value.seasons) if value.seasons is not None else None),
    ]


def _episodes_view(value: Optional[EpisodeList]) -> List[Tuple[str, JSONValue]]:
    if value is None:
        return [("episodes", None), ("totalEpisodes", None)]
    return [
        ("episodes", [episode.to_json() for episode in value.episodes]),
        ("totalEpisodes", value.total_episodes),
    ]


def _stream_view(value: Optional[StreamManifest]) -> List[Tuple[str, JSONValue]]:
    return [("streamInfo", value.to_json() if value is not None else None)]


# Read-view keys follow the names the player frontend already consumes.
_VIEW_KEYS: Dict[StateField, str] = {
    StateField.SERIES_ID: "seriesId",
    StateField.REQUESTED_EPISODE_ID: "requestedEpisodeId",
    StateField.METADATA_LOADING: "seriesInfoLoading",
    StateField.EPISODE_ID: "episodeId",
    StateField.ACTIVE_EPISODE_NO: "activeEpisodeNum",
    StateField.SERVERS: "servers",
    StateField.ACTIVE_SERVER_ID: "activeServerId",
    StateField.SERVER_LOADING: "serverLoading",
    StateField.STREAM_URL: "streamUrl",
    StateField.SUBTITLES: "subtitles",
    StateField.THUMBNAIL: "thumbnail",
    StateField.INTRO: "intro",
    StateField.OUTRO: "outro",
    StateField.BUFFERING: "buffering",
    StateField.NEXT_EPISODE_SCHEDULE: "nextEpisodeSchedule",
    StateField.ERROR: "error",
    StateField.FULL_OVERVIEW: "isFullOverview",
}

_COMPOSITE_VIEWS: Dict[StateField, Callable[[Any], List[Tuple[str, JSONValue]]]] = {
    StateField.SERIES_METADATA: _series_view,
    StateField.EPISODE_LIST: _episodes_view,
    StateField.STREAM_MANIFEST: _stream_view,
}

CommitListener = Callable[[StateField], None]


class SessionStateStore:
    """Holds the current value of every session field.

    ``commit`` is the only mutation path. A commit carrying a value equal to the
    current one is ignored, so listeners only hear about real changes.
    """

    def __init__(self) -> None:
        self._values: Dict[StateField, Any] = _initial_values()
        self._listeners: List[CommitListener] = []
        self.version = 0

    def add_listener(self, listener: CommitListener) -> None:
        self._listeners.append(listener)

    def get(self, field: StateField) -> Any:
        return self._values[field]

    def __getitem__(self, field: StateField) -> Any:
        return self._values[field]

    def commit(self, field: StateField, value: Any) -> bool:
        current = self._values[field]
        if current is value or current == value:
            return False
        self._values[field] = value
        self.version += 1
        for listener in list(self._listeners):
            listener(field)
        return True

    def commit_many(self, values: Mapping[StateField, Any]) -> List[StateField]:
        return [field for field, value in values.items() if self.commit(field, value)]

    def snapshot(self, fields: Optional[Iterable[StateField]] = None) -> JsonDict:
        """Return the JSON read view, optionally limited to ``fields``."""

        selected = list(StateField) if fields is None else list(fields)
        view: JsonDict = {}
        for field in selected:
            value = self._values[field]
            composite = _COMPOSITE_VIEWS.get(field)
            if composite is not None:
                view.update(composite(value))
            else:
                view[_VIEW_KEYS[field]] = _to_json(value)
        return view


__all__ = ["CommitListener", "SessionStateStore", "StateField"]
