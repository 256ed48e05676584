"""Default-selection policies applied when the caller expresses no choice."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import CANONICAL_SERVERS, SERVER_NOT_FOUND_MESSAGE, server_priority
from ..exceptions import ServerNotFound
from ..models import EpisodeList, Server


def initial_episode_id(
    requested: Optional[str], episode_list: Optional[EpisodeList]
) -> Optional[str]:
    """Requested hint first, then the first listed episode, else ``None``."""

    if requested:
        return requested
    if episode_list is None:
        return None
    return episode_list.first_episode_id()


def resolve_episode_no(
    episode_id: Optional[str], episode_list: Optional[EpisodeList]
) -> Optional[int]:
    if not episode_id or episode_list is None:
        return None
    episode = episode_list.find(episode_id)
    return episode.episode_no if episode is not None else None


def filter_canonical_servers(
    servers: Iterable[Server], canonical: Tuple[str, str] = CANONICAL_SERVERS
) -> List[Server]:
    return [server for server in servers if server.server_name in canonical]


def select_default_server(
    servers: Sequence[Server], canonical: Tuple[str, str] = CANONICAL_SERVERS
) -> Optional[Server]:
    """Walk the (audio type, server name) priority table, falling back to the first entry."""

    for audio_type, server_name in server_priority(canonical):
        for server in servers:
            if server.matches(audio_type, server_name):
                return server
    return servers[0] if servers else None


def find_server(servers: Optional[Sequence[Server]], server_id: Optional[str]) -> Server:
    for server in servers or ():
        if server.server_id == server_id:
            return server
    raise ServerNotFound(SERVER_NOT_FOUND_MESSAGE)


__all__ = [
    "filter_canonical_servers",
    "find_server",
    "initial_episode_id",
    "resolve_episode_no",
    "select_default_server",
]
