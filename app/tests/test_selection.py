from __future__ import annotations

from typing import List

import pytest

from animewatch.config import SERVER_NOT_FOUND_MESSAGE, server_priority
from animewatch.exceptions import ServerNotFound
from animewatch.models import Episode, EpisodeList, Server
from animewatch.session.selection import (
    filter_canonical_servers,
    find_server,
    initial_episode_id,
    resolve_episode_no,
    select_default_server,
)

CANONICAL = ("HD-1", "HD-2")


def _episodes(*numbers: int) -> EpisodeList:
    return EpisodeList(
        episodes=[Episode(id=f"show-1?ep={number}", episode_no=number) for number in numbers],
        total_episodes=len(numbers),
    )


def test_initial_episode_prefers_requested_hint() -> None:
    assert initial_episode_id("6", _episodes(5, 6)) == "6"
    assert initial_episode_id("42", _episodes(5, 6)) == "42"


def test_initial_episode_falls_back_to_first_listed() -> None:
    assert initial_episode_id(None, _episodes(5, 6)) == "5"
    assert initial_episode_id("", _episodes(5, 6)) == "5"
    assert initial_episode_id(None, _episodes()) is None
    assert initial_episode_id(None, None) is None


def test_first_episode_without_token_is_absent() -> None:
    episodes = EpisodeList(episodes=[Episode(id="show-1", episode_no=1)])

    assert initial_episode_id(None, episodes) is None


def test_resolve_episode_no() -> None:
    episodes = _episodes(5, 6)

    assert resolve_episode_no("6", episodes) == 6
    assert resolve_episode_no("9", episodes) is None
    assert resolve_episode_no(None, episodes) is None
    assert resolve_episode_no("6", None) is None


def test_filter_keeps_only_canonical_servers_in_order() -> None:
    servers = [
        Server("3", "StreamSB", "sub"),
        Server("2", "HD-2", "dub"),
        Server("1", "HD-1", "sub"),
    ]

    filtered = filter_canonical_servers(servers, CANONICAL)

    assert [server.server_id for server in filtered] == ["2", "1"]


def test_priority_table_orders_audio_before_server() -> None:
    assert server_priority(CANONICAL) == (
        ("sub", "HD-1"),
        ("sub", "HD-2"),
        ("dub", "HD-1"),
        ("dub", "HD-2"),
        ("raw", "HD-1"),
        ("raw", "HD-2"),
    )


@pytest.mark.parametrize(
    ("servers", "expected"),
    [
        ([Server("2", "HD-2", "dub"), Server("1", "HD-1", "sub")], "1"),
        ([Server("2", "HD-2", "sub"), Server("1", "HD-1", "dub")], "2"),
        ([Server("2", "HD-2", "dub"), Server("1", "HD-1", "dub")], "1"),
        ([Server("2", "HD-2", "raw"), Server("1", "HD-1", "raw")], "1"),
        ([Server("2", "HD-2", "hardsub"), Server("1", "HD-1", "softsub")], "2"),
    ],
)
def test_select_default_server(servers: List[Server], expected: str) -> None:
    chosen = select_default_server(servers, CANONICAL)

    assert chosen is not None
    assert chosen.server_id == expected


def test_select_default_server_on_empty_list() -> None:
    assert select_default_server([], CANONICAL) is None


def test_find_server_raises_with_fixed_message() -> None:
    servers = [Server("1", "HD-1", "sub")]

    assert find_server(servers, "1") is servers[0]
    with pytest.raises(ServerNotFound) as excinfo:
        find_server(servers, "2")
    assert str(excinfo.value) == SERVER_NOT_FOUND_MESSAGE
    with pytest.raises(ServerNotFound):
        find_server(None, "1")
