from __future__ import annotations

import asyncio
import copy
import os
import tempfile
from collections import defaultdict
from typing import Any, Callable, Dict, List, Tuple

import pytest

os.environ.setdefault("ANIMEWATCH_CACHE", tempfile.mkdtemp(prefix="animewatch-tests-"))
os.environ.setdefault("ANIMEWATCH_VERBOSE", "0")

SERIES_ID = "frieren-18542"


def episode_payload(series_id: str, numbers: List[int]) -> Dict[str, Any]:
    return {
        "episodes": [
            {"id": f"{series_id}?ep={number}", "episode_no": number}
            for number in numbers
        ],
        "totalEpisodes": len(numbers),
    }


def server_payload(series_id: str, episode_id: str) -> List[Dict[str, Any]]:
    base = 700 if series_id == SERIES_ID else 800
    return [
        {"serverName": "HD-2", "type": "dub", "data_id": base + 2},
        {"serverName": "HD-1", "type": "sub", "data_id": base + 1},
        {"serverName": "StreamSB", "type": "sub", "data_id": base + 9},
    ]


def stream_payload(
    series_id: str, episode_id: str, server_name: str, audio_type: str
) -> Dict[str, Any]:
    return {
        "streamingLink": {
            "link": {
                "file": f"https://cdn.example/{series_id}/{episode_id}/{server_name}-{audio_type}.m3u8"
            },
            "intro": {"start": 31, "end": 110},
            "outro": {"start": 1300, "end": 1390},
            "tracks": [
                {"kind": "captions", "file": "https://cdn.example/en.vtt", "label": "English"},
                {"kind": "captions", "file": "https://cdn.example/es.vtt", "label": "Spanish"},
                {"kind": "thumbnails", "file": "https://cdn.example/thumbs.vtt"},
            ],
        }
    }


class FakeCatalog:
    """Catalog double recording calls, with per-call gates and failures.

    ``gates`` and ``failures`` are keyed either by the lookup name or by
    ``(name, last_argument)`` to target one series or episode.
    """

    def __init__(self) -> None:
        self.metadata: Any = lambda series_id: {
            "data": {"title": f"Title of {series_id}", "description": "An elf mage."},
            "seasons": [{"id": series_id, "name": "Season 1"}],
        }
        self.episodes: Any = lambda series_id: episode_payload(series_id, [5, 6])
        self.schedule: Any = {"nextEpisodeSchedule": "2026-10-24 15:00:00"}
        self.servers: Any = server_payload
        self.stream: Any = stream_payload
        self.gates: Dict[Any, asyncio.Event] = {}
        self.failures: Dict[Any, BaseException] = {}
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.active: Dict[str, int] = defaultdict(int)
        self.max_active: Dict[str, int] = defaultdict(int)

    def calls_for(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for call_name, args in self.calls if call_name == name]

    def gate(self, key: Any) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[key] = event
        return event

    def _lookup(self, mapping: Dict[Any, Any], name: str, args: Tuple[Any, ...]) -> Any:
        if args and (name, args[-1]) in mapping:
            return mapping[(name, args[-1])]
        return mapping.get(name)

    async def _respond(self, name: str, args: Tuple[Any, ...], value: Any) -> Any:
        self.calls.append((name, args))
        self.active[name] += 1
        self.max_active[name] = max(self.max_active[name], self.active[name])
        try:
            gate = self._lookup(self.gates, name, args)
            if gate is not None:
                await gate.wait()
            failure = self._lookup(self.failures, name, args)
            if failure is not None:
                raise failure
            result = value(*args) if callable(value) else value
            return copy.deepcopy(result)
        finally:
            self.active[name] -= 1

    async def fetch_series_metadata(self, series_id: str) -> Any:
        return await self._respond("fetch_series_metadata", (series_id,), self.metadata)

    async def fetch_episode_list(self, series_id: str) -> Any:
        return await self._respond("fetch_episode_list", (series_id,), self.episodes)

    async def fetch_schedule(self, series_id: str) -> Any:
        return await self._respond("fetch_schedule", (series_id,), self.schedule)

    async def fetch_servers(self, series_id: str, episode_id: str) -> Any:
        return await self._respond(
            "fetch_servers", (series_id, episode_id), self.servers
        )

    async def fetch_stream_manifest(
        self, series_id: str, episode_id: str, server_name: str, audio_type: str
    ) -> Any:
        return await self._respond(
            "fetch_stream_manifest",
            (series_id, episode_id, server_name, audio_type),
            self.stream,
        )


async def wait_until(predicate: Callable[[], bool], attempts: int = 1000) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()
