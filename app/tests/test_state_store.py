from __future__ import annotations

import asyncio
from typing import FrozenSet, List

from animewatch.session import (
    PipelineScheduler,
    SessionStateStore,
    StageContext,
    StageName,
    StateField,
    SyncStage,
)
from animewatch.session.pipeline import EpisodeResolverStage
from animewatch.models import Episode, EpisodeList


def test_commit_ignores_equal_values() -> None:
    store = SessionStateStore()
    heard: List[StateField] = []
    store.add_listener(heard.append)

    assert store.commit(StateField.EPISODE_ID, "5") is True
    assert store.commit(StateField.EPISODE_ID, "5") is False
    assert store.commit(StateField.SUBTITLES, []) is False
    assert store.commit(StateField.BUFFERING, False) is True

    assert heard == [StateField.EPISODE_ID, StateField.BUFFERING]
    assert store.version == 2
    assert store[StateField.EPISODE_ID] == "5"


def test_initial_values() -> None:
    store = SessionStateStore()

    assert store.get(StateField.BUFFERING) is True
    assert store.get(StateField.SERVER_LOADING) is True
    assert store.get(StateField.METADATA_LOADING) is False
    assert store.get(StateField.SUBTITLES) == []
    assert store.get(StateField.FULL_OVERVIEW) is False
    assert store.get(StateField.SERIES_ID) is None


def test_snapshot_limited_to_fields() -> None:
    store = SessionStateStore()
    store.commit_many(
        {
            StateField.EPISODE_ID: "5",
            StateField.EPISODE_LIST: EpisodeList(
                episodes=[Episode(id="show?ep=5", episode_no=5)], total_episodes=1
            ),
        }
    )

    view = store.snapshot([StateField.EPISODE_ID, StateField.EPISODE_LIST])

    assert view == {
        "episodeId": "5",
        "episodes": [{"id": "show?ep=5", "episode_no": 5}],
        "totalEpisodes": 1,
    }


class _Echo(SyncStage):
    name = StageName.RESET
    inputs = frozenset({StateField.SERIES_ID})

    def run(self, ctx: StageContext) -> None:
        ctx.commit(StateField.REQUESTED_EPISODE_ID, "1")
        ctx.commit(
            StateField.EPISODE_LIST,
            EpisodeList(episodes=[Episode(id="show?ep=1", episode_no=1)]),
        )
        ctx.commit(StateField.EPISODE_ID, "1")


def test_flush_folds_synchronous_commits_into_one_notification() -> None:
    async def scenario() -> List[FrozenSet[StateField]]:
        store = SessionStateStore()
        scheduler = PipelineScheduler(store, [_Echo(), EpisodeResolverStage()])
        flushes: List[FrozenSet[StateField]] = []
        scheduler.add_observer(flushes.append)

        store.commit(StateField.SERIES_ID, "show")
        assert scheduler.pending
        await scheduler.wait_idle()

        assert scheduler.epoch == 1
        assert store.get(StateField.ACTIVE_EPISODE_NO) == 1
        return flushes

    flushes = asyncio.run(scenario())

    assert flushes == [
        frozenset(
            {
                StateField.SERIES_ID,
                StateField.REQUESTED_EPISODE_ID,
                StateField.EPISODE_LIST,
                StateField.EPISODE_ID,
                StateField.ACTIVE_EPISODE_NO,
            }
        )
    ]


def test_stale_context_drops_commits() -> None:
    async def scenario() -> None:
        store = SessionStateStore()
        scheduler = PipelineScheduler(store, [])
        ctx = StageContext(scheduler, StageName.METADATA)

        store.commit(StateField.SERIES_ID, "show")
        await scheduler.wait_idle()

        assert not ctx.is_current()
        assert ctx.commit(StateField.EPISODE_ID, "3") is False
        assert store.get(StateField.EPISODE_ID) is None

    asyncio.run(scenario())
