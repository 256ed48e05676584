from __future__ import annotations

import asyncio
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Set

from ..log_config import debug_verbose, verbose_log
from .stages import AsyncStage, Stage, StageContext, StageName, SyncStage
from .state_store import SessionStateStore, StateField

FlushObserver = Callable[[FrozenSet[StateField]], None]


class PipelineScheduler:
    """Re-evaluates stages whose declared inputs changed.

    Commits are batched: every commit made during one synchronous step of the
    event loop is collected and handled by a single flush scheduled with
    ``call_soon``. A flush first settles the synchronous stages (which may
    commit further changes folded into the same flush) and only then decides
    which asynchronous stages to launch.

    A ``SERIES_ID`` commit is handled in place: the series epoch moves on and
    eager stages (the reset) run before ``commit`` returns, so no reader ever
    sees the new series next to values resolved for the old one.
    """

    def __init__(self, store: SessionStateStore, stages: Sequence[Stage]) -> None:
        self.store = store
        self.stages: List[Stage] = list(stages)
        self.epoch = 0
        self._dirty: Set[StateField] = set()
        self._flush_handle: Optional[asyncio.Handle] = None
        self._flushing = False
        self._closed = False
        self._in_flight: Dict[StageName, bool] = {
            stage.name: False for stage in self.stages if stage.guarded
        }
        # Guarded/blocked stages whose trigger fired while they could not start.
        self._missed: Set[StageName] = set()
        self._tasks: Set["asyncio.Task[None]"] = set()
        self._observers: List[FlushObserver] = []
        self._eager: List[SyncStage] = [
            stage
            for stage in self.stages
            if isinstance(stage, SyncStage) and stage.eager
        ]
        store.add_listener(self._on_commit)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add_observer(self, observer: FlushObserver) -> None:
        self._observers.append(observer)

    def in_flight(self, stage: StageName) -> bool:
        return self._in_flight.get(stage, False)

    @property
    def pending(self) -> bool:
        return bool(self._tasks) or self._flush_handle is not None

    async def wait_idle(self) -> None:
        """Wait until no stage is running and no flush is pending."""

        while not self._closed:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
                continue
            if self._flush_handle is not None:
                await asyncio.sleep(0)
                continue
            return

    async def aclose(self) -> None:
        """Stop reacting to commits and cancel outstanding stage executions."""

        self._closed = True
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------
    def _on_commit(self, field: StateField) -> None:
        if self._closed:
            return
        if field is StateField.SERIES_ID:
            # Executions launched for the previous series lose their commit
            # rights before anything else can run.
            self.epoch += 1
        self._dirty.add(field)
        for stage in self._eager:
            if field in stage.inputs:
                self._run_sync(stage)
        if not self._flushing:
            self._schedule_flush()

    def _schedule_flush(self) -> None:
        if self._flush_handle is not None or self._closed:
            return
        loop = asyncio.get_running_loop()
        self._flush_handle = loop.call_soon(self.flush)

    def flush(self) -> None:
        self._flush_handle = None
        if self._closed:
            return
        self._flushing = True
        changed: Set[StateField] = set()
        try:
            while self._dirty:
                batch = frozenset(self._dirty)
                self._dirty.clear()
                changed |= batch
                for stage in self.stages:
                    if (
                        isinstance(stage, SyncStage)
                        and not stage.eager
                        and stage.inputs & batch
                    ):
                        self._run_sync(stage)
            for stage in self.stages:
                if not isinstance(stage, AsyncStage):
                    continue
                if stage.inputs & changed or stage.name in self._missed:
                    self._evaluate(stage)
        finally:
            self._flushing = False
        if self._dirty:
            self._schedule_flush()
        if changed:
            snapshot = frozenset(changed)
            for observer in list(self._observers):
                observer(snapshot)

    def _run_sync(self, stage: SyncStage) -> None:
        if not stage.should_run(self.store):
            return
        stage.run(StageContext(self, stage.name))

    def _blocked(self, stage: Stage) -> Optional[StageName]:
        if stage.guarded and self._in_flight[stage.name]:
            return stage.name
        for blocker in stage.blocked_by:
            if self._in_flight.get(blocker):
                return blocker
        return None

    def _evaluate(self, stage: AsyncStage) -> None:
        blocker = self._blocked(stage)
        if blocker is not None:
            self._missed.add(stage.name)
            debug_verbose(
                "stage_trigger_dropped",
                {"stage": stage.name.value, "blocked_by": blocker.value},
            )
            return
        self._missed.discard(stage.name)
        if not stage.should_run(self.store):
            return
        self._launch(stage)

    def _launch(self, stage: AsyncStage) -> None:
        ctx = StageContext(self, stage.name)
        if stage.guarded:
            self._in_flight[stage.name] = True
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._execute(stage, ctx))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _execute(self, stage: AsyncStage, ctx: StageContext) -> None:
        try:
            await stage.run(ctx)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - a crashing stage must not wedge its guard
            verbose_log(
                "stage_crashed", {"stage": stage.name.value, "error": repr(exc)}
            )
        finally:
            if stage.guarded:
                self._in_flight[stage.name] = False
                if self._missed and not self._closed:
                    self._schedule_flush()


__all__ = ["FlushObserver", "PipelineScheduler"]
