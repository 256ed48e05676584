"""Stage definitions for the watch session pipeline."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, FrozenSet, Tuple

from ..log_config import verbose_log
from .state_store import SessionStateStore, StateField

if TYPE_CHECKING:  # pragma: no cover - only used for type hints
    from .scheduler import PipelineScheduler


class StageName(str, Enum):
    """Pipeline stages in the order the scheduler evaluates them."""

    RESET = "reset"
    EPISODE_RESOLVER = "episode_resolver"
    METADATA = "metadata"
    SCHEDULE = "schedule"
    SERVERS = "servers"
    STREAM = "stream"


class StageContext:
    """Commit channel handed to one stage execution.

    Commits are dropped once the series the execution started for has been
    replaced, so late results never leak into the next series.
    """

    def __init__(self, scheduler: "PipelineScheduler", stage: StageName) -> None:
        self.scheduler = scheduler
        self.stage = stage
        self.epoch = scheduler.epoch
        self._stale_logged = False

    @property
    def store(self) -> SessionStateStore:
        return self.scheduler.store

    def read(self, field: StateField) -> Any:
        return self.scheduler.store.get(field)

    def is_current(self) -> bool:
        return self.epoch == self.scheduler.epoch

    def commit(self, field: StateField, value: Any) -> bool:
        if not self.is_current():
            if not self._stale_logged:
                self._stale_logged = True
                verbose_log(
                    "stage_result_stale",
                    {
                        "stage": self.stage.value,
                        "epoch": self.epoch,
                        "current_epoch": self.scheduler.epoch,
                    },
                )
            return False
        return self.scheduler.store.commit(field, value)


class Stage:
    """A resolution step with declared input fields and a trigger predicate."""

    name: ClassVar[StageName]
    inputs: ClassVar[FrozenSet[StateField]] = frozenset()
    # Stages holding a fetch guard never overlap with themselves.
    guarded: ClassVar[bool] = False
    # Stages that must not start while these guarded stages are in flight.
    blocked_by: ClassVar[Tuple[StageName, ...]] = ()

    def should_run(self, store: SessionStateStore) -> bool:
        return True


class SyncStage(Stage):
    # Eager stages run inside the commit that changes one of their inputs,
    # before the committing caller regains control.
    eager: ClassVar[bool] = False

    def run(self, ctx: StageContext) -> None:
        raise NotImplementedError


class AsyncStage(Stage):
    async def run(self, ctx: StageContext) -> None:
        raise NotImplementedError


__all__ = ["AsyncStage", "Stage", "StageContext", "StageName", "SyncStage"]
