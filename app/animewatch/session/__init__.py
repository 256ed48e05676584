"""Dependency-driven resolution of watch session state."""

from .manager import SessionManager
from .pipeline import (
    EpisodeResolverStage,
    MetadataStage,
    ResetStage,
    ScheduleStage,
    ServerStage,
    StreamStage,
    build_pipeline,
)
from .scheduler import PipelineScheduler
from .session import WatchSession
from .stages import AsyncStage, Stage, StageContext, StageName, SyncStage
from .state_store import SessionStateStore, StateField

__all__ = [
    "AsyncStage",
    "EpisodeResolverStage",
    "MetadataStage",
    "PipelineScheduler",
    "ResetStage",
    "ScheduleStage",
    "ServerStage",
    "SessionManager",
    "SessionStateStore",
    "Stage",
    "StageContext",
    "StageName",
    "StateField",
    "StreamStage",
    "SyncStage",
    "WatchSession",
    "build_pipeline",
]
