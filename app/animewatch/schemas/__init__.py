"""Marshmallow schemas used by Animewatch."""

from .base import IdentifierField, WatchSchema
from .catalog import (
    load_episode_list,
    load_series_metadata,
    load_servers,
    load_stream_manifest,
)

__all__ = [
    "IdentifierField",
    "WatchSchema",
    "load_episode_list",
    "load_series_metadata",
    "load_servers",
    "load_stream_manifest",
]
