"""Request payloads validated via Marshmallow schemas."""

from __future__ import annotations

from marshmallow import fields

from ...schemas.base import IdentifierField, WatchSchema


class CreateSessionRequestSchema(WatchSchema):
    series_id = IdentifierField(required=True)
    episode_id = IdentifierField(allow_none=True, load_default=None)


class ChangeSeriesRequestSchema(CreateSessionRequestSchema):
    """Same shape as session creation; the hint applies to the new series only."""


class SelectEpisodeRequestSchema(WatchSchema):
    episode_id = IdentifierField(required=True)


class SelectServerRequestSchema(WatchSchema):
    server_id = IdentifierField(required=True)


class OverviewRequestSchema(WatchSchema):
    full_overview = fields.Boolean(required=True)


__all__ = [
    "ChangeSeriesRequestSchema",
    "CreateSessionRequestSchema",
    "OverviewRequestSchema",
    "SelectEpisodeRequestSchema",
    "SelectServerRequestSchema",
]
