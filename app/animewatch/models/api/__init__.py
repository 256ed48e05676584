from .errors import ErrorCode
from .requests import (
    ChangeSeriesRequestSchema,
    CreateSessionRequestSchema,
    OverviewRequestSchema,
    SelectEpisodeRequestSchema,
    SelectServerRequestSchema,
)

__all__ = [
    "ChangeSeriesRequestSchema",
    "CreateSessionRequestSchema",
    "ErrorCode",
    "OverviewRequestSchema",
    "SelectEpisodeRequestSchema",
    "SelectServerRequestSchema",
]
