from .starlette_helpers import (
    RequestValidationError,
    json_response,
    load_with_schema,
    query_flag,
    read_json_body,
)

__all__ = [
    "RequestValidationError",
    "json_response",
    "load_with_schema",
    "query_flag",
    "read_json_body",
]
