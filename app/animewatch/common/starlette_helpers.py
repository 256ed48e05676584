"""Shared Starlette helper utilities used across the Animewatch backend."""

from __future__ import annotations

import json
from typing import Any, Mapping, MutableMapping

from marshmallow import Schema, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..models.shared import JSONValue


class RequestValidationError(RuntimeError):
    """Raised when an incoming request payload fails validation."""

    def __init__(
        self,
        errors: Mapping[str, Any] | None = None,
        *,
        message: str = "Invalid request payload",
    ) -> None:
        super().__init__(message)
        self.errors: dict[str, Any] = dict(errors or {})


async def read_json_body(request: Request) -> Any:
    """Read and return the request JSON payload, raising a friendly error on failure."""

    try:
        return await request.json()
    except json.JSONDecodeError as exc:
        raise RequestValidationError({"json": "Invalid JSON payload"}) from exc


def json_response(
    payload: JSONValue | Mapping[str, Any],
    *,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Wrap Starlette's JSONResponse to ensure consistent typing."""

    content: MutableMapping[str, Any]
    if isinstance(payload, Mapping):
        content = dict(payload)
    else:
        content = {"data": payload}
    return JSONResponse(
        content=content, status_code=status_code, headers=dict(headers or {})
    )


def load_with_schema(
    schema: Schema, payload: Any, *, partial: bool | None = None
) -> Any:
    """Validate and deserialize input data with the provided Marshmallow schema."""

    try:
        return schema.load(payload, partial=partial)
    except ValidationError as exc:
        raise RequestValidationError(exc.normalized_messages()) from exc


def query_flag(request: Request, name: str) -> bool:
    raw = request.query_params.get(name)
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "on"}


__all__ = [
    "RequestValidationError",
    "json_response",
    "load_with_schema",
    "query_flag",
    "read_json_body",
]
