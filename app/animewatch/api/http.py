from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from marshmallow import Schema
from starlette import status
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..common.starlette_helpers import (
    RequestValidationError,
    json_response,
    load_with_schema,
    query_flag,
    read_json_body,
)
from ..config import ApiRoute, HEALTH_CHECK_PATH, get_service_environment
from ..exceptions import SessionNotFound
from ..models.api import (
    ChangeSeriesRequestSchema,
    CreateSessionRequestSchema,
    ErrorCode,
    OverviewRequestSchema,
    SelectEpisodeRequestSchema,
    SelectServerRequestSchema,
)
from ..session import SessionManager, StateField, WatchSession

Handler = Callable[[Request], Awaitable[Response]]


def register_http_routes(app: Starlette, manager: SessionManager) -> None:
    """Attach REST endpoints to the Starlette application."""

    async def _parse_payload(request: Request, schema_cls: type[Schema]) -> Any:
        raw_body = await read_json_body(request)
        if not isinstance(raw_body, Mapping):
            raise RequestValidationError(
                {"json": "JSON object required"},
                message=ErrorCode.PAYLOAD_NOT_OBJECT.value,
            )
        return load_with_schema(schema_cls(), raw_body)

    async def _handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return json_response(
            {"error": ErrorCode.INVALID_REQUEST.value, "details": exc.errors},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    async def _handle_session_not_found(
        _: Request, exc: SessionNotFound
    ) -> JSONResponse:
        session_id = str(exc.args[0]) if exc.args else None
        return json_response(
            {"error": ErrorCode.SESSION_NOT_FOUND.value, "sessionId": session_id},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    async def _session_state(
        request: Request, session: WatchSession, *, status_code: int = 200
    ) -> JSONResponse:
        if query_flag(request, "wait"):
            await session.wait_idle()
        return json_response(session.snapshot(), status_code=status_code)

    def session_route(
        path: str, methods: list[str]
    ) -> Callable[[Callable[[Request, WatchSession], Awaitable[Response]]], Handler]:
        """Register ``func`` with the session named by ``{session_id}`` resolved."""

        def decorator(
            func: Callable[[Request, WatchSession], Awaitable[Response]],
        ) -> Handler:
            async def endpoint(request: Request) -> Response:
                session = manager.get_session(str(request.path_params["session_id"]))
                return await func(request, session)

            app.router.add_route(path, endpoint, methods=methods)
            return endpoint

        return decorator

    async def health_check(_: Request) -> Response:
        env = get_service_environment()
        return json_response(
            {"status": "ok", "name": env.name, "sessions": len(manager.sessions)}
        )

    async def create_session(request: Request) -> Response:
        payload = await _parse_payload(request, CreateSessionRequestSchema)
        session = manager.create_session(payload["series_id"], payload["episode_id"])
        return await _session_state(
            request, session, status_code=status.HTTP_201_CREATED
        )

    async def list_sessions(_: Request) -> Response:
        return json_response(
            {
                "sessions": [
                    {
                        "sessionId": session.session_id,
                        "seriesId": session.get(StateField.SERIES_ID),
                    }
                    for session in manager.list_sessions()
                ]
            }
        )

    app.add_exception_handler(RequestValidationError, _handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(SessionNotFound, _handle_session_not_found)  # type: ignore[arg-type]
    app.router.add_route(HEALTH_CHECK_PATH, health_check, methods=["GET"])
    app.router.add_route(ApiRoute.SESSIONS.value, create_session, methods=["POST"])
    app.router.add_route(ApiRoute.SESSIONS.value, list_sessions, methods=["GET"])

    @session_route(ApiRoute.SESSION_DETAIL.value, ["GET"])
    async def get_session(request: Request, session: WatchSession) -> Response:
        return await _session_state(request, session)

    @session_route(ApiRoute.SESSION_DETAIL.value, ["DELETE"])
    async def delete_session(_: Request, session: WatchSession) -> Response:
        await manager.delete_session(session.session_id)
        return json_response({"sessionId": session.session_id, "deleted": True})

    @session_route(ApiRoute.SESSION_SERIES.value, ["PUT"])
    async def change_series(request: Request, session: WatchSession) -> Response:
        payload = await _parse_payload(request, ChangeSeriesRequestSchema)
        session.open(payload["series_id"], payload["episode_id"])
        return await _session_state(request, session)

    @session_route(ApiRoute.SESSION_EPISODE.value, ["PUT"])
    async def select_episode(request: Request, session: WatchSession) -> Response:
        payload = await _parse_payload(request, SelectEpisodeRequestSchema)
        session.select_episode(payload["episode_id"])
        return await _session_state(request, session)

    @session_route(ApiRoute.SESSION_SERVER.value, ["PUT"])
    async def select_server(request: Request, session: WatchSession) -> Response:
        payload = await _parse_payload(request, SelectServerRequestSchema)
        session.select_server(payload["server_id"])
        return await _session_state(request, session)

    @session_route(ApiRoute.SESSION_OVERVIEW.value, ["PUT"])
    async def set_overview(request: Request, session: WatchSession) -> Response:
        payload = await _parse_payload(request, OverviewRequestSchema)
        session.set_full_overview(payload["full_overview"])
        return await _session_state(request, session)


__all__ = ["register_http_routes"]
