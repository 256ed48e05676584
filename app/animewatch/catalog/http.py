"""Catalog implementation backed by an upstream JSON API over HTTP."""

from __future__ import annotations

import ssl
from typing import Any, Dict, Mapping, Optional

import certifi
import httpx

from ..config import ServiceEnvironmentConfig, get_service_environment
from ..exceptions import CatalogPayloadError, CatalogRequestError
from ..log_config import debug_verbose, verbose_log

USER_AGENT = "animewatch/1.0"


def _unwrap_envelope(payload: Any) -> Any:
    """Strip the ``{"success": ..., "results": ...}`` envelope when present."""

    if isinstance(payload, Mapping) and "results" in payload:
        if payload.get("success") is False:
            message = payload.get("message") or payload.get("error")
            raise CatalogRequestError(str(message or "Catalog reported a failure"))
        return payload["results"]
    return payload


class HttpCatalog:
    """Thin wrapper around ``httpx.AsyncClient`` speaking the catalog API.

    Usage::

        catalog = HttpCatalog.from_environment()
        info = await catalog.fetch_series_metadata("one-piece-100")
        await catalog.aclose()
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        merged_headers: Dict[str, str] = {"User-Agent": USER_AGENT}
        merged_headers.update(headers or {})
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=merged_headers,
            timeout=timeout,
            follow_redirects=True,
            verify=ssl.create_default_context(cafile=certifi.where()),
            transport=transport,
        )

    @classmethod
    def from_environment(
        cls, config: Optional[ServiceEnvironmentConfig] = None
    ) -> "HttpCatalog":
        env = config or get_service_environment()
        return cls(
            env.catalog_base_url,
            timeout=float(env.catalog_timeout_seconds),
            headers=env.catalog_headers,
        )

    # ── Lookups ───────────────────────────────────────────────────────

    async def fetch_series_metadata(self, series_id: str) -> Any:
        return await self._get_json("info", params={"id": series_id})

    async def fetch_episode_list(self, series_id: str) -> Any:
        return await self._get_json(f"episodes/{series_id}")

    async def fetch_schedule(self, series_id: str) -> Any:
        return await self._get_json(f"schedule/{series_id}")

    async def fetch_servers(self, series_id: str, episode_id: str) -> Any:
        return await self._get_json(f"servers/{series_id}", params={"ep": episode_id})

    async def fetch_stream_manifest(
        self,
        series_id: str,
        episode_id: str,
        server_name: str,
        audio_type: str,
    ) -> Any:
        params = {
            "id": f"{series_id}?ep={episode_id}",
            "server": server_name,
            "type": audio_type,
        }
        return await self._get_json("stream", params=params)

    # ── Helpers ───────────────────────────────────────────────────────

    async def _get_json(
        self, path: str, *, params: Optional[Mapping[str, str]] = None
    ) -> Any:
        debug_verbose("catalog_request", {"path": path, "params": dict(params or {})})
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            verbose_log(
                "catalog_request_failed",
                {"path": path, "status": exc.response.status_code},
            )
            raise CatalogRequestError(
                f"Catalog request to '{path}' failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            verbose_log("catalog_request_failed", {"path": path, "error": repr(exc)})
            raise CatalogRequestError(
                f"Catalog request to '{path}' failed: {exc}"
            ) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogPayloadError(
                f"Catalog response for '{path}' is not valid JSON"
            ) from exc
        return _unwrap_envelope(payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpCatalog":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["HttpCatalog", "USER_AGENT"]
