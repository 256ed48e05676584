from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Tuple, cast

_DEFAULTS: Dict[str, str] = {
    "ANIMEWATCH_NAME": "Animewatch Session Service",
    "ANIMEWATCH_HOST": "0.0.0.0",
    "ANIMEWATCH_PORT": "5000",
    "ANIMEWATCH_LOG_LEVEL": "info",
    "ANIMEWATCH_CATALOG_BASE_URL": "http://localhost:4444/api/",
    "ANIMEWATCH_CATALOG_TIMEOUT_SECONDS": "30",
    "ANIMEWATCH_CATALOG_HEADERS": "{}",
    "ANIMEWATCH_CANONICAL_SERVERS": "HD-1,HD-2",
    "ANIMEWATCH_CACHE": os.path.join(tempfile.gettempdir(), "animewatch"),
}


@dataclass(frozen=True)
class ServiceEnvironmentConfig:
    name: str
    host: str
    port: int
    log_level: str
    catalog_base_url: str
    catalog_timeout_seconds: int
    catalog_headers: Dict[str, str]
    canonical_servers: Tuple[str, str]
    cache_folder: str


def _coalesce_env(key: str) -> str:
    default = _DEFAULTS.get(key)
    value = os.getenv(key)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing environment variable '{key}'")
        return default
    trimmed = value.strip()
    if not trimmed:
        if default is not None:
            return default
        raise RuntimeError(f"Environment variable '{key}' cannot be empty")
    return trimmed


def _parse_int(key: str) -> int:
    raw = _coalesce_env(key)
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable '{key}' must be an integer") from exc


def _parse_headers(raw: str) -> Dict[str, str]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuntimeError("ANIMEWATCH_CATALOG_HEADERS must be valid JSON") from exc
    if not isinstance(parsed, dict):
        raise RuntimeError("ANIMEWATCH_CATALOG_HEADERS must be a JSON object")
    parsed_dict = cast(Dict[str, object], parsed)
    return {str(key): str(value) for key, value in parsed_dict.items()}


def _parse_canonical_servers(raw: str) -> Tuple[str, str]:
    names = [segment.strip() for segment in raw.split(",") if segment.strip()]
    if len(names) != 2 or names[0] == names[1]:
        raise RuntimeError(
            "ANIMEWATCH_CANONICAL_SERVERS must list exactly two distinct names"
        )
    return names[0], names[1]


def _ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


@lru_cache(maxsize=1)
def get_service_environment() -> ServiceEnvironmentConfig:
    cache_folder = _coalesce_env("ANIMEWATCH_CACHE")
    os.makedirs(cache_folder, exist_ok=True)
    return ServiceEnvironmentConfig(
        name=_coalesce_env("ANIMEWATCH_NAME"),
        host=_coalesce_env("ANIMEWATCH_HOST"),
        port=_parse_int("ANIMEWATCH_PORT"),
        log_level=_coalesce_env("ANIMEWATCH_LOG_LEVEL").lower(),
        catalog_base_url=_ensure_trailing_slash(
            _coalesce_env("ANIMEWATCH_CATALOG_BASE_URL")
        ),
        catalog_timeout_seconds=_parse_int("ANIMEWATCH_CATALOG_TIMEOUT_SECONDS"),
        catalog_headers=_parse_headers(_coalesce_env("ANIMEWATCH_CATALOG_HEADERS")),
        canonical_servers=_parse_canonical_servers(
            _coalesce_env("ANIMEWATCH_CANONICAL_SERVERS")
        ),
        cache_folder=cache_folder,
    )


__all__ = ["ServiceEnvironmentConfig", "get_service_environment"]
