"""JSON shapes passed between the catalog, the session store and the API.

Catalog payloads are kept verbatim on a few models (series info, seasons, the
raw stream manifest); the helpers below copy them so the read view handed to
HTTP and websocket clients never aliases state held by a session.
"""

from __future__ import annotations

from typing import Mapping, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JsonList: TypeAlias = list[JSONValue]
JsonDict: TypeAlias = dict[str, JSONValue]


def clone_json_value(value: JSONValue) -> JSONValue:
    """Copy nested lists and objects; scalars are returned as they are."""

    if isinstance(value, dict):
        return clone_json_dict(value)
    if isinstance(value, list):
        return [clone_json_value(item) for item in value]
    return value


def clone_json_dict(value: Mapping[str, JSONValue]) -> JsonDict:
    return {key: clone_json_value(item) for key, item in value.items()}


def get_str(mapping: Mapping[str, JSONValue], key: str) -> str | None:
    """String stored under ``key`` in a catalog object, ``None`` for other types."""

    value = mapping.get(key)
    return value if isinstance(value, str) else None
