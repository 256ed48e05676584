"""Shared foundational helpers for Animewatch domain models."""

from .json_types import (
    JSONPrimitive,
    JSONValue,
    JsonDict,
    JsonList,
    clone_json_dict,
    clone_json_value,
    get_str,
)

__all__ = [
    "JSONPrimitive",
    "JSONValue",
    "JsonDict",
    "JsonList",
    "clone_json_dict",
    "clone_json_value",
    "get_str",
]
