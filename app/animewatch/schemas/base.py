"""Base Marshmallow schemas and helpers for Animewatch."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields

from ..utils import clean_str


def _camel_case(name: str) -> str:
    parts = name.split("_")
    return (
        parts[0] + "".join(part.capitalize() for part in parts[1:]) if parts else name
    )


class WatchSchema(Schema):
    """Default schema with common configuration (camelCase keys, ignore unknown)."""

    class Meta:
        unknown = EXCLUDE

    def on_bind_field(self, field_name: str, field_obj: Any) -> None:  # type: ignore[override]
        super().on_bind_field(field_name, field_obj)
        if not getattr(field_obj, "data_key", None):
            field_obj.data_key = _camel_case(field_name)


class IdentifierField(fields.Field):
    """Opaque identifier accepted as a non-empty string or a number, loaded as ``str``."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        text = clean_str(value)
        if text is None:
            raise ValidationError("Not a valid identifier.")
        return text


__all__ = ["IdentifierField", "WatchSchema"]
