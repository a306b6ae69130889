"""Shared pydantic base model.

Every model serializes with camelCase keys and accepts keys in any
casing (``PositionID``, ``positionId`` and ``position_id`` all land on the
same field). Upstream payloads use PascalCase while cached values are
written in camelCase, so one base covers both.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _squash(name: str) -> str:
    return name.replace("_", "").lower()


class CamelModel(BaseModel):
    """Base model with case-insensitive, camelCase-normalized field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup = {}
        for name, field in cls.model_fields.items():
            lookup[_squash(name)] = name
            if field.alias:
                lookup[_squash(field.alias)] = name

        normalized = {}
        for key, value in data.items():
            if not isinstance(key, str):
                normalized[key] = value
                continue
            normalized[lookup.get(_squash(key), key)] = value
        return normalized


def one_or_many(value: Any) -> Any:
    """Wrap a single object into a list; ``None`` becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
