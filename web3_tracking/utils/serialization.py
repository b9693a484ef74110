"""Shared serialization helpers for camelCase JSON output.

Provides the ``snake_to_camel`` alias generator used by the
Pydantic model configs and a ``to_json`` helper that renders
models (or mappings of models) the way the report files do.
"""

from __future__ import annotations

import json

import pydantic


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as
            ``"tracking_scripts"``.

    Returns:
        The camelCase equivalent, e.g. ``"trackingScripts"``.
    """
    parts = name.split("_")
    return parts[0] + "".join(w.capitalize() for w in parts[1:])


def to_jsonable(value: object) -> object:
    """Recursively dump Pydantic models to plain JSON-compatible data."""
    if isinstance(value, pydantic.BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def to_json(value: object, indent: int = 2) -> str:
    """Serialise *value* as pretty-printed JSON using camelCase aliases."""
    return json.dumps(to_jsonable(value), indent=indent, ensure_ascii=False)
