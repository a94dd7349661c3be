"""
Canonical JSON serialization of schema trees.

Provides a single canonical JSON policy (sorted keys, compact separators,
unicode kept as-is) plus helpers to write a TableSchema in its API encoding and
read one back. This module is zero-IO: it produces and parses strings only.

Notes:
    - Key order inside each field dict is canonicalized; field order in every
      ``fields`` list is preserved, since it is part of the schema.
"""

from __future__ import annotations

import json
from typing import Any

from .schema import TableSchema

__all__ = [
    "json_dumps_canonical",
    "json_loads",
    "schema_to_json",
    "schema_from_json",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: JSON with sort_keys=True, compact separators, and ensure_ascii=False.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_loads(s: str) -> Any:
    """Deserialize a JSON string with the stdlib json module (no custom hooks)."""
    return json.loads(s)


def schema_to_json(schema: TableSchema) -> str:
    """Encode a schema as canonical JSON of ``{"fields": [...]}``."""
    return json_dumps_canonical(schema.to_api_repr())


def schema_from_json(s: str) -> TableSchema:
    """
    Parse a JSON schema payload.

    Accepts either ``{"fields": [...]}`` or a bare list of field dicts, the two
    shapes the warehouse tooling emits.

    Raises:
        json.JSONDecodeError: If s is not valid JSON.
        pydantic.ValidationError: If the payload is not a valid schema.
    """
    data = json_loads(s)
    if isinstance(data, list):
        data = {"fields": data}
    return TableSchema.from_api_repr(data)
