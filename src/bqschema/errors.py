"""
Exception types raised while inferring a table schema from a record type.

Provides typed exceptions for the three terminal classification failures:
- NotRecordError when the top-level sample is not a record type.
- ArrayOfArraysError when a repeated field's element is not a primitive,
  well-known leaf, or record type.
- InconvertibleTypeError when a field's declared type has no schema mapping.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - All errors derive from SchemaInferenceError (a ValueError) so callers can
      catch the whole family at once.

Examples:
    >>> from bqschema.errors import InconvertibleTypeError
    >>> str(InconvertibleTypeError("dict[str, int]"))
    'inconvertible type: dict[str, int]'
"""

from __future__ import annotations

__all__ = [
    "SchemaInferenceError",
    "NotRecordError",
    "ArrayOfArraysError",
    "InconvertibleTypeError",
]


class SchemaInferenceError(ValueError):
    """Base class for schema inference failures."""


class NotRecordError(SchemaInferenceError):
    """Top-level sample is not a record (dataclass or pydantic model)."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"cannot convert non-record type: {type_name}")
        self.type_name = type_name


class ArrayOfArraysError(SchemaInferenceError):
    """Repeated field whose element type is itself a sequence (or otherwise unsupported)."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"array of arrays not allowed: {field_name}")
        self.field_name = field_name


class InconvertibleTypeError(SchemaInferenceError):
    """
    Declared field type with no schema mapping.

    Attributes:
        type_name (str): Printable name of the offending declared type.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(f"inconvertible type: {type_name}")
        self.type_name = type_name
