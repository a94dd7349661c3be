"""
Schema grammar: field types, field modes, and the per-field tag syntax.

Defines the lower-case type and mode vocabularies of the warehouse
table-definition format, plus the zero-IO parser for serialization tags
(``"name,omitempty"``, ``"-"``) attached to record fields.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (wire/API payloads): lower-case
2) Tags are parsed once per field into a FieldTag; inference never re-splits
   raw tag strings.

Tag grammar
-----------
| Tag value            | Name            | Mode      | Emitted |
|----------------------|-----------------|-----------|---------|
| (absent or "")       | declared name   | required  | yes     |
| "-"                  |                 |           | no      |
| "age"                | age             | required  | yes     |
| "age,omitempty"      | age             | nullable  | yes     |
| ",omitempty"         | declared name   | nullable  | yes     |

Examples
--------
>>> from bqschema.grammar import parse_tag, FieldMode
>>> tag = parse_tag("age,omitempty")
>>> tag.name, tag.mode is FieldMode.NULLABLE
('age', True)
>>> parse_tag("-").suppressed
True
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .constants import OMITEMPTY_MARKER, SUPPRESS_MARKER, TAG_SEPARATOR

__all__ = [
    "FieldType",
    "FieldMode",
    "FieldTag",
    "LEAF_TYPES",
    "parse_tag",
    "is_lower_snake",
    "assert_lower_snake",
    "field_type_from_value",
    "field_mode_from_value",
    "ensure_all_enum_values_lower_snake",
]


class FieldType(Enum):
    """
    Schema-level type tag assigned to a field.

    Serialized values appear in:
      - FieldSchema.type and the ``type`` key of API payloads
      - well-known type registry entries (string, timestamp)
    """

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    TIMESTAMP = "timestamp"
    RECORD = "record"


class FieldMode(Enum):
    """Schema-level cardinality/nullability of a field."""

    REQUIRED = "required"
    NULLABLE = "nullable"
    REPEATED = "repeated"


# Types a well-known (opaque) record may collapse to.
LEAF_TYPES: Final[frozenset[FieldType]] = frozenset({FieldType.STRING, FieldType.TIMESTAMP})


@dataclass(slots=True, frozen=True)
class FieldTag:
    """
    Parsed serialization tag of a single record field.

    Attributes:
        name (str | None): Overriding column name, or None to keep the declared name.
        mode (FieldMode): REQUIRED, or NULLABLE when the omitempty marker is present.
        suppressed (bool): True when the field must not appear in the schema.
    """

    name: str | None = None
    mode: FieldMode = FieldMode.REQUIRED
    suppressed: bool = False

    def resolve_name(self, declared: str) -> str:
        return self.name or declared


def parse_tag(tag: str | None) -> FieldTag:
    """
    Parse a raw tag string into a FieldTag.

    Args:
      tag (str | None): Raw tag value, e.g. "age,omitempty". None or "" means untagged.

    Returns:
      FieldTag: Parsed name/mode/suppression.

    Notes:
      Only the second component is inspected for the omitempty marker; further
      components are ignored.
    """
    if not tag:
        return FieldTag()
    if tag == SUPPRESS_MARKER:
        return FieldTag(suppressed=True)
    parts = tag.split(TAG_SEPARATOR)
    mode = FieldMode.REQUIRED
    if len(parts) > 1 and parts[1] == OMITEMPTY_MARKER:
        mode = FieldMode.NULLABLE
    return FieldTag(name=parts[0] or None, mode=mode)


# ============================================================================
# Helpers & Validators (zero I/O)
# ============================================================================

_LOWER_SNAKE_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")


def is_lower_snake(value: str) -> bool:
    """
    Check whether a string is lower_snake.

    Examples:
      >>> is_lower_snake("timestamp")
      True
      >>> is_lower_snake("TIMESTAMP")
      False
    """
    return bool(_LOWER_SNAKE_RE.match(value or ""))


def assert_lower_snake(value: str, what: str = "value") -> None:
    """
    Validate that a string is lower_snake.

    Raises:
      ValueError: If value is not lower_snake.
    """
    if not is_lower_snake(value):
        raise ValueError(f"{what} must be lower_snake (got: {value!r})")


def field_type_from_value(s: str) -> FieldType:
    """
    Parse a type string into a FieldType.

    Upper-case values as returned by the warehouse API ("RECORD") are accepted
    and folded to lower case before lookup.

    Raises:
      ValueError: If s is not a known field type.
    """
    value = (s or "").lower()
    assert_lower_snake(value, "type")
    return FieldType(value)


def field_mode_from_value(s: str) -> FieldMode:
    """
    Parse a mode string into a FieldMode (case-insensitive).

    Raises:
      ValueError: If s is not a known field mode.
    """
    value = (s or "").lower()
    assert_lower_snake(value, "mode")
    return FieldMode(value)


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Assert that every enum member's value is lower_snake.

    Raises:
      AssertionError: If any enum member has a non-lower_snake value.
    """
    for E in enums:
        for m in E:
            if not is_lower_snake(m.value):
                raise AssertionError(
                    f"{E.__name__}.{m.name} has non-lower_snake value: {m.value!r}"
                )
