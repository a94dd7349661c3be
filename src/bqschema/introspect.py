"""
Record introspection for dataclasses and pydantic models.

Supplies, per record type, the declared field list with name, resolved type
hint, visibility, and the raw serialization tag. Inference consumes only
RecordField values and never touches dataclass or pydantic internals directly.

Tag lookup
- dataclasses: ``field(metadata={"json": "age,omitempty"})``
- pydantic: ``Field(json_schema_extra={"json": "age,omitempty"})``; when no
  explicit tag is present, ``Field(exclude=True)`` reads as the suppress marker
  and ``serialization_alias`` / ``alias`` reads as the tag name.

Notes:
    - Dataclass hints are resolved with typing.get_type_hints so postponed
      annotations (``from __future__ import annotations``) work for records
      defined at module level. Hints that cannot be resolved raise
      InconvertibleTypeError naming the record.
    - Fields whose name starts with an underscore are not exported.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, get_origin, get_type_hints

from pydantic import BaseModel

from .constants import DEFAULT_TAG_KEY, SUPPRESS_MARKER
from .errors import InconvertibleTypeError

__all__ = [
    "RecordField",
    "is_record_type",
    "record_type_of",
    "record_fields",
]


@dataclass(slots=True, frozen=True)
class RecordField:
    """Declared field of a record type."""

    name: str
    annotation: Any
    tag: str | None = None

    @property
    def exported(self) -> bool:
        return not self.name.startswith("_")


def is_record_type(tp: object) -> bool:
    """
    Return True for dataclass classes and pydantic model classes.

    Parameterized generics (``Box[int]``) and instances are not record types.
    """
    if get_origin(tp) is not None or not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel) and tp is not BaseModel


def record_type_of(sample: object) -> type | None:
    """Return the record class of a sample (instance or class), or None."""
    tp = sample if isinstance(sample, type) else type(sample)
    return tp if is_record_type(tp) else None


def record_fields(tp: type, tag_key: str = DEFAULT_TAG_KEY) -> list[RecordField]:
    """
    List the declared fields of a record type in declaration order.

    Args:
        tp (type): Dataclass or pydantic model class.
        tag_key (str): Metadata key holding the serialization tag.

    Returns:
        list[RecordField]: All declared fields, exported or not.

    Raises:
        TypeError: If tp is not a record type.
        InconvertibleTypeError: If a dataclass annotation cannot be resolved.
    """
    if not is_record_type(tp):
        raise TypeError(f"{tp!r} is not a dataclass or pydantic model")
    if dataclasses.is_dataclass(tp):
        return _dataclass_fields(tp, tag_key)
    return _model_fields(tp, tag_key)


def _tag_value(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _dataclass_fields(tp: type, tag_key: str) -> list[RecordField]:
    try:
        hints = get_type_hints(tp)
    except (NameError, TypeError) as exc:
        raise InconvertibleTypeError(tp.__qualname__) from exc
    return [
        RecordField(
            name=f.name,
            annotation=hints.get(f.name, f.type),
            tag=_tag_value(f.metadata.get(tag_key)),
        )
        for f in dataclasses.fields(tp)
    ]


def _model_fields(tp: type[BaseModel], tag_key: str) -> list[RecordField]:
    out: list[RecordField] = []
    for name, info in tp.model_fields.items():
        tag: str | None = None
        extra = info.json_schema_extra
        if isinstance(extra, dict):
            tag = _tag_value(extra.get(tag_key))
        if tag is None:
            if info.exclude is True:
                tag = SUPPRESS_MARKER
            else:
                tag = info.serialization_alias or info.alias
        out.append(RecordField(name=name, annotation=info.annotation, tag=tag))
    return out
