"""
Recursive inference of a table schema from a record type.

Given a sample record (a dataclass or pydantic model, as an instance or a
class), walks its declared fields in order and produces a TableSchema: one
FieldSchema per exported, non-suppressed field, recursing into nested records
and into the element types of sequences.

Classification order per field
1) Optional[T] is unwrapped one level (NewType and Annotated wrappers too).
2) bool / int / float / str (and subclasses) map to primitive types.
3) Types in the well-known registry collapse to their leaf type.
4) Record types recurse and become ``record`` fields.
5) Sequences become ``repeated`` fields typed by their element, which must
   itself be primitive, well-known, or a record.
6) Anything else is inconvertible.

Mode decision table
| branch      | mode        |
|-------------|-------------|
| primitive   | from tag    |
| well-known  | from tag    |
| record      | nullable    |
| sequence    | repeated    |

Errors
- The first SchemaInferenceError aborts the traversal. infer_schema returns it
  together with the top-level fields resolved before the failure; to_schema
  raises it.

Examples
--------
>>> from dataclasses import dataclass, field
>>> from bqschema.infer import to_schema
>>> @dataclass
... class Person:
...     Name: str
...     Age: int = field(default=0, metadata={"json": "age,omitempty"})
...     Tags: list[str] = field(default_factory=list)
>>> [f.to_api_repr() for f in to_schema(Person).fields]  # doctest: +NORMALIZE_WHITESPACE
[{'name': 'Name', 'type': 'string', 'mode': 'required'},
 {'name': 'age', 'type': 'integer', 'mode': 'nullable'},
 {'name': 'Tags', 'type': 'string', 'mode': 'repeated'}]
"""

from __future__ import annotations

import collections.abc
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Final, Union, get_args, get_origin

from .config import InferSettings
from .errors import (
    ArrayOfArraysError,
    InconvertibleTypeError,
    NotRecordError,
    SchemaInferenceError,
)
from .grammar import FieldMode, FieldType, parse_tag
from .introspect import is_record_type, record_fields, record_type_of
from .registry import WellKnownTypes
from .schema import FieldSchema, TableSchema

__all__ = [
    "InferenceResult",
    "infer_schema",
    "to_schema",
]

_NONE_TYPE: Final = type(None)

_SEQUENCE_ORIGINS: Final[frozenset[Any]] = frozenset(
    {
        list,
        tuple,
        set,
        frozenset,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Collection,
        collections.abc.Iterable,
    }
)


class _Branch(Enum):
    PRIMITIVE = "primitive"
    WELL_KNOWN = "well_known"
    RECORD = "record"
    SEQUENCE = "sequence"


# None keeps the mode parsed from the field tag.
_MODE_OVERRIDES: Final[dict[_Branch, FieldMode | None]] = {
    _Branch.PRIMITIVE: None,
    _Branch.WELL_KNOWN: None,
    _Branch.RECORD: FieldMode.NULLABLE,
    _Branch.SEQUENCE: FieldMode.REPEATED,
}


def _mode_for(branch: _Branch, tagged: FieldMode) -> FieldMode:
    override = _MODE_OVERRIDES[branch]
    return tagged if override is None else override


@dataclass(frozen=True)
class InferenceResult:
    """
    Outcome of infer_schema.

    Attributes:
        schema (TableSchema): Inferred schema; partial when error is set.
        error (SchemaInferenceError | None): First error met during traversal.
    """

    schema: TableSchema
    error: SchemaInferenceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> TableSchema:
        """Return the schema, raising the recorded error if there is one."""
        if self.error is not None:
            raise self.error
        return self.schema


def _type_name(tp: Any) -> str:
    if get_origin(tp) is None and isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


def _strip_wrappers(tp: Any) -> Any:
    while True:
        if get_origin(tp) is Annotated:
            tp = get_args(tp)[0]
        elif isinstance(tp, typing.NewType):
            tp = tp.__supertype__
        else:
            return tp


def _unwrap(tp: Any) -> Any:
    """Strip Annotated and NewType wrappers, one level of Optional, then the wrappers again."""
    tp = _strip_wrappers(tp)
    if get_origin(tp) in (Union, types.UnionType):
        members = [a for a in get_args(tp) if a is not _NONE_TYPE]
        if len(members) == 1:
            return _strip_wrappers(members[0])
    return tp


def _primitive_type(tp: Any) -> FieldType | None:
    if get_origin(tp) is not None or not isinstance(tp, type):
        return None
    # bool subclasses int
    if issubclass(tp, bool):
        return FieldType.BOOLEAN
    if issubclass(tp, int):
        return FieldType.INTEGER
    if issubclass(tp, float):
        return FieldType.FLOAT
    if issubclass(tp, str):
        return FieldType.STRING
    return None


def _is_sequence(tp: Any) -> bool:
    origin = get_origin(tp)
    return (origin if origin is not None else tp) in _SEQUENCE_ORIGINS


def _sequence_element(tp: Any) -> Any:
    """Element type of a sequence annotation; None when unparameterized."""
    args = get_args(tp)
    if not args:
        return None
    if get_origin(tp) is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        if len(set(args)) != 1:
            raise InconvertibleTypeError(_type_name(tp))
    return args[0]


class _Inferrer:
    """Single traversal over one top-level record type."""

    def __init__(self, registry: WellKnownTypes, tag_key: str) -> None:
        self._registry = registry
        self._tag_key = tag_key
        self._expanding: list[type] = []

    def fields_of(self, tp: type, out: list[FieldSchema]) -> None:
        """Append the schema of every exported field of tp to out, in order."""
        if tp in self._expanding:
            raise InconvertibleTypeError(_type_name(tp))
        self._expanding.append(tp)
        try:
            for rf in record_fields(tp, self._tag_key):
                if not rf.exported:
                    continue
                tag = parse_tag(rf.tag)
                if tag.suppressed:
                    continue
                out.append(self._field(tag.resolve_name(rf.name), tag.mode, rf.annotation))
        finally:
            self._expanding.pop()

    def _field(self, name: str, tagged: FieldMode, declared: Any) -> FieldSchema:
        tp = _unwrap(declared)

        primitive = _primitive_type(tp)
        if primitive is not None:
            return FieldSchema(name=name, type=primitive, mode=_mode_for(_Branch.PRIMITIVE, tagged))

        resolved = self._resolve_record(tp)
        if resolved is not None:
            branch, field_type, children = resolved
            return FieldSchema(
                name=name, type=field_type, mode=_mode_for(branch, tagged), fields=children
            )

        if _is_sequence(tp):
            field_type, children = self._element(name, tp)
            return FieldSchema(
                name=name,
                type=field_type,
                mode=_mode_for(_Branch.SEQUENCE, tagged),
                fields=children,
            )

        raise InconvertibleTypeError(_type_name(declared))

    def _resolve_record(self, tp: Any) -> tuple[_Branch, FieldType, list[FieldSchema]] | None:
        leaf = self._registry.resolve(tp)
        if leaf is not None:
            return _Branch.WELL_KNOWN, leaf, []
        if is_record_type(tp):
            children: list[FieldSchema] = []
            self.fields_of(tp, children)
            return _Branch.RECORD, FieldType.RECORD, children
        return None

    def _element(self, name: str, tp: Any) -> tuple[FieldType, list[FieldSchema]]:
        element = _sequence_element(tp)
        if element is not None:
            element = _unwrap(element)

        primitive = _primitive_type(element)
        if primitive is not None:
            return primitive, []

        resolved = self._resolve_record(element)
        if resolved is None:
            raise ArrayOfArraysError(name)
        _, field_type, children = resolved
        return field_type, children


def infer_schema(
    sample: object,
    *,
    registry: WellKnownTypes | None = None,
    settings: InferSettings | None = None,
) -> InferenceResult:
    """
    Infer the table schema of a record sample.

    Args:
        sample (object): Dataclass or pydantic model, as an instance or a class.
            Field values are never read.
        registry (WellKnownTypes | None): Well-known leaf types. Defaults to
            ``settings.build_registry()``.
        settings (InferSettings | None): Tag key and registry defaults.
            Defaults to InferSettings().

    Returns:
        InferenceResult: The schema and, on failure, the first error. A failed
        result carries only the top-level fields fully resolved before the
        failing one. The failing field itself and every later field are
        absent, including a nested record whose own fields failed part way;
        treat it as incomplete.
    """
    settings = settings or InferSettings()
    if registry is None:
        registry = settings.build_registry()

    tp = record_type_of(sample)
    if tp is None:
        sample_type = sample if isinstance(sample, type) else type(sample)
        return InferenceResult(TableSchema(), NotRecordError(_type_name(sample_type)))

    fields: list[FieldSchema] = []
    try:
        _Inferrer(registry, settings.tag_key).fields_of(tp, fields)
    except SchemaInferenceError as exc:
        return InferenceResult(TableSchema(fields=fields), exc)
    return InferenceResult(TableSchema(fields=fields))


def to_schema(
    sample: object,
    *,
    registry: WellKnownTypes | None = None,
    settings: InferSettings | None = None,
) -> TableSchema:
    """
    Infer the table schema of a record sample, raising on failure.

    For callers with no recovery path; see infer_schema for arguments.

    Raises:
        NotRecordError: If sample is not a record.
        ArrayOfArraysError: If a sequence element is not primitive, well-known, or a record.
        InconvertibleTypeError: If a field type has no schema mapping.
    """
    return infer_schema(sample, registry=registry, settings=settings).unwrap()
