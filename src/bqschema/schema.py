"""
Pydantic v2 models for the inferred schema tree.

A TableSchema is an ordered list of FieldSchema nodes; record nodes carry their
nested fields recursively. Validators accept the lower-case vocabulary from
bqschema.grammar as well as the upper-case strings returned by the warehouse
API, and reject child fields on non-record nodes.

Responsibilities
- Define FieldSchema / TableSchema (frozen, extra="forbid").
- Provide the bit-exact API encoding: ``name``, ``type``, ``mode`` and, for
  records only, ``fields``.
- Parse API payloads back into models.

Style
- Zero-IO (stdlib + pydantic only).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .grammar import FieldMode, FieldType, field_mode_from_value, field_type_from_value

__all__ = [
    "FieldSchema",
    "TableSchema",
]


class FieldSchema(BaseModel):
    """
    One column (or nested column) of a table schema.

    Attributes:
        name (str): Column name.
        type (FieldType): Schema type tag.
        mode (FieldMode): required / nullable / repeated. Defaults to nullable,
            matching the API when the key is omitted.
        fields (list[FieldSchema]): Nested fields; only permitted when type is record.

    Raises:
        pydantic.ValidationError: If a non-record field carries nested fields, or
            the type/mode strings are unknown.

    Examples:
        >>> from bqschema.schema import FieldSchema
        >>> FieldSchema(name="age", type="integer", mode="nullable").to_api_repr()
        {'name': 'age', 'type': 'integer', 'mode': 'nullable'}
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: FieldType
    mode: FieldMode = FieldMode.NULLABLE
    fields: list[FieldSchema] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return field_type_from_value(v)
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, v: Any) -> Any:
        if isinstance(v, str):
            return field_mode_from_value(v)
        return v

    @model_validator(mode="after")
    def _children_only_for_records(self) -> FieldSchema:
        if self.fields and not self.is_record:
            raise ValueError(
                f"field {self.name!r} of type {self.type.value!r} cannot have nested fields"
            )
        return self

    @property
    def is_record(self) -> bool:
        return self.type is FieldType.RECORD

    def to_api_repr(self) -> dict[str, Any]:
        """Encode as the warehouse's field dict (``fields`` present only for records)."""
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "mode": self.mode.value,
        }
        if self.is_record:
            out["fields"] = [child.to_api_repr() for child in self.fields]
        return out


class TableSchema(BaseModel):
    """
    Ordered sequence of top-level fields.

    Examples:
        >>> from bqschema.schema import TableSchema
        >>> TableSchema().to_api_repr()
        {'fields': []}
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    fields: list[FieldSchema] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.fields)

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> FieldSchema | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_api_repr(self) -> dict[str, Any]:
        return {"fields": [f.to_api_repr() for f in self.fields]}

    @classmethod
    def from_api_repr(cls, data: Mapping[str, Any]) -> TableSchema:
        """
        Validate an API payload of the form ``{"fields": [...]}``.

        Raises:
            pydantic.ValidationError: On unknown keys, types, or modes.
        """
        return cls.model_validate(dict(data))
