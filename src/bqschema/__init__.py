"""
bqschema — infer BigQuery table schemas from Python record types.

## Responsibilities
- Walk a dataclass or pydantic model and emit an ordered schema tree of typed
  fields (boolean, integer, float, string, timestamp, record) with modes
  (required, nullable, repeated).
- Honor per-field serialization tags (``"name,omitempty"``, ``"-"``).
- Collapse well-known types (datetime, datastore keys) to leaf columns through a
  caller-owned registry.

## Public API
- infer_schema — returns InferenceResult(schema, error); never raises for
  classification failures.
- to_schema — same conversion, raising the first error.
- TableSchema / FieldSchema — pydantic models with the API encoding.
- WellKnownTypes / default_registry — leaf type registry.
- InferSettings — tag key and registry configuration (env > TOML > defaults).

## Import DAG discipline
- Core modules depend only on stdlib and pydantic.
- bqschema.bigquery (SchemaField conversion) depends on google-cloud-bigquery
  and is not imported here.

## Examples
```python
from dataclasses import dataclass, field
from bqschema import to_schema

@dataclass
class Person:
    Name: str
    Age: int = field(default=0, metadata={"json": "age,omitempty"})
    Tags: list[str] = field(default_factory=list)

to_schema(Person).to_api_repr()
# {'fields': [{'name': 'Name', 'type': 'string', 'mode': 'required'},
#             {'name': 'age', 'type': 'integer', 'mode': 'nullable'},
#             {'name': 'Tags', 'type': 'string', 'mode': 'repeated'}]}
```
"""

from __future__ import annotations

from .config import InferSettings
from .errors import (
    ArrayOfArraysError,
    InconvertibleTypeError,
    NotRecordError,
    SchemaInferenceError,
)
from .grammar import FieldMode, FieldType
from .infer import InferenceResult, infer_schema, to_schema
from .registry import WellKnownTypes, default_registry
from .schema import FieldSchema, TableSchema

__all__ = [
    "infer_schema",
    "to_schema",
    "InferenceResult",
    "TableSchema",
    "FieldSchema",
    "FieldType",
    "FieldMode",
    "WellKnownTypes",
    "default_registry",
    "InferSettings",
    "SchemaInferenceError",
    "NotRecordError",
    "ArrayOfArraysError",
    "InconvertibleTypeError",
]
