from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from bqschema import (
    FieldMode,
    FieldType,
    InconvertibleTypeError,
    WellKnownTypes,
    infer_schema,
    to_schema,
)

# Stand-in for an external datastore key, recognized by identifier only.
Key = type("Key", (), {"__module__": "google.cloud.datastore.key"})


class Stamp(datetime):
    pass


@dataclass
class Address:
    street: str
    zip_code: int = field(metadata={"json": "zip,omitempty"})


@dataclass
class Customer:
    name: str
    home: Address = field(metadata={"json": "home"})
    work: Optional[Address] = None
    previous: list[Address] = field(default_factory=list)


@dataclass
class Event:
    at: datetime
    key: Key
    stamp: Stamp
    seen: Optional[datetime] = field(default=None, metadata={"json": "seen,omitempty"})
    history: list[datetime] = field(default_factory=list)
    keys: list[Key] = field(default_factory=list)


@dataclass
class Money:
    amount: int
    currency: str


@dataclass
class Invoice:
    total: Money = field(metadata={"json": "total,omitempty"})
    lines: list[Money] = field(default_factory=list)


@dataclass
class Empty:
    pass


@dataclass
class HasEmpty:
    e: Empty


class Line(BaseModel):
    sku: str
    qty: int = 1


class Order(BaseModel):
    id: str = Field(serialization_alias="order_id")
    lines: list[Line] = []
    placed: datetime
    note: Optional[str] = Field(default=None, json_schema_extra={"json": "note,omitempty"})
    secret: str = Field(default="", exclude=True)


def test_nested_record_is_nullable_with_recursive_children() -> None:
    schema = to_schema(Customer)
    home = schema.get("home")
    assert home is not None
    assert home.type is FieldType.RECORD
    assert home.mode is FieldMode.NULLABLE
    assert home.fields == to_schema(Address).fields
    assert [(f.name, f.mode) for f in home.fields] == [
        ("street", FieldMode.REQUIRED),
        ("zip", FieldMode.NULLABLE),
    ]


def test_optional_record_unwraps_like_bare_record() -> None:
    schema = to_schema(Customer)
    assert schema.get("work") == schema.get("home").model_copy(update={"name": "work"})


def test_sequence_of_records_is_repeated_record() -> None:
    previous = to_schema(Customer).get("previous")
    assert previous.type is FieldType.RECORD
    assert previous.mode is FieldMode.REPEATED
    assert previous.fields == to_schema(Address).fields


def test_well_known_leaf_types_keep_tag_mode() -> None:
    schema = to_schema(Event)
    assert [(f.name, f.type, f.mode) for f in schema.fields] == [
        ("at", FieldType.TIMESTAMP, FieldMode.REQUIRED),
        ("key", FieldType.STRING, FieldMode.REQUIRED),
        ("stamp", FieldType.TIMESTAMP, FieldMode.REQUIRED),
        ("seen", FieldType.TIMESTAMP, FieldMode.NULLABLE),
        ("history", FieldType.TIMESTAMP, FieldMode.REPEATED),
        ("keys", FieldType.STRING, FieldMode.REPEATED),
    ]
    assert all(f.fields == [] for f in schema.fields)


def test_caller_registry_collapses_records_without_recursing() -> None:
    registry = WellKnownTypes()
    registry.register(Money, FieldType.STRING)
    schema = to_schema(Invoice, registry=registry)
    assert schema.to_api_repr() == {
        "fields": [
            {"name": "total", "type": "string", "mode": "nullable"},
            {"name": "lines", "type": "string", "mode": "repeated"},
        ]
    }


def test_registry_without_datetime_rejects_timestamps() -> None:
    result = infer_schema(Event, registry=WellKnownTypes())
    assert isinstance(result.error, InconvertibleTypeError)
    assert result.error.type_name == "datetime"


def test_empty_nested_record_keeps_record_type() -> None:
    schema = to_schema(HasEmpty)
    assert schema.to_api_repr() == {
        "fields": [{"name": "e", "type": "record", "mode": "nullable", "fields": []}]
    }


def test_pydantic_nested_models_aliases_and_excludes() -> None:
    order = Order(id="o-1", placed=datetime(2025, 1, 1, tzinfo=timezone.utc))
    assert to_schema(order).to_api_repr() == {
        "fields": [
            {"name": "order_id", "type": "string", "mode": "required"},
            {
                "name": "lines",
                "type": "record",
                "mode": "repeated",
                "fields": [
                    {"name": "sku", "type": "string", "mode": "required"},
                    {"name": "qty", "type": "integer", "mode": "required"},
                ],
            },
            {"name": "placed", "type": "timestamp", "mode": "required"},
            {"name": "note", "type": "string", "mode": "nullable"},
        ]
    }
