from dataclasses import dataclass, field
from datetime import datetime

from bqschema import to_schema
from bqschema.serde import json_dumps_canonical, json_loads, schema_from_json, schema_to_json


@dataclass
class Reading:
    sensor: str
    at: datetime
    values: list[float] = field(default_factory=list)


@dataclass
class Batch:
    readings: list[Reading]
    note: str = field(default="", metadata={"json": "note,omitempty"})


def test_json_dumps_canonical_sorted_and_unicode() -> None:
    s1 = json_dumps_canonical({"b": 2, "a": 1, "emoji": "🙂"})
    s2 = json_dumps_canonical({"emoji": "🙂", "a": 1, "b": 2})
    assert s1 == s2
    assert "🙂" in s1


def test_schema_json_preserves_field_order() -> None:
    text = schema_to_json(to_schema(Batch))
    payload = json_loads(text)
    assert [f["name"] for f in payload["fields"]] == ["readings", "note"]
    assert [f["name"] for f in payload["fields"][0]["fields"]] == ["sensor", "at", "values"]


def test_schema_from_json_rebuilds_inferred_schema() -> None:
    schema = to_schema(Batch)
    assert schema_from_json(schema_to_json(schema)) == schema


def test_schema_from_json_accepts_bare_field_list() -> None:
    schema = schema_from_json('[{"name":"id","type":"INTEGER","mode":"REQUIRED"}]')
    assert schema.field_names() == ["id"]
