from dataclasses import dataclass
from datetime import date, datetime

import pytest

from bqschema.grammar import FieldType
from bqschema.registry import (
    DEFAULT_WELL_KNOWN_TYPES,
    WellKnownTypes,
    default_registry,
    type_identifier,
)


class Instant(datetime):
    pass


@dataclass
class Sku:
    code: str


def test_default_registry_resolves_datetime_and_subclasses() -> None:
    registry = default_registry()
    assert registry.resolve(datetime) is FieldType.TIMESTAMP
    assert registry.resolve(Instant) is FieldType.TIMESTAMP
    assert registry.resolve(date) is None


def test_datastore_keys_resolve_by_identifier() -> None:
    for identifier in (
        "google.cloud.datastore.key.Key",
        "google.appengine.ext.ndb.key.Key",
    ):
        module, _, name = identifier.rpartition(".")
        fake = type(name, (), {"__module__": module})
        assert default_registry().resolve(fake) is FieldType.STRING


def test_register_by_class_and_by_string() -> None:
    registry = WellKnownTypes()
    registry.register(Sku, "string")
    registry.register("example.When", FieldType.TIMESTAMP)
    assert registry.resolve(Sku) is FieldType.STRING
    assert "example.When" in registry
    assert type_identifier(Sku) in registry
    assert len(registry) == 2


@pytest.mark.parametrize("bad", [FieldType.RECORD, FieldType.INTEGER, "boolean"])
def test_register_rejects_non_leaf_types(bad: FieldType | str) -> None:
    with pytest.raises(ValueError, match="must map to one of"):
        WellKnownTypes().register(Sku, bad)


def test_register_rejects_empty_identifier() -> None:
    with pytest.raises(ValueError):
        WellKnownTypes().register("", FieldType.STRING)


def test_default_registries_are_independent() -> None:
    first = default_registry()
    first.register(Sku, FieldType.STRING)
    second = default_registry()
    assert second.resolve(Sku) is None
    assert second.as_dict() == DEFAULT_WELL_KNOWN_TYPES


def test_non_classes_never_resolve() -> None:
    assert default_registry().resolve(list[datetime]) is None
    assert default_registry().resolve(None) is None
