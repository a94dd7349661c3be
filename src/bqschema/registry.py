"""
Registry of well-known types that map to a single leaf column.

Some record-like types are opaque from the warehouse's point of view: a
timestamp is stored as ``timestamp`` and a datastore key is stored as its
string form, regardless of their internal attributes. The registry maps
fully-qualified type identifiers (``"module.QualName"``) to the leaf FieldType
they collapse to, so inference never has to import the libraries that define
them.

Notes:
    - Matching is by exact identifier first, then by each base class in MRO
      order, so subclasses of a registered type (e.g. a pandas Timestamp, which
      subclasses datetime.datetime) resolve like their base.
    - Registries are plain per-caller objects; default_registry() builds a
      fresh instance on every call.

Examples:
    >>> from datetime import datetime
    >>> from bqschema.registry import default_registry
    >>> default_registry().resolve(datetime).value
    'timestamp'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Final

from .grammar import LEAF_TYPES, FieldType, field_type_from_value

__all__ = [
    "WellKnownTypes",
    "DEFAULT_WELL_KNOWN_TYPES",
    "type_identifier",
    "default_registry",
]

logger = logging.getLogger(__name__)


def type_identifier(tp: type) -> str:
    """
    Return the fully-qualified identifier of a class.

    Examples:
        >>> from datetime import datetime
        >>> type_identifier(datetime)
        'datetime.datetime'
    """
    return f"{tp.__module__}.{tp.__qualname__}"


DEFAULT_WELL_KNOWN_TYPES: Final[dict[str, FieldType]] = {
    type_identifier(datetime): FieldType.TIMESTAMP,
    # Datastore / App Engine entity keys, recognized by name only.
    "google.cloud.datastore.key.Key": FieldType.STRING,
    "google.cloud.ndb.key.Key": FieldType.STRING,
    "google.appengine.ext.ndb.key.Key": FieldType.STRING,
    "google.appengine.api.datastore_types.Key": FieldType.STRING,
}


class WellKnownTypes:
    """
    Mutable mapping of type identifiers to leaf field types.

    Args:
        entries (Mapping[str, FieldType | str] | None): Initial identifier -> type entries.

    Raises:
        ValueError: If an entry maps to anything other than string or timestamp.
    """

    def __init__(self, entries: Mapping[str, FieldType | str] | None = None) -> None:
        self._entries: dict[str, FieldType] = {}
        for identifier, field_type in (entries or {}).items():
            self.register(identifier, field_type)

    def register(self, tp: type | str, field_type: FieldType | str) -> None:
        """
        Register a type (or its identifier string) as a leaf of the given type.

        Raises:
            ValueError: If field_type is not string or timestamp, or the identifier is empty.
        """
        identifier = tp if isinstance(tp, str) else type_identifier(tp)
        if not identifier:
            raise ValueError("well-known type identifier must be non-empty")
        if isinstance(field_type, str):
            field_type = field_type_from_value(field_type)
        if field_type not in LEAF_TYPES:
            allowed = sorted(t.value for t in LEAF_TYPES)
            raise ValueError(
                f"well-known type {identifier!r} must map to one of {allowed} "
                f"(got {field_type.value!r})"
            )
        self._entries[identifier] = field_type
        logger.debug("registered well-known type %s -> %s", identifier, field_type.value)

    def resolve(self, tp: object) -> FieldType | None:
        """
        Look up the leaf type for a class, walking its MRO.

        Returns:
            FieldType | None: The registered leaf type, or None when tp is not a
            registered class (non-classes always resolve to None).
        """
        if not isinstance(tp, type):
            return None
        for klass in tp.__mro__:
            found = self._entries.get(type_identifier(klass))
            if found is not None:
                return found
        return None

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def as_dict(self) -> dict[str, FieldType]:
        return dict(self._entries)


def default_registry() -> WellKnownTypes:
    """Build a fresh registry holding DEFAULT_WELL_KNOWN_TYPES."""
    return WellKnownTypes(DEFAULT_WELL_KNOWN_TYPES)
