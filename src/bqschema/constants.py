"""
Tag grammar defaults shared by introspection, settings, and inference.

Notes:
    - The tag key names the per-field annotation consulted for serialization
      names (``json`` by default, mirroring the JSON encoder conventions).
    - Changes to these constants change the inferred names and modes of every
      caller relying on defaults.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_TAG_KEY",
    "SUPPRESS_MARKER",
    "OMITEMPTY_MARKER",
    "TAG_SEPARATOR",
]

# Metadata key looked up on dataclass fields / pydantic json_schema_extra.
DEFAULT_TAG_KEY: str = "json"

# Tag value that removes a field from the schema entirely.
SUPPRESS_MARKER: str = "-"

# Second tag component that relaxes the mode from required to nullable.
OMITEMPTY_MARKER: str = "omitempty"

TAG_SEPARATOR: str = ","
