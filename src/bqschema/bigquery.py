"""
Conversion of inferred schemas into google-cloud-bigquery SchemaField lists.

The client library expects upper-case type and mode names ("RECORD",
"REPEATED"); nested record fields are passed through ``fields``. Kept out of
the package root so the core stays importable without the client library.

Examples:
    >>> from bqschema.bigquery import to_bigquery_schema  # doctest: +SKIP
    >>> table = bigquery.Table("proj.ds.people", schema=to_bigquery_schema(to_schema(Person)))  # doctest: +SKIP
"""

from __future__ import annotations

from google.cloud.bigquery import SchemaField

from .schema import FieldSchema, TableSchema

__all__ = ["to_bigquery_field", "to_bigquery_schema"]


def to_bigquery_field(field: FieldSchema) -> SchemaField:
    return SchemaField(
        name=field.name,
        field_type=field.type.value.upper(),
        mode=field.mode.value.upper(),
        fields=[to_bigquery_field(child) for child in field.fields],
    )


def to_bigquery_schema(schema: TableSchema) -> list[SchemaField]:
    """Convert every top-level field, preserving order."""
    return [to_bigquery_field(f) for f in schema.fields]
