"""
Bridge from typed records to Polars DataFrames.

Purpose
- Materialize a sequence of typed records into a pl.DataFrame whose columns follow the record
  schema's field order and whose dtypes follow the field types.

Dtype mapping
- int -> Int64, float -> Float64, bool -> Boolean, str -> Utf8, datetime.date -> Date,
  datetime.datetime -> Datetime.
- Any other field type is rendered through the field's formatter into a Utf8 column.

Notes
- Records are consumed strictly; callers wanting skip-and-continue should filter Row
  results from RecordReader before calling records_to_frame.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from typing import Any, TypeVar

import polars as pl

from delimio.core.records import FieldSpec, RecordSchema, resolve_schema

__all__ = ["records_to_frame", "dtype_for"]

T = TypeVar("T")

# Note: Polars exposes dtype singletons/classes (e.g., pl.Int64). To keep the type checker happy
# across versions, keep this mapping loosely typed.
_DTYPE_MAP: dict[Any, object] = {
    bool: pl.Boolean,
    int: pl.Int64,
    float: pl.Float64,
    str: pl.Utf8,
    dt.datetime: pl.Datetime,
    dt.date: pl.Date,
}


def dtype_for(spec: FieldSpec) -> object:
    """Return the Polars dtype used for a field (Utf8 for unmapped types)."""
    return _DTYPE_MAP.get(spec.annotation, pl.Utf8)


def _column_value(spec: FieldSpec, value: Any) -> Any:
    if value is None or spec.annotation in _DTYPE_MAP:
        return value
    return spec.format_field(value)


def records_to_frame(records: Iterable[T], record: RecordSchema[T] | type[T]) -> pl.DataFrame:
    """
    Collect typed records into a DataFrame.

    Args:
        records (Iterable[T]): Records to materialize (consumed once).
        record (RecordSchema[T] | type[T]): Schema (or record type) describing the columns.

    Returns:
        pl.DataFrame: One column per schema field, in schema order; empty input yields an
        empty frame with the same schema.
    """
    schema = resolve_schema(record)
    columns: dict[str, list[Any]] = {spec.name: [] for spec in schema.fields}
    for rec in records:
        for spec in schema.fields:
            columns[spec.name].append(_column_value(spec, spec.value_of(rec)))
    frame_schema = {spec.name: dtype_for(spec) for spec in schema.fields}
    return pl.DataFrame(columns, schema=frame_schema)  # type: ignore[arg-type]
