"""
Frozen record descriptors binding delimited columns to typed Python records.

A RecordSchema is the explicit, construction-time descriptor of a record type: an ordered
tuple of FieldSpec entries, each carrying the column name, an accessor, a parser, and a
formatter. Readers and writers only ever consult the schema; they never inspect record
classes themselves.

Responsibilities
- Define FieldSpec and RecordSchema.
- Derive a schema once per record type for dataclasses, NamedTuples, and pydantic models
  (RecordSchema.for_type, cached).
- Build dict-record schemas from a column -> type mapping (RecordSchema.of_mapping).
- Convert tokens with pydantic TypeAdapter in lax mode, so "1" parses as int and "true" as bool.

Conversion rules
- An empty token parses to None for nullable (Optional) fields.
- None formats as an empty token; bool formats as "true"/"false"; Enum formats its value;
  float formats with repr(); date/time values format with isoformat().

Notes:
    - Column order is the record type's field declaration order.
    - Zero-IO (stdlib + pydantic only).

Examples:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Count:
    ...     name: str
    ...     count: int
    >>> schema = RecordSchema.for_type(Count)
    >>> schema.names
    ('name', 'count')
    >>> schema.make(name="a", count=schema.field("count").parse_token("1"))
    Count(name='a', count=1)
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import functools
import operator
import types
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, TypeAdapter

__all__ = [
    "FieldSpec",
    "RecordSchema",
    "resolve_schema",
    "format_value",
    "describe_type",
]

T = TypeVar("T")

_NONE_TYPE = type(None)


def describe_type(annotation: Any) -> str:
    """Return a short human-readable name for a type annotation."""
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def _split_optional(annotation: Any) -> tuple[Any, bool]:
    """Return (inner annotation, nullable) for X | None / Optional[X] annotations."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not _NONE_TYPE]
        nullable = len(args) != len(typing.get_args(annotation))
        if not nullable:
            return annotation, False
        if len(args) == 1:
            return args[0], True
        return Union[tuple(args)], True  # type: ignore[return-value]
    return annotation, False


def format_value(value: Any) -> str:
    """Render a single field value as delimited text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_value(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class FieldSpec:
    """
    Descriptor for one column of a record type.

    Attributes:
        name (str): Column name; also the keyword used to build the record.
        type_name (str): Human-readable target type, reported in FieldParseError.
        parse (Callable[[str], Any]): Converts a non-empty (or non-nullable) token.
        format (Callable[[Any], str]): Converts a non-None value to a token.
        get (Callable[[Any], Any] | None): Reads the value from a record; defaults to
            attribute access by name.
        nullable (bool): Empty tokens parse to None and None formats as "".
        required (bool): Whether a header must carry this column when reading.
        annotation (Any): Target type without Optional, when known (used by delimio.io.frame).

    Notes:
        parse may raise ValueError or TypeError (pydantic.ValidationError is a ValueError);
        readers translate these into FieldParseError.
    """

    name: str
    type_name: str
    parse: Callable[[str], Any]
    format: Callable[[Any], str] = format_value
    get: Callable[[Any], Any] | None = None
    nullable: bool = False
    required: bool = True
    annotation: Any = None

    @classmethod
    def of(cls, name: str, annotation: Any, *, required: bool = True) -> FieldSpec:
        """
        Build a FieldSpec whose parser is a pydantic TypeAdapter for `annotation`.

        Args:
            name (str): Column name.
            annotation (Any): Field type, e.g. int, float | None, datetime.date, an Enum.
            required (bool): False when the record type supplies a default.
        """
        inner, nullable = _split_optional(annotation)
        adapter = TypeAdapter(inner)
        return cls(
            name=name,
            type_name=describe_type(inner) + (" | None" if nullable else ""),
            parse=adapter.validate_python,
            nullable=nullable,
            required=required,
            annotation=inner,
        )

    def parse_token(self, token: str) -> Any:
        if self.nullable and token == "":
            return None
        return self.parse(token)

    def format_field(self, value: Any) -> str:
        if value is None:
            if not self.nullable:
                raise ValueError("None is not allowed for a non-nullable field")
            return ""
        return self.format(value)

    def value_of(self, record: Any) -> Any:
        if self.get is not None:
            return self.get(record)
        return getattr(record, self.name)


@dataclass(frozen=True)
class RecordSchema(Generic[T]):
    """
    Ordered field descriptor for a record type.

    Attributes:
        record_type (type): The record class (dict for mapping-based records).
        fields (tuple[FieldSpec, ...]): Columns in declaration (header) order.
        build (Callable[..., T] | None): Builds a record from keyword values; defaults to
            calling record_type.

    Raises:
        ValueError: If fields is empty or names repeat.

    Notes:
        - One schema is derived per record type and reused, so the column order of a writer
          never changes between rows.
        - Construct a RecordSchema directly to bind columns to arbitrary accessors/parsers.
    """

    record_type: type[T]
    fields: tuple[FieldSpec, ...]
    build: Callable[..., T] | None = None

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError(f"record schema for {describe_type(self.record_type)} has no fields")
        names = [f.name for f in self.fields]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"duplicate field names in record schema: {dupes!r}")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def make(self, **values: Any) -> T:
        factory = self.build if self.build is not None else self.record_type
        return factory(**values)

    def values(self, record: T) -> list[Any]:
        return [f.value_of(record) for f in self.fields]

    @classmethod
    def for_type(cls, record_type: type[T]) -> RecordSchema[T]:
        """
        Derive (once, cached) the schema of a dataclass, NamedTuple, or pydantic model.

        Raises:
            TypeError: If the type is none of the supported kinds.
        """
        return _schema_for_type(record_type)

    @classmethod
    def of_mapping(cls, columns: Mapping[str, Any]) -> RecordSchema[dict[str, Any]]:
        """
        Build a schema for dict records from an ordered column -> type mapping.

        Examples:
            >>> s = RecordSchema.of_mapping({"name": str, "count": int})
            >>> s.make(name="a", count=1)
            {'name': 'a', 'count': 1}
        """
        fields = []
        for name, annotation in columns.items():
            spec = FieldSpec.of(name, annotation)
            fields.append(dataclasses.replace(spec, get=operator.itemgetter(name)))
        return RecordSchema(record_type=dict, fields=tuple(fields), build=dict)


@functools.lru_cache(maxsize=None)
def _schema_for_type(record_type: type) -> RecordSchema[Any]:
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        fields = tuple(
            FieldSpec.of(name, info.annotation, required=info.is_required())
            for name, info in record_type.model_fields.items()
        )
        return RecordSchema(record_type=record_type, fields=fields)

    if dataclasses.is_dataclass(record_type) and isinstance(record_type, type):
        hints = typing.get_type_hints(record_type)
        fields = tuple(
            FieldSpec.of(
                f.name,
                hints[f.name],
                required=(
                    f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
                ),
            )
            for f in dataclasses.fields(record_type)
            if f.init
        )
        return RecordSchema(record_type=record_type, fields=fields)

    if isinstance(record_type, type) and issubclass(record_type, tuple) and hasattr(record_type, "_fields"):
        hints = typing.get_type_hints(record_type)
        defaults = getattr(record_type, "_field_defaults", {})
        fields = tuple(
            FieldSpec.of(name, hints.get(name, str), required=name not in defaults)
            for name in record_type._fields
        )
        return RecordSchema(record_type=record_type, fields=fields)

    raise TypeError(
        f"cannot derive a record schema from {describe_type(record_type)}; "
        "use a dataclass, NamedTuple, pydantic model, or pass a RecordSchema"
    )


def resolve_schema(record: RecordSchema[T] | type[T]) -> RecordSchema[T]:
    """Return `record` if it is already a RecordSchema, else derive one for the type."""
    if isinstance(record, RecordSchema):
        return record
    return RecordSchema.for_type(record)
