"""
Record-level exception types raised while mapping delimited rows to typed records.

Provides typed exceptions for per-record failures:
- ColumnCountMismatch when a row's width differs from the header (or schema) width.
- FieldParseError when a token cannot be converted to its field's type.
- FieldSerializeError when a field value cannot be rendered into a row.
- HeaderMismatchError when a header lacks columns the record type requires.
- RecordBuildError when the record constructor rejects otherwise parsed values.
- RecordIoError when the underlying stream fails and the record stream cannot continue.

Notes:
    - Every error carries its context as attributes; str(error) is an actionable message.
    - Row indexes are 0-based and count data rows only (the header is not a data row).
    - This module uses only the Python standard library and has no side effects.

Examples:
    >>> from delimio.core.errors import FieldParseError
    >>> err = FieldParseError(row=3, field="count", token="x", expected="int")
    >>> "count" in str(err) and err.row == 3
    True
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "RecordError",
    "ColumnCountMismatch",
    "FieldParseError",
    "FieldSerializeError",
    "HeaderMismatchError",
    "RecordBuildError",
    "RecordIoError",
]


class RecordError(Exception):
    """Base class for failures mapping between delimited rows and typed records."""


class ColumnCountMismatch(RecordError):
    """A row has a different number of fields than the header (or schema)."""

    def __init__(self, row: int, expected: int, actual: int) -> None:
        self.row = row
        self.expected = expected
        self.actual = actual
        super().__init__(f"row {row}: expected {expected} fields, found {actual}")


class FieldParseError(RecordError):
    """A token could not be converted to its field's declared type."""

    def __init__(self, row: int, field: str, token: str, expected: str) -> None:
        self.row = row
        self.field = field
        self.token = token
        self.expected = expected
        super().__init__(f"row {row}: field {field!r} cannot parse {token!r} as {expected}")


class FieldSerializeError(RecordError):
    """A field value could not be rendered as delimited text."""

    def __init__(self, field: str | None, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        where = f"field {field!r}" if field is not None else "row"
        super().__init__(f"{where}: cannot serialize {value!r}: {reason}")


class HeaderMismatchError(RecordError):
    """The header row is missing columns required by the record type."""

    def __init__(self, missing: list[str], header: list[str]) -> None:
        self.missing = list(missing)
        self.header = list(header)
        super().__init__(f"header {self.header!r} is missing required columns {self.missing!r}")


class RecordBuildError(RecordError):
    """The record type rejected the parsed field values."""

    def __init__(self, row: int, reason: str) -> None:
        self.row = row
        self.reason = reason
        super().__init__(f"row {row}: cannot build record: {reason}")


class RecordIoError(RecordError):
    """
    The underlying byte stream failed; the record stream ends after this error.

    Notes:
        The original exception is available as `cause` and as __cause__.
    """

    def __init__(self, cause: BaseException, row: int | None = None) -> None:
        self.cause = cause
        self.row = row
        where = f"row {row}: " if row is not None else ""
        super().__init__(f"{where}stream failed: {cause}")
        self.__cause__ = cause
