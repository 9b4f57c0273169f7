"""
Typed record reader: a pull-based cursor over delimited rows.

Overview
- RecordReader wraps a readable byte stream, tokenizes it with the pinned csv dialect, and
  maps each row onto a record through a RecordSchema.
- advance() yields one Row per data row: Row(record=...) on success, Row(error=...) on a
  per-row failure, and None once the stream is exhausted.

Mapping
- With a header, columns are matched to fields by name (order-independent); extra columns
  are ignored and missing required fields raise HeaderMismatchError at construction.
- Without a header, tokens map to fields positionally in schema order.

Failure semantics
- ColumnCountMismatch, FieldParseError, and RecordBuildError are reported for that row only;
  the next advance() continues with the following row.
- Stream failures (IO, codec corruption, text decoding, csv framing) are reported once as
  RecordIoError, and the reader is exhausted afterwards.
- Blank lines are skipped and do not consume a row index.

Notes
- Forward-only and not restartable; iterating twice continues from the current position.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, BinaryIO, Generic, TypeVar

from delimio.core.constants import ENCODING
from delimio.core.dialect import DelimiterProfile
from delimio.core.errors import (
    ColumnCountMismatch,
    FieldParseError,
    HeaderMismatchError,
    RecordBuildError,
    RecordError,
    RecordIoError,
)
from delimio.core.records import FieldSpec, RecordSchema, resolve_schema

from .errors import IoError

__all__ = ["Row", "RecordReader"]

T = TypeVar("T")

# Failures after which the row framing can no longer be trusted.
_FATAL = (IoError, OSError, UnicodeDecodeError, csv.Error)


@dataclass(frozen=True)
class Row(Generic[T]):
    """
    One element of a record stream: either a record or the error that replaced it.

    Attributes:
        index (int): 0-based data-row index (the header is not counted).
        record (T | None): The parsed record when ok.
        error (RecordError | None): The failure when not ok.
    """

    index: int
    record: T | None = None
    error: RecordError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the record, or raise the row's error."""
        if self.error is not None:
            raise self.error
        return self.record  # type: ignore[return-value]


class RecordReader(Generic[T]):
    """
    Cursor producing typed rows from a delimited byte stream.

    Args:
        stream (BinaryIO): Readable byte stream; the reader takes ownership and closes it.
        record (RecordSchema[T] | type[T]): Record schema, or a record type to derive one from.
        profile (DelimiterProfile | None): Delimiter/header/quote settings (CSV with header
            when None).
        encoding (str): Text encoding of the stream.

    Raises:
        HeaderMismatchError: The header lacks a column for a required field.
        RecordIoError: The header could not be decoded or tokenized.
        IoError: The stream failed while reading the header.

    Examples:
        >>> with RecordReader(stream, Sample, DelimiterProfile.tsv()) as reader:  # doctest: +SKIP
        ...     for row in reader:
        ...         if row.ok:
        ...             handle(row.record)
    """

    def __init__(
        self,
        stream: BinaryIO,
        record: RecordSchema[T] | type[T],
        profile: DelimiterProfile | None = None,
        *,
        encoding: str = ENCODING,
    ) -> None:
        self.schema: RecordSchema[T] = resolve_schema(record)
        self.profile = profile or DelimiterProfile.csv()
        self.header: list[str] | None = None
        self._text = io.TextIOWrapper(stream, encoding=encoding, newline="")
        self._rows = csv.reader(self._text, **self.profile.dialect_options())  # type: ignore[arg-type]
        self._index = 0
        self._done = False
        self._positions: list[tuple[FieldSpec, int]] = []
        self._width = len(self.schema.fields)
        try:
            self._bind()
        except BaseException:
            self.close()
            raise

    def _next_tokens(self) -> list[str] | None:
        for tokens in self._rows:
            if tokens:
                return tokens
        return None

    def _bind(self) -> None:
        if not self.profile.has_header:
            self._positions = [(spec, i) for i, spec in enumerate(self.schema.fields)]
            return
        try:
            header = self._next_tokens()
        except (UnicodeDecodeError, csv.Error) as exc:
            raise RecordIoError(exc) from exc
        if header is None:
            self._done = True
            return
        self.header = header
        self._width = len(header)
        missing: list[str] = []
        for spec in self.schema.fields:
            if spec.name in header:
                self._positions.append((spec, header.index(spec.name)))
            elif spec.required:
                missing.append(spec.name)
        if missing:
            raise HeaderMismatchError(missing, header)

    @property
    def line_num(self) -> int:
        """Number of physical lines consumed so far (quoted line breaks included)."""
        return self._rows.line_num

    @property
    def exhausted(self) -> bool:
        return self._done

    def advance(self) -> Row[T] | None:
        """
        Read the next data row.

        Returns:
            Row[T] | None: The next row (ok or error), or None at end of stream.
        """
        if self._done:
            return None
        try:
            tokens = self._next_tokens()
        except _FATAL as exc:
            self._done = True
            return Row(self._index, error=RecordIoError(exc, row=self._index))
        if tokens is None:
            self._done = True
            return None
        index = self._index
        self._index += 1
        return self._convert(index, tokens)

    def _convert(self, index: int, tokens: list[str]) -> Row[T]:
        if len(tokens) != self._width:
            return Row(index, error=ColumnCountMismatch(index, self._width, len(tokens)))
        values: dict[str, Any] = {}
        for spec, pos in self._positions:
            token = tokens[pos]
            try:
                values[spec.name] = spec.parse_token(token)
            except (ValueError, TypeError) as exc:
                err = FieldParseError(index, spec.name, token, spec.type_name)
                err.__cause__ = exc
                return Row(index, error=err)
        try:
            record = self.schema.make(**values)
        except (ValueError, TypeError) as exc:
            err = RecordBuildError(index, str(exc))
            err.__cause__ = exc
            return Row(index, error=err)
        return Row(index, record=record)

    def __iter__(self) -> Iterator[Row[T]]:
        while (row := self.advance()) is not None:
            yield row

    def records(self) -> Iterator[T]:
        """Yield records, raising the first row error encountered."""
        for row in self:
            yield row.unwrap()

    def read_all(self) -> list[T]:
        """Collect every remaining record; raises the first row error encountered."""
        return list(self.records())

    def close(self) -> None:
        """Release the text layer and the underlying byte stream."""
        self._done = True
        try:
            self._text.close()
        except (IoError, OSError) as exc:
            raise RecordIoError(exc) from exc

    def __enter__(self) -> RecordReader[T]:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
