"""
Typed record writer: serializes records to delimited rows through a byte stream.

Overview
- Column order is the schema's field order, fixed once per writer.
- With has_header, the header row is emitted right before the first record (never for a
  writer that writes nothing, unless write_header() is called).
- Each row is rendered into a private buffer first; a row that fails to serialize raises
  FieldSerializeError and leaves no bytes downstream.

Failure semantics
- FieldSerializeError: a value is missing, None for a non-nullable field, not representable
  in the configured encoding, or (with quoting disabled) contains the delimiter or a line break.
- RecordIoError: the underlying stream failed while writing, flushing, or closing.

Notes
- close() must be called (or the writer used as a context manager) to flush buffered text
  and write codec trailers. __exit__ closes on every path, including errors.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from typing import Any, BinaryIO, Generic, TypeVar

from delimio.core.constants import ENCODING
from delimio.core.dialect import DelimiterProfile
from delimio.core.errors import FieldSerializeError, RecordIoError
from delimio.core.records import RecordSchema, resolve_schema

from .errors import IoError

__all__ = ["RecordWriter"]

T = TypeVar("T")


class RecordWriter(Generic[T]):
    """
    Writer emitting typed records as delimited rows.

    Args:
        stream (BinaryIO): Writable byte stream; the writer takes ownership and closes it.
        record (RecordSchema[T] | type[T]): Record schema, or a record type to derive one from.
        profile (DelimiterProfile | None): Delimiter/header/quote settings (CSV with header
            when None).
        encoding (str): Text encoding for the stream.
        emit_header (bool | None): Override profile.has_header for this writer, e.g. to avoid
            repeating a header when appending to a file that already has one.

    Attributes:
        count (int): Records written so far.
    """

    def __init__(
        self,
        stream: BinaryIO,
        record: RecordSchema[T] | type[T],
        profile: DelimiterProfile | None = None,
        *,
        encoding: str = ENCODING,
        emit_header: bool | None = None,
    ) -> None:
        self.schema: RecordSchema[T] = resolve_schema(record)
        self.profile = profile or DelimiterProfile.csv()
        self.encoding = encoding
        self.count = 0
        self._columns = self.schema.names
        self._header_pending = self.profile.has_header if emit_header is None else emit_header
        self._text = io.TextIOWrapper(stream, encoding=encoding, newline="")
        self._buffer = io.StringIO()
        self._csv = csv.writer(self._buffer, **self.profile.dialect_options())  # type: ignore[arg-type]
        self._closed = False

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def _render(self, tokens: list[str], value: Any) -> str:
        self._buffer.seek(0)
        self._buffer.truncate()
        try:
            self._csv.writerow(tokens)
        except csv.Error as exc:
            raise FieldSerializeError(self._culprit(tokens), value, str(exc)) from exc
        line = self._buffer.getvalue()
        try:
            line.encode(self.encoding)
        except UnicodeEncodeError as exc:
            raise FieldSerializeError(None, value, f"not representable in {self.encoding}: {exc}") from exc
        return line

    def _culprit(self, tokens: list[str]) -> str | None:
        for name, token in zip(self._columns, tokens):
            if self.profile.delimiter in token or "\n" in token or "\r" in token:
                return name
        return None

    def _emit(self, text: str) -> None:
        try:
            self._text.write(text)
        except (IoError, OSError) as exc:
            raise RecordIoError(exc, row=self.count) from exc

    def _tokens(self, record: T) -> list[str]:
        tokens: list[str] = []
        for spec in self.schema.fields:
            try:
                value = spec.value_of(record)
            except (AttributeError, KeyError, TypeError) as exc:
                raise FieldSerializeError(spec.name, record, f"no value: {exc}") from exc
            try:
                token = spec.format_field(value)
            except (ValueError, TypeError) as exc:
                raise FieldSerializeError(spec.name, value, str(exc)) from exc
            if not isinstance(token, str):
                raise FieldSerializeError(spec.name, value, f"formatter returned {type(token).__name__}")
            tokens.append(token)
        return tokens

    def write_header(self) -> None:
        """Emit the header now if it is still pending (no-op otherwise)."""
        self._check_open()
        if self._header_pending:
            self._emit(self._render(list(self._columns), self._columns))
            self._header_pending = False

    def write(self, record: T) -> None:
        """
        Serialize and write one record.

        Raises:
            FieldSerializeError: The record could not be rendered; nothing was written.
            RecordIoError: The underlying stream failed.
        """
        self._check_open()
        line = self._render(self._tokens(record), record)
        self.write_header()
        self._emit(line)
        self.count += 1

    def write_all(self, records: Iterable[T]) -> int:
        """Write every record in order; returns the number written by this call."""
        n = 0
        for rec in records:
            self.write(rec)
            n += 1
        return n

    def flush(self) -> None:
        self._check_open()
        try:
            self._text.flush()
        except (IoError, OSError) as exc:
            raise RecordIoError(exc) from exc

    def close(self) -> None:
        """Flush buffered text, finish the codec stream, and close the file."""
        if self._closed:
            return
        self._closed = True
        try:
            self._text.close()
        except (IoError, OSError) as exc:
            raise RecordIoError(exc) from exc

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("write to a closed RecordWriter")

    def __enter__(self) -> RecordWriter[T]:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
