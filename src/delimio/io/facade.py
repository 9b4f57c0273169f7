"""
Io facade: the single entry point for compressed-transparent file IO.

Overview
- Io opens paths as byte streams (new_reader/new_writer) and offers line and whole-content
  helpers (read_lines, iter_lines, read_to_string, write_lines, write_string).
- DelimFile binds typed records to delimited files: cursor-level reader()/writer(), strict
  whole-file read()/write(), CSV/TSV shortcuts, and read_frame() into Polars.

Source of truth
- Codec choice: delimio.core.codec.classify (by extension, see delimio.io.streams).
- Delimited format: delimio.core.dialect.DelimiterProfile and the pinned csv dialect.
- Record mapping: delimio.core.records.RecordSchema.

Error taxonomy
- Opening and transferring raise delimio.io.errors.Io* errors; text decoding/encoding
  failures in the line helpers surface as IoError.
- Record mapping raises (strict helpers) or reports (cursors) delimio.core.errors.Record* errors.

Examples
```python
from dataclasses import dataclass
from delimio.io import DelimFile, Io

@dataclass
class Sample:
    name: str
    count: int

Io().write_lines("samples.csv.gz", ["name,count", "a,1", "b,2"])
DelimFile().read_csv("samples.csv.gz", Sample)  # [Sample('a', 1), Sample('b', 2)]
```
"""

from __future__ import annotations

import io
import os
from collections.abc import Iterable, Iterator
from typing import TypeVar

import polars as pl

from delimio.core.codec import Codec, classify
from delimio.core.dialect import COMMA, TAB, DelimiterProfile
from delimio.core.records import RecordSchema

from .config import IoSettings
from .errors import IoError, IoNotFoundError
from .frame import records_to_frame
from .reader import RecordReader
from .streams import ByteStream, open_read, open_write
from .writer import RecordWriter

__all__ = ["Io", "DelimFile"]

T = TypeVar("T")

PathLike = str | os.PathLike[str]


class Io:
    """
    Opens files for reading and writing, handling gzip/zstd by file extension.

    Args:
        settings (IoSettings | None): IO configuration; IoSettings() defaults when None.

    Raises:
        IoConfigError: Settings are out of range.
    """

    def __init__(self, settings: IoSettings | None = None) -> None:
        self.settings = (settings or IoSettings()).validate()

    @staticmethod
    def is_gzip_path(path: PathLike) -> bool:
        return classify(path) is Codec.GZIP

    @staticmethod
    def is_zstd_path(path: PathLike) -> bool:
        return classify(path) is Codec.ZSTD

    @staticmethod
    def is_compressed_path(path: PathLike) -> bool:
        return classify(path).compressed

    def new_reader(self, path: PathLike) -> ByteStream:
        """Open a path for reading; see delimio.io.streams.open_read."""
        return open_read(path, self.settings)

    def new_writer(self, path: PathLike, append: bool = False) -> ByteStream:
        """Open a path for writing; see delimio.io.streams.open_write."""
        return open_write(path, append=append, settings=self.settings)

    def iter_lines(self, path: PathLike) -> Iterator[str]:
        """
        Lazily yield the lines of a file without their line terminators.

        Notes:
            "\\n", "\\r\\n", and "\\r" all end a line. The file is opened before this returns,
            so open failures raise here; it is closed when the iterator is exhausted or closed.
        """
        stream = self.new_reader(path)
        text = io.TextIOWrapper(stream, encoding=self.settings.encoding, newline=None)
        return self._lines(path, text)

    def _lines(self, path: PathLike, text: io.TextIOWrapper) -> Iterator[str]:
        with text:
            try:
                for line in text:
                    yield line[:-1] if line.endswith("\n") else line
            except UnicodeDecodeError as exc:
                raise IoError(f"cannot decode {os.fspath(path)!r} as {self.settings.encoding}: {exc}", path) from exc

    def read_lines(self, path: PathLike) -> list[str]:
        """Read all lines of a file into a list (terminators stripped)."""
        return list(self.iter_lines(path))

    def read_to_string(self, path: PathLike) -> str:
        """Read a whole file as text."""
        with self.new_reader(path) as stream:
            data = stream.read()
        try:
            return data.decode(self.settings.encoding)
        except UnicodeDecodeError as exc:
            raise IoError(f"cannot decode {os.fspath(path)!r} as {self.settings.encoding}: {exc}", path) from exc

    def write_lines(self, path: PathLike, lines: Iterable[str], append: bool = False) -> None:
        """
        Write each line followed by "\\n".

        Args:
            path (PathLike): Destination; compressed by extension.
            lines (Iterable[str]): Lines without terminators.
            append (bool): Append instead of truncating.
        """
        with self.new_writer(path, append=append) as out:
            for line in lines:
                out.write(self._encode(path, line))
                out.write(b"\n")

    def write_string(self, path: PathLike, text: str, append: bool = False) -> None:
        """Write text as-is (no terminator added)."""
        with self.new_writer(path, append=append) as out:
            out.write(self._encode(path, text))

    def _encode(self, path: PathLike, text: str) -> bytes:
        try:
            return text.encode(self.settings.encoding)
        except UnicodeEncodeError as exc:
            raise IoError(f"cannot encode text for {os.fspath(path)!r} as {self.settings.encoding}: {exc}", path) from exc


class DelimFile:
    """
    Reads and writes typed records to delimited (CSV/TSV) files.

    Args:
        io (Io | None): Io instance supplying settings; Io() when None.

    Notes:
        Record types are dataclasses, NamedTuples, pydantic models, or explicit RecordSchema
        objects (see delimio.core.records).
    """

    def __init__(self, io: Io | None = None) -> None:
        self.io = io or Io()

    def reader(
        self,
        path: PathLike,
        record: RecordSchema[T] | type[T],
        profile: DelimiterProfile | None = None,
    ) -> RecordReader[T]:
        """Open a RecordReader cursor over a (possibly compressed) delimited file."""
        stream = self.io.new_reader(path)
        try:
            return RecordReader(stream, record, profile, encoding=self.io.settings.encoding)
        except BaseException:
            stream.close()
            raise

    def writer(
        self,
        path: PathLike,
        record: RecordSchema[T] | type[T],
        profile: DelimiterProfile | None = None,
        append: bool = False,
    ) -> RecordWriter[T]:
        """
        Open a RecordWriter on a (possibly compressed) delimited file.

        Notes:
            When appending to a non-empty file the header is not repeated.
        """
        profile = profile or DelimiterProfile.csv()
        emit_header = profile.has_header and not (append and self._has_content(path))
        stream = self.io.new_writer(path, append=append)
        try:
            return RecordWriter(
                stream,
                record,
                profile,
                encoding=self.io.settings.encoding,
                emit_header=emit_header,
            )
        except BaseException:
            stream.close()
            raise

    def read(
        self,
        path: PathLike,
        record: RecordSchema[T] | type[T],
        delimiter: str = COMMA,
        quote: bool = True,
        has_header: bool = True,
    ) -> list[T]:
        """
        Read every record from a delimited file.

        Raises:
            RecordError: The first row that fails to map (strict).
            IoError: The file cannot be opened.
        """
        profile = DelimiterProfile(delimiter=delimiter, has_header=has_header, quote=quote)
        with self.reader(path, record, profile) as reader:
            return reader.read_all()

    def write(
        self,
        path: PathLike,
        records: Iterable[T],
        record: RecordSchema[T] | type[T],
        delimiter: str = COMMA,
        quote: bool = True,
        has_header: bool = True,
        append: bool = False,
    ) -> int:
        """
        Write records to a delimited file; returns the number of records written.

        Raises:
            FieldSerializeError: A record could not be serialized (earlier rows are kept).
            IoError: The file cannot be opened.
        """
        profile = DelimiterProfile(delimiter=delimiter, has_header=has_header, quote=quote)
        with self.writer(path, record, profile, append=append) as writer:
            return writer.write_all(records)

    def read_csv(self, path: PathLike, record: RecordSchema[T] | type[T]) -> list[T]:
        return self.read(path, record, COMMA)

    def read_tsv(self, path: PathLike, record: RecordSchema[T] | type[T]) -> list[T]:
        return self.read(path, record, TAB)

    def write_csv(self, path: PathLike, records: Iterable[T], record: RecordSchema[T] | type[T]) -> int:
        return self.write(path, records, record, COMMA)

    def write_tsv(self, path: PathLike, records: Iterable[T], record: RecordSchema[T] | type[T]) -> int:
        return self.write(path, records, record, TAB)

    def read_frame(
        self,
        path: PathLike,
        record: RecordSchema[T] | type[T],
        profile: DelimiterProfile | None = None,
    ) -> pl.DataFrame:
        """Read a delimited file strictly and return its records as a Polars DataFrame."""
        with self.reader(path, record, profile) as reader:
            return records_to_frame(reader.records(), reader.schema)

    def _has_content(self, path: PathLike) -> bool:
        """Whether `path` holds any decoded bytes (an empty gzip member or zstd frame does not count)."""
        if not classify(path).compressed:
            try:
                return os.path.getsize(path) > 0
            except OSError:
                return False
        try:
            stream = self.io.new_reader(path)
        except IoNotFoundError:
            return False
        with stream:
            return stream.read(1) != b""
