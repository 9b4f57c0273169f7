"""
delimio.io: Compressed-transparent file IO and typed delimited records.

## Responsibilities
- Open files as byte streams with gzip/zstd layered in or out by file extension.
- Read delimited files into typed records through a pull-based cursor, and write typed
  records back with a fixed column order.
- Offer line and whole-content helpers over the same streams.

## Public API
- IoSettings: Configuration for IO behavior (defaults sourced from delimio.core.constants).
- Io: Facade for opening paths and line/string transfer.
- DelimFile: Facade for typed CSV/TSV reading and writing.
- RecordReader / Row: Cursor over typed rows and its tagged result.
- RecordWriter: Typed row writer.
- open_read / open_write / ByteStream: The stream factory and its handle type.

## Import DAG discipline
- Depends on stdlib, zstandard, polars, and delimio.core.*.

## Examples
```python
from dataclasses import dataclass
from delimio.core import DelimiterProfile
from delimio.io import DelimFile

@dataclass
class Count:
    name: str
    count: int

files = DelimFile()
files.write("counts.tsv.gz", [Count("a", 1), Count("b", 2)], Count, delimiter="\t")
with files.reader("counts.tsv.gz", Count, DelimiterProfile.tsv()) as reader:
    for row in reader:
        print(row.record if row.ok else row.error)
```

## Notes
- Codec classification is by extension only unless IoSettings.sniff_content is enabled.
- Record streams report per-row failures inline and end after a stream failure.
"""

from __future__ import annotations

from .config import IoSettings
from .errors import IoCodecError, IoConfigError, IoError, IoNotFoundError, IoPermissionError
from .facade import DelimFile, Io
from .frame import records_to_frame
from .reader import RecordReader, Row
from .streams import ByteStream, compress, decompress, open_read, open_write
from .writer import RecordWriter

__all__ = [
    "IoSettings",
    "Io",
    "DelimFile",
    "RecordReader",
    "Row",
    "RecordWriter",
    "ByteStream",
    "open_read",
    "open_write",
    "compress",
    "decompress",
    "records_to_frame",
    "IoError",
    "IoNotFoundError",
    "IoPermissionError",
    "IoCodecError",
    "IoConfigError",
]
