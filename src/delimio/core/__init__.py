"""
Core package aggregator for delimio contracts (codecs, dialects, record descriptors, errors).

## Contracts (single source of truth)
- Codec: name-based codec classification and opt-in magic-byte detection.
- Dialect: DelimiterProfile and the pinned csv dialect.
- Records: FieldSpec/RecordSchema descriptors binding columns to typed records.
- Errors: RecordError taxonomy raised or reported while mapping rows.
- Constants: buffer size, compression levels, extensions, magic numbers.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file or network IO.
- delimio.io consumes these contracts to open streams and read/write records.

## Examples
```python
from delimio.core import Codec, DelimiterProfile, RecordSchema, classify

classify("samples.tsv.gz") is Codec.GZIP  # True
DelimiterProfile.tsv().delimiter  # '\t'
RecordSchema.of_mapping({"name": str, "count": int}).names  # ('name', 'count')
```
"""

from __future__ import annotations

from .codec import Codec, PathIdentity, classify, detect_codec
from .dialect import DelimiterProfile
from .errors import (
    ColumnCountMismatch,
    FieldParseError,
    FieldSerializeError,
    HeaderMismatchError,
    RecordBuildError,
    RecordError,
    RecordIoError,
)
from .records import FieldSpec, RecordSchema, resolve_schema

__all__ = [
    "Codec",
    "PathIdentity",
    "classify",
    "detect_codec",
    "DelimiterProfile",
    "FieldSpec",
    "RecordSchema",
    "resolve_schema",
    "RecordError",
    "ColumnCountMismatch",
    "FieldParseError",
    "FieldSerializeError",
    "HeaderMismatchError",
    "RecordBuildError",
    "RecordIoError",
]
