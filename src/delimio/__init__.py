"""
delimio: transparent compressed file IO and typed delimited (CSV/TSV) records.

Layers
- delimio.core: zero-IO contracts: codec classification, delimiter profiles, record
  descriptors, record errors, defaults.
- delimio.io: streams, typed record reader/writer, Io and DelimFile facades, settings.
"""

from __future__ import annotations

__version__ = "0.3.0"

from delimio.core import Codec, DelimiterProfile, RecordSchema, classify
from delimio.io import DelimFile, Io, IoSettings

__all__ = [
    "Codec",
    "DelimiterProfile",
    "RecordSchema",
    "classify",
    "DelimFile",
    "Io",
    "IoSettings",
    "__version__",
]
