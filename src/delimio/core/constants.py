"""
delimio core IO-facing defaults.

Defines buffering, compression-level, and extension defaults consumed by the IO layer.
This module is zero-IO and uses only the Python standard library.

Notes:
    - delimio.io.config.IoSettings takes its defaults from these values.
    - Extension tokens are compared case-sensitively and without the leading dot.
    - Magic numbers are used only for the eager header check and for opt-in content sniffing;
      codec classification itself is name-based.
"""

from __future__ import annotations

__all__ = [
    "BUFFER_SIZE",
    "GZIP_LEVEL",
    "ZSTD_LEVEL",
    "ENCODING",
    "GZIP_EXTENSIONS",
    "ZSTD_EXTENSIONS",
    "GZIP_MAGIC",
    "ZSTD_MAGIC",
    "ZSTD_SKIPPABLE_MAGIC",
    "ZSTD_SKIPPABLE_MAGIC_MASK",
]

# Default buffer size for buffered readers/writers.
BUFFER_SIZE: int = 64 * 1024

# Compression level used when writing gzip files (0-9).
GZIP_LEVEL: int = 5

# Compression level used when writing zstd files (1-22); 3 is libzstd's own default.
ZSTD_LEVEL: int = 3

# Text encoding for line, string, and delimited operations.
ENCODING: str = "utf-8"

# Final extension tokens that select a codec.
GZIP_EXTENSIONS: frozenset[str] = frozenset({"gz", "gzip"})
ZSTD_EXTENSIONS: frozenset[str] = frozenset({"zst", "zstd"})

# Leading bytes of each codec's stream.
GZIP_MAGIC: bytes = b"\x1f\x8b"
ZSTD_MAGIC: bytes = b"\x28\xb5\x2f\xfd"

# Skippable zstd frames use magic 0x184D2A5? (little-endian); the low nibble is free.
ZSTD_SKIPPABLE_MAGIC_MASK: int = 0xFFFFFFF0
ZSTD_SKIPPABLE_MAGIC: int = 0x184D2A50
