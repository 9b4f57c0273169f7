"""
Compression codec classification for delimio paths.

Decides which codec, if any, applies to a path. Classification is a pure function of
the path string: it looks only at the final extension token and never touches the
filesystem.

Responsibilities
- Define the Codec enum (none, gzip, zstd).
- Provide classify(path) for name-based classification (the default everywhere).
- Provide PathIdentity, which splits a file name into its format and compression suffixes.
- Provide detect_codec(head) for opt-in magic-byte detection.

Notes:
    - Matching is exact and case-sensitive: "data.csv.GZ" is not gzip.
    - Only the last suffix selects a codec: "data.gz.csv" is uncompressed.
    - Zero-IO; stdlib only.

Examples:
    >>> from delimio.core.codec import Codec, classify
    >>> classify("reads.tsv.gz") is Codec.GZIP
    True
    >>> classify("reads.tsv") is Codec.NONE
    True
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

from .constants import (
    GZIP_EXTENSIONS,
    GZIP_MAGIC,
    ZSTD_EXTENSIONS,
    ZSTD_MAGIC,
    ZSTD_SKIPPABLE_MAGIC,
    ZSTD_SKIPPABLE_MAGIC_MASK,
)

__all__ = [
    "Codec",
    "PathIdentity",
    "classify",
    "detect_codec",
    "extension_token",
    "has_magic",
]


class Codec(Enum):
    """Codec applied to a file's bytes."""

    NONE = "none"
    GZIP = "gzip"
    ZSTD = "zstd"

    @property
    def compressed(self) -> bool:
        return self is not Codec.NONE


def extension_token(path: str | os.PathLike[str]) -> str | None:
    """
    Return the final extension token of a path without its leading dot.

    Args:
        path (str | os.PathLike[str]): Any path; it need not exist.

    Returns:
        str | None: "gz" for "a.tsv.gz"; None when the name has no extension.
    """
    suffix = PurePath(os.fspath(path)).suffix
    return suffix[1:] if suffix else None


def classify(path: str | os.PathLike[str]) -> Codec:
    """
    Classify a path by its final extension token.

    Args:
        path (str | os.PathLike[str]): Any path; it need not exist.

    Returns:
        Codec: GZIP for .gz/.gzip, ZSTD for .zst/.zstd, NONE otherwise.

    Notes:
        Total and side-effect free; never reads file content.
    """
    token = extension_token(path)
    if token in GZIP_EXTENSIONS:
        return Codec.GZIP
    if token in ZSTD_EXTENSIONS:
        return Codec.ZSTD
    return Codec.NONE


def has_magic(codec: Codec, head: bytes) -> bool:
    """Return True if `head` starts like a stream of `codec` (always True for NONE)."""
    if codec is Codec.GZIP:
        return head.startswith(GZIP_MAGIC)
    if codec is Codec.ZSTD:
        if head.startswith(ZSTD_MAGIC):
            return True
        if len(head) >= 4:
            (magic,) = struct.unpack("<I", head[:4])
            return magic & ZSTD_SKIPPABLE_MAGIC_MASK == ZSTD_SKIPPABLE_MAGIC
        return False
    return True


def detect_codec(head: bytes) -> Codec:
    """
    Detect a codec from the leading bytes of a stream.

    Args:
        head (bytes): At least the first four bytes of the stream, when available.

    Returns:
        Codec: GZIP or ZSTD when the magic number matches, NONE otherwise.

    Notes:
        Opt-in only; the IO layer consults this when IoSettings.sniff_content is set
        and the path itself classifies as NONE.
    """
    for codec in (Codec.GZIP, Codec.ZSTD):
        if has_magic(codec, head):
            return codec
    return Codec.NONE


@dataclass(frozen=True)
class PathIdentity:
    """
    Immutable view of a path and its recognized suffix chain.

    Attributes:
        path (PurePath): The path as given.
        format_suffix (str | None): Suffix naming the content format, e.g. "tsv" for
            "calls.tsv.gz" or "csv" for "calls.csv".
        compression_suffix (str | None): Suffix that selected a codec, e.g. "gz".
        codec (Codec): Classification of the path.

    Examples:
        >>> ident = PathIdentity.of("calls.tsv.zst")
        >>> (ident.format_suffix, ident.compression_suffix, ident.codec.value)
        ('tsv', 'zst', 'zstd')
    """

    path: PurePath
    format_suffix: str | None
    compression_suffix: str | None
    codec: Codec

    @classmethod
    def of(cls, path: str | os.PathLike[str]) -> PathIdentity:
        p = PurePath(os.fspath(path))
        codec = classify(p)
        compression_suffix = p.suffix[1:] if codec.compressed else None
        base = p.with_suffix("") if codec.compressed else p
        format_suffix = base.suffix[1:] if base.suffix else None
        return cls(
            path=p,
            format_suffix=format_suffix,
            compression_suffix=compression_suffix,
            codec=codec,
        )
