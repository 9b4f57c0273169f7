"""
Custom exceptions for the delimio.io module.

Purpose
- Provide IO-layer specific error types for opening and transferring bytes.
- Keep delimio.core as the source of truth for record-mapping errors (see delimio.core.errors).

Source of truth and boundaries
- delimio.core.errors.RecordError and its subclasses describe per-record failures.
- delimio.io raises Io* errors for filesystem/codec concerns:
  - IoNotFoundError: the path does not exist (read-open, or a missing parent on write-open).
  - IoPermissionError: the OS refused access.
  - IoCodecError: a compressed stream could not be initialized (bad header).
  - IoConfigError: invalid or unsupported settings.
  - IoError itself: any other failure; the OS/codec exception is chained as __cause__.

Notes
- These exceptions do not perform any IO and are stdlib-only.
- Filesystem errors are not retried; callers decide whether a retry makes sense.
"""

from __future__ import annotations

import os


class IoError(Exception):
    """
    Base class for IO-related errors in delimio.io.

    Attributes:
        path (str | None): Path involved in the failure, when known.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from delimio.core errors.
    """

    def __init__(self, message: str, path: str | os.PathLike[str] | None = None) -> None:
        self.path = os.fspath(path) if path is not None else None
        super().__init__(message)


class IoNotFoundError(IoError):
    """Raised when a path to open does not exist."""


class IoPermissionError(IoError):
    """Raised when the OS denies access to a path."""


class IoCodecError(IoError):
    """
    Raised when a compression layer cannot be initialized.

    Examples:
        - A file named *.gz whose first bytes are not the gzip magic number
        - An invalid zstd frame header
    """


class IoConfigError(IoError):
    """
    Raised when IO configuration is invalid or unsupported.

    Examples:
        - gzip_level outside 0..9
        - buffer_size < 1
    """
