"""
Filesystem helpers for delimio.io (file protocol baseline).

Responsibilities
- Open raw binary file handles for reading, writing, and appending.
- Translate OSError subclasses into the delimio.io error taxonomy with the path attached.

Import DAG discipline
- stdlib-only plus delimio.io.errors; codec layering lives in delimio.io.streams.

Notes
- Write-opens create the file; mode "wb" truncates, "ab" appends.
- Parent directories are not created; a missing parent surfaces as IoNotFoundError.
- All helpers are synchronous; callers decide on concurrency/locking if/when needed.
"""

from __future__ import annotations

import os
from typing import BinaryIO

from .errors import IoError, IoNotFoundError, IoPermissionError


def translate_os_error(exc: OSError, path: str | os.PathLike[str], action: str) -> IoError:
    """
    Map an OSError to the matching IoError subclass.

    Args:
        exc (OSError): Error raised by the OS.
        path (str | os.PathLike[str]): Path being accessed.
        action (str): Short verb phrase for the message, e.g. "open for reading".

    Returns:
        IoError: IoNotFoundError, IoPermissionError, or a plain IoError. The caller raises it
        with `from exc`.
    """
    msg = f"cannot {action} {os.fspath(path)!r}: {exc.strerror or exc}"
    if isinstance(exc, FileNotFoundError):
        return IoNotFoundError(msg, path)
    if isinstance(exc, PermissionError):
        return IoPermissionError(msg, path)
    return IoError(msg, path)


def open_read(path: str | os.PathLike[str], buffer_size: int) -> BinaryIO:
    """
    Open a file for buffered binary reading.

    Raises:
        IoNotFoundError: The path does not exist.
        IoPermissionError: The path is not readable.
        IoError: Any other OS failure (e.g. the path is a directory).
    """
    try:
        return open(path, "rb", buffering=buffer_size)
    except OSError as exc:
        raise translate_os_error(exc, path, "open for reading") from exc


def open_write(path: str | os.PathLike[str], buffer_size: int, append: bool = False) -> BinaryIO:
    """
    Open (creating if needed) a file for buffered binary writing.

    Args:
        path (str | os.PathLike[str]): Destination path.
        buffer_size (int): Write buffer size.
        append (bool): Append to existing content instead of truncating.

    Raises:
        IoNotFoundError: The parent directory does not exist.
        IoPermissionError: The path is not writable.
        IoError: Any other OS failure.
    """
    try:
        return open(path, "ab" if append else "wb", buffering=buffer_size)
    except OSError as exc:
        raise translate_os_error(exc, path, "open for writing") from exc
