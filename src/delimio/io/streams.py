"""
Stream factory: open paths as byte streams with compression layered in or out.

Overview
- open_read(): raw file -> (gzip | zstd decoder)? -> ByteStream (read-only)
- open_write(): ByteStream (write-only) -> (gzip | zstd encoder)? -> raw file
- compress()/decompress(): the same codecs applied to in-memory bytes.

Source of truth
- Codec classification comes from delimio.core.codec.classify (name-based).
- Levels and buffer sizes come from delimio.io.config.IoSettings.

Codec behavior
- gzip: stdlib gzip; reads decode concatenated members, appends add a new member.
- zstd: zstandard; reads decode across frames, appends add a new frame.
- Read-opens check the codec header eagerly: a non-empty *.gz/*.zst file whose leading bytes
  are not a valid header raises IoCodecError before any data is returned. Empty files read
  as empty.

Notes
- A ByteStream must be closed (or used as a context manager); closing a write stream writes
  the codec trailer and flushes the file.
- Errors raised while reading, writing, or closing are re-raised as IoError with the codec or
  OS exception chained.
"""

from __future__ import annotations

import gzip
import io
import logging
import os
import zlib
from typing import Any

import zstandard

from delimio.core.codec import Codec, classify, detect_codec, has_magic
from delimio.core.constants import ZSTD_MAGIC

from . import fs
from .config import IoSettings
from .errors import IoCodecError, IoError

__all__ = [
    "ByteStream",
    "open_read",
    "open_write",
    "compress",
    "decompress",
]

logger = logging.getLogger(__name__)

# Failures a codec layer can raise mid-stream (gzip.BadGzipFile is an OSError).
STREAM_ERRORS: tuple[type[BaseException], ...] = (OSError, EOFError, zlib.error, zstandard.ZstdError)

# Enough leading bytes for the gzip fixed header and a full zstd frame header.
_HEAD_SIZE = 18

# gzip compression method byte for deflate, the only one defined.
_GZIP_DEFLATE = 8


class ByteStream(io.BufferedIOBase):
    """
    Directional byte stream over zero or one compression layer.

    Attributes:
        path (str): Path the stream was opened on.
        codec (Codec): Codec layered into the stream (Codec.NONE for raw files).
        mode (str): "r" (read), "w" (truncating write), or "a" (append).

    Notes:
        - Consumers see uncompressed bytes regardless of codec.
        - Not seekable. Owned by the caller that opened it; not thread-safe.
        - close() releases every layer, outermost first, even if one of them fails.
    """

    def __init__(self, path: str, codec: Codec, mode: str, stream: Any, layers: list[Any]) -> None:
        super().__init__()
        self.path = path
        self.codec = codec
        self.mode = mode
        self._stream = stream
        self._layers = layers
        self._released = False

    def __repr__(self) -> str:
        return f"ByteStream(path={self.path!r}, codec={self.codec.value}, mode={self.mode!r})"

    def _fail(self, action: str, exc: BaseException) -> IoError:
        return IoError(f"cannot {action} {self.path!r} ({self.codec.value}): {exc}", self.path)

    def _require(self, readable: bool) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if readable and not self.readable():
            raise io.UnsupportedOperation("stream is not readable")
        if not readable and not self.writable():
            raise io.UnsupportedOperation("stream is not writable")

    def readable(self) -> bool:
        return self.mode == "r"

    def writable(self) -> bool:
        return self.mode in ("w", "a")

    def seekable(self) -> bool:
        return False

    def read(self, size: int | None = -1) -> bytes:
        self._require(readable=True)
        try:
            return self._stream.read(-1 if size is None else size)
        except STREAM_ERRORS as exc:
            raise self._fail("read", exc) from exc

    def read1(self, size: int = -1) -> bytes:
        self._require(readable=True)
        try:
            return self._stream.read1(size)
        except STREAM_ERRORS as exc:
            raise self._fail("read", exc) from exc

    def readinto(self, b: Any) -> int:
        self._require(readable=True)
        try:
            return self._stream.readinto(b)
        except STREAM_ERRORS as exc:
            raise self._fail("read", exc) from exc

    def readline(self, size: int | None = -1) -> bytes:
        self._require(readable=True)
        try:
            return self._stream.readline(-1 if size is None else size)
        except STREAM_ERRORS as exc:
            raise self._fail("read", exc) from exc

    def write(self, b: Any) -> int:
        self._require(readable=False)
        n = memoryview(b).nbytes
        try:
            self._stream.write(b)
        except STREAM_ERRORS as exc:
            raise self._fail("write", exc) from exc
        return n

    def flush(self) -> None:
        if self._released or not self.writable():
            return
        try:
            self._stream.flush()
        except STREAM_ERRORS as exc:
            raise self._fail("flush", exc) from exc

    def close(self) -> None:
        if self._released:
            super().close()
            return
        self._released = True
        first: BaseException | None = None
        for layer in [self._stream, *self._layers]:
            try:
                layer.close()
            except STREAM_ERRORS as exc:
                if first is None:
                    first = exc
        super().close()
        logger.debug("closed %r", self)
        if first is not None:
            raise self._fail("close", first) from first


def _check_header(codec: Codec, head: bytes, path: str) -> None:
    """Raise IoCodecError if a non-empty head is not a valid header for `codec`."""
    if not head or not codec.compressed:
        return
    if not has_magic(codec, head):
        raise IoCodecError(f"{path!r} is not a {codec.value} stream (bad magic number)", path)
    if codec is Codec.GZIP:
        if len(head) < 3 or head[2] != _GZIP_DEFLATE:
            raise IoCodecError(f"{path!r} has an unsupported gzip compression method", path)
    elif codec is Codec.ZSTD and head.startswith(ZSTD_MAGIC):
        try:
            zstandard.get_frame_parameters(head)
        except zstandard.ZstdError as exc:
            raise IoCodecError(f"{path!r} has an invalid zstd frame header: {exc}", path) from exc


def open_read(
    path: str | os.PathLike[str],
    settings: IoSettings | None = None,
    *,
    sniff_content: bool | None = None,
) -> ByteStream:
    """
    Open a path for reading, transparently decoding gzip and zstd.

    Args:
        path (str | os.PathLike[str]): File to read.
        settings (IoSettings | None): IO configuration (defaults when None).
        sniff_content (bool | None): Override IoSettings.sniff_content for this call.

    Returns:
        ByteStream: Read-only stream of uncompressed bytes.

    Raises:
        IoNotFoundError: The path does not exist.
        IoPermissionError: The path is not readable.
        IoCodecError: The compressed header is invalid.
        IoError: Any other OS failure.
        IoConfigError: Settings are out of range.
    """
    settings = (settings or IoSettings()).validate()
    spath = os.fspath(path)
    codec = classify(spath)
    raw = fs.open_read(spath, settings.buffer_size)
    try:
        try:
            head = raw.peek(_HEAD_SIZE)[:_HEAD_SIZE]
        except OSError as exc:
            raise fs.translate_os_error(exc, spath, "read") from exc

        sniff = settings.sniff_content if sniff_content is None else sniff_content
        if codec is Codec.NONE and sniff:
            codec = detect_codec(head)
        _check_header(codec, head, spath)

        stream: Any
        layers: list[Any]
        if codec is Codec.GZIP:
            inner = gzip.GzipFile(fileobj=raw, mode="rb")
            stream = io.BufferedReader(inner, settings.buffer_size)
            layers = [inner, raw]
        elif codec is Codec.ZSTD:
            try:
                inner = zstandard.ZstdDecompressor().stream_reader(
                    raw,
                    read_size=settings.buffer_size,
                    read_across_frames=True,
                    closefd=True,
                )
            except zstandard.ZstdError as exc:
                raise IoCodecError(f"cannot initialize zstd decoder for {spath!r}: {exc}", spath) from exc
            stream = io.BufferedReader(inner, settings.buffer_size)
            layers = [inner, raw]
        else:
            stream = raw
            layers = []
    except BaseException:
        raw.close()
        raise

    handle = ByteStream(spath, codec, "r", stream, layers)
    logger.debug("opened %r", handle)
    return handle


def open_write(
    path: str | os.PathLike[str],
    append: bool = False,
    settings: IoSettings | None = None,
) -> ByteStream:
    """
    Open a path for writing, transparently encoding gzip and zstd.

    Args:
        path (str | os.PathLike[str]): File to write; created if missing.
        append (bool): Append instead of truncating. Compressed targets gain a new gzip
            member or zstd frame, which readers decode as a continuation.
        settings (IoSettings | None): IO configuration (defaults when None).

    Returns:
        ByteStream: Write-only stream accepting uncompressed bytes.

    Raises:
        IoNotFoundError: The parent directory does not exist.
        IoPermissionError: The path is not writable.
        IoCodecError: The encoder could not be created.
        IoError: Any other OS failure.
        IoConfigError: Settings are out of range.
    """
    settings = (settings or IoSettings()).validate()
    spath = os.fspath(path)
    codec = classify(spath)
    raw = fs.open_write(spath, settings.buffer_size, append=append)
    try:
        stream: Any
        if codec is Codec.GZIP:
            stream = gzip.GzipFile(filename="", fileobj=raw, mode="wb", compresslevel=settings.gzip_level)
        elif codec is Codec.ZSTD:
            try:
                cctx = zstandard.ZstdCompressor(level=settings.zstd_level)
                stream = cctx.stream_writer(raw, closefd=True)
            except zstandard.ZstdError as exc:
                raise IoCodecError(f"cannot initialize zstd encoder for {spath!r}: {exc}", spath) from exc
        else:
            stream = raw
    except BaseException:
        raw.close()
        raise

    handle = ByteStream(spath, codec, "a" if append else "w", stream, [raw] if stream is not raw else [])
    logger.debug("opened %r", handle)
    return handle


def compress(data: bytes, codec: Codec, settings: IoSettings | None = None) -> bytes:
    """Compress in-memory bytes with `codec` (identity for Codec.NONE)."""
    settings = (settings or IoSettings()).validate()
    if codec is Codec.GZIP:
        return gzip.compress(data, compresslevel=settings.gzip_level)
    if codec is Codec.ZSTD:
        return zstandard.ZstdCompressor(level=settings.zstd_level).compress(data)
    return bytes(data)


def decompress(data: bytes, codec: Codec) -> bytes:
    """
    Decompress in-memory bytes produced by `codec` (identity for Codec.NONE).

    Raises:
        IoCodecError: The data is not a valid stream for `codec`.
    """
    try:
        if codec is Codec.GZIP:
            return gzip.decompress(data)
        if codec is Codec.ZSTD:
            reader = zstandard.ZstdDecompressor().stream_reader(
                io.BytesIO(data), read_across_frames=True
            )
            with reader:
                return reader.read()
    except STREAM_ERRORS as exc:
        raise IoCodecError(f"cannot decompress {codec.value} data: {exc}") from exc
    return bytes(data)
