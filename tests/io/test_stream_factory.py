from __future__ import annotations

import gzip
import os
from pathlib import Path

import pytest
import zstandard

from delimio.core.codec import Codec
from delimio.io.config import IoSettings
from delimio.io.errors import IoCodecError, IoError, IoNotFoundError, IoPermissionError
from delimio.io.streams import compress, decompress, open_read, open_write

PAYLOAD = b"name\tcount\na\t1\nb\t2\n"


@pytest.mark.parametrize("name, codec", [("d.txt", Codec.NONE), ("d.txt.gz", Codec.GZIP), ("d.txt.zst", Codec.ZSTD)])
def test_write_then_read_each_codec(tmp_path: Path, name: str, codec: Codec) -> None:
    path = tmp_path / name
    with open_write(path) as out:
        assert out.codec is codec
        out.write(PAYLOAD)
    with open_read(path) as src:
        assert src.read() == PAYLOAD


def test_file_bytes_match_extension(tmp_path: Path) -> None:
    gz = tmp_path / "a.gz"
    zst = tmp_path / "a.zstd"
    for p in (gz, zst):
        with open_write(p) as out:
            out.write(PAYLOAD)
    assert gzip.decompress(gz.read_bytes()) == PAYLOAD
    assert zstandard.ZstdDecompressor().stream_reader(zst.read_bytes()).read() == PAYLOAD


def test_missing_path_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(IoNotFoundError) as info:
        open_read(tmp_path / "absent.tsv.gz")
    assert isinstance(info.value, IoError)
    assert info.value.path == str(tmp_path / "absent.tsv.gz")


def test_missing_parent_on_write_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(IoNotFoundError):
        open_write(tmp_path / "no" / "such" / "dir.txt")


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_path_is_permission_denied(tmp_path: Path) -> None:
    path = tmp_path / "locked.txt"
    path.write_bytes(b"x")
    path.chmod(0)
    try:
        with pytest.raises(IoPermissionError):
            open_read(path)
    finally:
        path.chmod(0o600)


@pytest.mark.parametrize("name", ["bad.gz", "bad.zst"])
def test_bad_compressed_header_fails_on_open(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_bytes(b"plain text, not compressed\n")
    with pytest.raises(IoCodecError):
        open_read(path)


@pytest.mark.parametrize("name", ["empty.txt", "empty.gz", "empty.zst"])
def test_empty_file_reads_empty(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_bytes(b"")
    with open_read(path) as src:
        assert src.read() == b""


@pytest.mark.parametrize("name", ["log.txt", "log.txt.gz", "log.txt.zst"])
def test_append_keeps_existing_content(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    with open_write(path) as out:
        out.write(b"first\n")
    with open_write(path, append=True) as out:
        assert out.mode == "a"
        out.write(b"second\n")
    with open_read(path) as src:
        assert src.read() == b"first\nsecond\n"


def test_sniff_content_is_opt_in(tmp_path: Path) -> None:
    path = tmp_path / "disguised.dat"
    path.write_bytes(gzip.compress(PAYLOAD))
    with open_read(path) as src:
        assert src.codec is Codec.NONE
        assert src.read() == path.read_bytes()
    with open_read(path, sniff_content=True) as src:
        assert src.codec is Codec.GZIP
        assert src.read() == PAYLOAD
    with open_read(path, IoSettings(sniff_content=True)) as src:
        assert src.read() == PAYLOAD


def test_stream_direction_is_enforced(tmp_path: Path) -> None:
    path = tmp_path / "d.txt"
    with open_write(path) as out:
        assert out.writable() and not out.readable()
        out.write(b"x")
    with open_read(path) as src:
        assert src.readable() and not src.writable() and not src.seekable()
    with pytest.raises(ValueError):
        src.read()


def test_truncated_gzip_surfaces_as_io_error(tmp_path: Path) -> None:
    path = tmp_path / "cut.gz"
    data = gzip.compress(PAYLOAD * 100)
    path.write_bytes(data[: len(data) // 2])
    with open_read(path) as src:
        with pytest.raises(IoError):
            src.read()


@pytest.mark.parametrize("codec", list(Codec))
@pytest.mark.parametrize("data", [b"", PAYLOAD, bytes(range(256)) * 64])
def test_compress_decompress_in_memory(codec: Codec, data: bytes) -> None:
    assert decompress(compress(data, codec), codec) == data


def test_decompress_rejects_garbage() -> None:
    with pytest.raises(IoCodecError):
        decompress(b"not gzip", Codec.GZIP)
    with pytest.raises(IoCodecError):
        decompress(b"not zstd at all", Codec.ZSTD)
