from __future__ import annotations

import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import polars as pl
import pytest

from delimio.core.dialect import DelimiterProfile
from delimio.core.errors import FieldParseError
from delimio.io import DelimFile, Io, IoSettings
from delimio.io.errors import IoConfigError, IoError, IoNotFoundError


@dataclass
class Count:
    name: str
    count: int


@dataclass
class Rec:
    s: str
    i: int
    b: bool
    o: Optional[float] = None


RECS = [
    Rec("A,B,C", 1, True, None),
    Rec("plain", -7, False, 3.25),
    Rec("", 0, True, 0.0),
]


def test_gzip_tsv_with_header_scenario(tmp_path: Path) -> None:
    path = tmp_path / "counts.tsv.gz"
    files = DelimFile()

    assert files.write_tsv(path, [Count("a", 1), Count("b", 2)], Count) == 2

    assert gzip.decompress(path.read_bytes()) == b"name\tcount\na\t1\nb\t2\n"
    assert files.read_tsv(path, Count) == [Count("a", 1), Count("b", 2)]


@pytest.mark.parametrize("name", ["recs.csv", "recs.csv.gz", "recs.csv.gzip", "recs.csv.zst", "recs.csv.zstd"])
def test_delimited_round_trip_every_codec(tmp_path: Path, name: str) -> None:
    files = DelimFile()
    path = tmp_path / name
    files.write_csv(path, RECS, Rec)
    assert files.read_csv(path, Rec) == RECS


@pytest.mark.parametrize("quote", [True, False])
def test_tsv_round_trip_with_and_without_quoting(tmp_path: Path, quote: bool) -> None:
    files = DelimFile()
    path = tmp_path / "recs.tsv.zst"
    files.write(path, RECS, Rec, delimiter="\t", quote=quote)
    assert files.read(path, Rec, delimiter="\t", quote=quote) == RECS


def test_empty_record_list_writes_nothing(tmp_path: Path) -> None:
    files = DelimFile()
    path = tmp_path / "none.csv.gz"
    assert files.write_csv(path, [], Rec) == 0
    assert files.read_csv(path, Rec) == []


def test_headerless_write_and_read(tmp_path: Path) -> None:
    files = DelimFile()
    path = tmp_path / "nohdr.csv"
    files.write(path, [Count("a", 1)], Count, has_header=False)
    assert path.read_text() == "a,1\n"
    assert files.read(path, Count, has_header=False) == [Count("a", 1)]


def test_append_does_not_repeat_header(tmp_path: Path) -> None:
    files = DelimFile()
    path = tmp_path / "log.csv.gz"
    files.write_csv(path, [Count("a", 1)], Count)
    files.write(path, [Count("b", 2)], Count, append=True)
    assert Io().read_lines(path) == ["name,count", "a,1", "b,2"]


def test_strict_read_raises_row_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("name,count\na,1\nb,oops\n")
    with pytest.raises(FieldParseError):
        DelimFile().read_csv(path, Count)


def test_cursor_reader_skips_bad_rows(tmp_path: Path) -> None:
    path = tmp_path / "mixed.tsv"
    path.write_text("name\tcount\na\t1\nb\toops\nc\t3\n")
    with DelimFile().reader(path, Count, DelimiterProfile.tsv()) as reader:
        good = [row.record for row in reader if row.ok]
    assert good == [Count("a", 1), Count("c", 3)]


def test_read_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(IoNotFoundError):
        DelimFile().read_csv(tmp_path / "missing.csv", Count)
    with pytest.raises(IoNotFoundError):
        Io().read_lines(tmp_path / "missing.txt.zst")


@pytest.mark.parametrize("name", ["lines.txt", "lines.txt.gz", "lines.txt.zst"])
def test_lines_round_trip_and_append(tmp_path: Path, name: str) -> None:
    io_ = Io()
    path = tmp_path / name
    io_.write_lines(path, ["alpha", "beta"])
    assert io_.read_lines(path) == ["alpha", "beta"]
    io_.write_lines(path, ["gamma"], append=True)
    assert io_.read_lines(path) == ["alpha", "beta", "gamma"]
    assert io_.read_to_string(path) == "alpha\nbeta\ngamma\n"


def test_read_lines_handles_crlf_and_missing_final_newline(tmp_path: Path) -> None:
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"one\r\ntwo\r\nthree")
    assert Io().read_lines(path) == ["one", "two", "three"]
    assert list(Io().iter_lines(path))[0] == "one"


def test_write_string_and_encoding(tmp_path: Path) -> None:
    path = tmp_path / "latin.txt.gz"
    latin = Io(IoSettings(encoding="latin-1"))
    latin.write_string(path, "café")
    assert gzip.decompress(path.read_bytes()) == "café".encode("latin-1")
    assert latin.read_to_string(path) == "café"
    with pytest.raises(IoError):
        Io().read_to_string(path)


def test_path_predicates() -> None:
    assert Io.is_gzip_path("a.tsv.gz") and not Io.is_gzip_path("a.tsv.GZ")
    assert Io.is_zstd_path("a.zstd")
    assert Io.is_compressed_path("a.gzip") and not Io.is_compressed_path("a.tsv")


def test_invalid_settings_rejected() -> None:
    with pytest.raises(IoConfigError):
        Io(IoSettings(gzip_level=42))


def test_read_frame_uses_field_dtypes(tmp_path: Path) -> None:
    files = DelimFile()
    path = tmp_path / "frame.csv.zst"
    files.write_csv(path, RECS, Rec)

    df = files.read_frame(path, Rec)

    assert df.columns == ["s", "i", "b", "o"]
    assert df.schema["i"] == pl.Int64
    assert df.schema["b"] == pl.Boolean
    assert df.schema["o"] == pl.Float64
    assert df["s"].to_list() == ["A,B,C", "plain", ""]
    assert df["o"].to_list() == [None, 3.25, 0.0]


@pytest.mark.parametrize("name", ["log.csv", "log.csv.gz", "log.csv.zst"])
def test_append_after_empty_write_emits_header(tmp_path: Path, name: str) -> None:
    files = DelimFile()
    path = tmp_path / name
    files.write_csv(path, [], Count)
    files.write(path, [Count("b", 2)], Count, append=True)
    assert Io().read_lines(path) == ["name,count", "b,2"]
    assert files.read_csv(path, Count) == [Count("b", 2)]


def test_iter_lines_open_failure_raises_before_iteration(tmp_path: Path) -> None:
    with pytest.raises(IoNotFoundError):
        Io().iter_lines(tmp_path / "missing.txt.gz")
