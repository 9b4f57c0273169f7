from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

import pytest

from delimio.core.dialect import DelimiterProfile
from delimio.core.errors import (
    ColumnCountMismatch,
    FieldParseError,
    HeaderMismatchError,
    RecordBuildError,
    RecordIoError,
)
from delimio.io.reader import RecordReader


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


def _reader(text: str | bytes, record=Count, profile: DelimiterProfile | None = None) -> RecordReader:
    data = text.encode("utf-8") if isinstance(text, str) else text
    return RecordReader(io.BytesIO(data), record, profile)


def test_reads_typed_records_in_order() -> None:
    with _reader("name\tcount\na\t1\nb\t2\n", profile=DelimiterProfile.tsv()) as reader:
        rows = list(reader)
    assert [r.record for r in rows] == [Count("a", 1), Count("b", 2)]
    assert [r.index for r in rows] == [0, 1]
    assert reader.header == ["name", "count"]


def test_column_count_mismatch_does_not_end_the_stream() -> None:
    reader = _reader("name,count\na,1\nb,2,extra\nc,3\n")
    first = reader.advance()
    second = reader.advance()
    third = reader.advance()
    assert first is not None and first.ok
    assert second is not None and not second.ok
    assert isinstance(second.error, ColumnCountMismatch)
    assert (second.error.row, second.error.expected, second.error.actual) == (1, 2, 3)
    assert third is not None and third.record == Count("c", 3)
    assert reader.advance() is None
    assert reader.advance() is None
    reader.close()


@pytest.mark.parametrize("profile", [DelimiterProfile.csv(), DelimiterProfile.csv(has_header=False)])
def test_short_row_is_a_column_count_mismatch(profile: DelimiterProfile) -> None:
    header = "name,count\n" if profile.has_header else ""
    with _reader(header + "a,1\nb\nc,3\n", profile=profile) as reader:
        rows = list(reader)
    assert [r.ok for r in rows] == [True, False, True]
    err = rows[1].error
    assert isinstance(err, ColumnCountMismatch)
    assert (err.row, err.expected, err.actual) == (1, 2, 1)
    assert rows[2].record == Count("c", 3)


def test_headerless_long_row_uses_schema_width() -> None:
    with _reader("a,1,x\nb,2\n", profile=DelimiterProfile.csv(has_header=False)) as reader:
        rows = list(reader)
    assert isinstance(rows[0].error, ColumnCountMismatch)
    assert (rows[0].error.expected, rows[0].error.actual) == (2, 3)
    assert rows[1].record == Count("b", 2)


def test_field_parse_error_reports_context() -> None:
    with _reader("name,count\na,one\n") as reader:
        (row,) = list(reader)
    err = row.error
    assert isinstance(err, FieldParseError)
    assert (err.row, err.field, err.token) == (0, "count", "one")
    assert "int" in err.expected
    with pytest.raises(FieldParseError):
        row.unwrap()


def test_header_missing_required_column_fails_eagerly() -> None:
    with pytest.raises(HeaderMismatchError) as info:
        _reader("name,total\na,1\n")
    assert info.value.missing == ["count"]


def test_header_maps_by_name_and_ignores_extra_columns() -> None:
    with _reader("extra,count,name\nz,7,x\n") as reader:
        assert reader.read_all() == [Count("x", 7)]


def test_optional_field_may_be_absent_from_header() -> None:
    with _reader("s,i,b\nhi,1,true\n", record=Rec) as reader:
        assert reader.read_all() == [Rec("hi", 1, True, None)]


def test_headerless_maps_positionally() -> None:
    with _reader("a,1\nb,2\n", profile=DelimiterProfile.csv(has_header=False)) as reader:
        assert reader.read_all() == [Count("a", 1), Count("b", 2)]
        assert reader.header is None


def test_quoted_fields_and_empty_optionals() -> None:
    text = 's,i,b,o\n"A,B,C",-3,false,\nplain,4,true,2.5\n'
    with _reader(text, record=Rec) as reader:
        assert reader.read_all() == [Rec("A,B,C", -3, False, None), Rec("plain", 4, True, 2.5)]


def test_blank_lines_are_skipped() -> None:
    with _reader("name,count\n\na,1\n\n\nb,2\n") as reader:
        rows = list(reader)
    assert [r.index for r in rows] == [0, 1]
    assert all(r.ok for r in rows)


def test_empty_input_yields_nothing() -> None:
    with _reader("") as reader:
        assert reader.advance() is None
        assert reader.exhausted


def test_build_error_is_reported_per_row() -> None:
    @dataclass
    class Positive:
        n: int

        def __post_init__(self) -> None:
            if self.n <= 0:
                raise ValueError("n must be positive")

    with _reader("n\n1\n0\n2\n", record=Positive) as reader:
        rows = list(reader)
    assert [r.ok for r in rows] == [True, False, True]
    assert isinstance(rows[1].error, RecordBuildError)


def test_undecodable_bytes_end_the_stream() -> None:
    good = b"a,1\n" * 5000
    with _reader(b"name,count\n" + good + b"\xff\xfe,2\nc,3\n") as reader:
        rows = list(reader)
    assert all(r.ok for r in rows[:-1])
    assert rows[-1].ok is False
    assert isinstance(rows[-1].error, RecordIoError)
    assert reader.exhausted
    assert reader.advance() is None


def test_records_raises_first_error() -> None:
    with _reader("name,count\na,1\nb,x\n") as reader:
        it = reader.records()
        assert next(it) == Count("a", 1)
        with pytest.raises(FieldParseError):
            next(it)
