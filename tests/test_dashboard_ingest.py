"""Unit tests for upload and paste intake."""

from __future__ import annotations

import pytest

from dashboard import ingest
from dashboard.errors import FileTooLargeError, ParseError, UnsupportedFormatError
from dashboard.ingest import MAX_UPLOAD_BYTES, check_upload, parse_pasted_text, parse_upload

pytestmark = pytest.mark.unit


def test_oversized_upload_is_rejected_before_parsing(monkeypatch) -> None:
    """A 6 MB file never reaches the parser."""

    def fail_parse(_text: str):  # pragma: no cover - must not be called
        raise AssertionError("parser must not run")

    monkeypatch.setattr(ingest, "parse_tabular_text", fail_parse)
    payload = b"a,b\n" + b"1,2\n" * (6 * 1024 * 1024 // 4)

    with pytest.raises(FileTooLargeError) as excinfo:
        parse_upload("big.csv", payload)
    assert excinfo.value.message == "File size must be less than 5MB"


def test_spreadsheet_upload_asks_for_csv_conversion() -> None:
    """Excel files are rejected with a convert-to-CSV message."""

    with pytest.raises(UnsupportedFormatError) as excinfo:
        parse_upload("report.xlsx", b"PK\x03\x04")
    assert "convert to CSV" in excinfo.value.message


def test_other_extensions_are_rejected() -> None:
    """Only .csv files are accepted by default."""

    with pytest.raises(UnsupportedFormatError, match=r"Only \.csv files are supported"):
        check_upload("notes.txt", 10)


def test_extension_check_is_case_insensitive() -> None:
    """Upper-case extensions are accepted."""

    check_upload("DATA.CSV", 10)


def test_size_limit_is_inclusive() -> None:
    """A file of exactly the cap is accepted."""

    check_upload("data.csv", MAX_UPLOAD_BYTES)


def test_allowed_extensions_are_configurable() -> None:
    """Callers may widen the accepted formats."""

    check_upload("data.tsv", 10, allowed_extensions=(".csv", ".tsv"))


def test_parse_upload_strips_utf8_bom() -> None:
    """A UTF-8 byte-order mark does not leak into the first column name."""

    parsed = parse_upload("data.csv", "\ufeffname,score\nAda,1\n".encode("utf-8"))
    assert parsed.columns == ("name", "score")


def test_parse_upload_rejects_non_utf8_bytes() -> None:
    """Undecodable files surface as a parse error."""

    with pytest.raises(ParseError):
        parse_upload("data.csv", b"name\n\xff\xfe\n")


def test_blank_paste_is_rejected() -> None:
    """Pasting only whitespace asks the user to paste data."""

    with pytest.raises(ParseError) as excinfo:
        parse_pasted_text("  \n ")
    assert excinfo.value.message == "Please paste some data"


def test_bare_extension_file_name_is_accepted() -> None:
    """A file named just `.csv` still carries the csv extension."""

    check_upload(".csv", 10)
    assert ingest.file_extension(".csv") == ".csv"
    assert ingest.file_extension("README") == ""


def test_parse_upload_accepts_large_quoted_cell() -> None:
    """Cells larger than the csv module's default cap parse when under the size limit."""

    parsed = parse_upload("big.csv", b'note,v\n"' + b"x" * 200_000 + b'",1\n')

    assert len(parsed.rows[0]["note"].display()) == 200_000
