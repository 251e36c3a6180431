"""Upload and paste intake for the Live Dashboard.

Uploads are checked for size and extension before any bytes are read or
parsed, so an oversized or unsupported file never produces rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePath
from typing import Final

from .errors import FileTooLargeError, ParseError, UnsupportedFormatError
from .parser import ParsedDataset, parse_tabular_text

MAX_UPLOAD_BYTES: Final[int] = 5 * 1024 * 1024
ALLOWED_EXTENSIONS: Final[tuple[str, ...]] = (".csv",)
SPREADSHEET_EXTENSIONS: Final[tuple[str, ...]] = (".xlsx", ".xls")

EMPTY_PASTE_MESSAGE: Final[str] = "Please paste some data"
SPREADSHEET_MESSAGE: Final[str] = (
    "Excel files are not supported. Please convert to CSV format and upload the .csv file."
)


def file_extension(filename: str) -> str:
    """Return the lowercased extension of `filename` including the dot."""

    _, dot, extension = PurePath(filename).name.rpartition(".")
    return f".{extension.lower()}" if dot else ""


def check_upload(
    filename: str,
    size_bytes: int,
    *,
    allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Reject uploads that are too large or not an accepted format.

    Args:
        filename: Name of the selected file.
        size_bytes: File size as reported before reading.
        allowed_extensions: Accepted extensions, dot included.
        max_bytes: Size cap in bytes.

    Raises:
        FileTooLargeError: When the file exceeds `max_bytes`.
        UnsupportedFormatError: When the extension is not accepted.
    """

    if size_bytes > max_bytes:
        raise FileTooLargeError(f"File size must be less than {_format_megabytes(max_bytes)}")

    extension = file_extension(filename)
    allowed = {ext.lower() for ext in allowed_extensions}
    if extension in SPREADSHEET_EXTENSIONS and extension not in allowed:
        raise UnsupportedFormatError(SPREADSHEET_MESSAGE)
    if extension not in allowed:
        listed = ", ".join(sorted(allowed))
        raise UnsupportedFormatError(f"Only {listed} files are supported")


def decode_upload(payload: bytes) -> str:
    """Decode uploaded bytes as UTF-8 text (a leading BOM is dropped).

    Raises:
        ParseError: When the bytes are not valid UTF-8.
    """

    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError("Failed to parse file: the file is not UTF-8 encoded text") from exc


def parse_upload(
    filename: str,
    payload: bytes,
    *,
    allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> ParsedDataset:
    """Validate, decode and parse an uploaded file."""

    check_upload(filename, len(payload), allowed_extensions=allowed_extensions, max_bytes=max_bytes)
    return parse_tabular_text(decode_upload(payload))


def parse_pasted_text(text: str) -> ParsedDataset:
    """Parse text pasted into the data box.

    Raises:
        ParseError: When the paste is blank or yields no rows.
    """

    if not text.strip():
        raise ParseError(EMPTY_PASTE_MESSAGE)
    return parse_tabular_text(text)


def _format_megabytes(size_bytes: int) -> str:
    megabytes = size_bytes / (1024 * 1024)
    if megabytes.is_integer():
        return f"{int(megabytes)}MB"
    return f"{megabytes:.1f}MB"
