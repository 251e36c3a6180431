"""Delimited-text parsing for the Live Dashboard.

The parser turns an uploaded CSV file or pasted spreadsheet text into typed
rows. Guiding rules:

- The first non-blank record is the header; header cells become column names.
- Records whose field count differs from the header are dropped silently.
- Each cell is typed independently in a fixed priority order:
  number, then boolean, then date, then text.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Final

from .errors import ParseError
from .values import BooleanValue, CellValue, DateValue, NumberValue, Row, TextValue

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE: Final[str] = "No data found"

_CANDIDATE_DELIMITERS: Final[tuple[str, ...]] = (",", "\t", ";", "|")
_PREVIEW_RECORDS: Final[int] = 10
_MIN_AVERAGE_FIELDS: Final[float] = 1.99
# csv caps fields at 128 KiB by default; uploads may hold larger quoted cells.
_FIELD_SIZE_LIMIT: Final[int] = 2**31 - 1
_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%b %d, %Y %H:%M",
    "%B %d, %Y %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y-%m",
)


@dataclass(frozen=True, slots=True)
class ParsedDataset:
    """Typed rows parsed from delimited text.

    Attributes:
        columns: Column names in header order.
        rows: Retained data rows; every row has exactly one value per column.
        skipped_rows: Count of data records dropped for a field-count mismatch.
        delimiter: Delimiter used to split records.
    """

    columns: tuple[str, ...]
    rows: tuple[Row, ...]
    skipped_rows: int = 0
    delimiter: str = ","


def parse_tabular_text(raw_text: str) -> ParsedDataset:
    """Parse delimited text into a typed dataset.

    Args:
        raw_text: CSV or tab-separated text, header first.

    Returns:
        ParsedDataset with typed rows.

    Raises:
        ParseError: When the text is malformed, has no header, or yields zero
            data rows.
    """

    delimiter = detect_delimiter(raw_text)
    try:
        records = list(_iter_records(raw_text, delimiter=delimiter))
    except csv.Error as exc:
        raise ParseError(f"CSV parsing error: {exc}") from exc

    if not records or not any(records[0]):
        raise ParseError(NO_DATA_MESSAGE)

    header, *data_records = records
    columns = _unique_column_names(header)

    rows: list[Row] = []
    skipped = 0
    for record in data_records:
        if len(record) != len(columns):
            skipped += 1
            continue
        rows.append({name: infer_cell_value(cell) for name, cell in zip(columns, record)})

    if not rows:
        raise ParseError(NO_DATA_MESSAGE)

    logger.debug(
        "Parsed tabular text: rows=%d columns=%d skipped=%d delimiter=%r",
        len(rows),
        len(columns),
        skipped,
        delimiter,
    )
    return ParsedDataset(columns=columns, rows=tuple(rows), skipped_rows=skipped, delimiter=delimiter)


def parse_rows(raw_text: str) -> tuple[Row, ...]:
    """Parse delimited text and return only the typed rows."""

    return parse_tabular_text(raw_text).rows


def detect_delimiter(raw_text: str) -> str:
    """Guess the delimiter from the first few records.

    Each candidate splits a short preview into records; the candidate whose
    field counts change least from record to record wins, with more fields
    breaking ties. Candidates averaging fewer than two fields are ignored, and
    comma is the fallback for single-column input.
    """

    best = ","
    best_score: tuple[int, float] | None = None
    for candidate in _CANDIDATE_DELIMITERS:
        counts = _preview_field_counts(raw_text, delimiter=candidate)
        if not counts:
            continue
        average = sum(counts) / len(counts)
        if average < _MIN_AVERAGE_FIELDS:
            continue
        delta = sum(abs(current - previous) for previous, current in zip(counts, counts[1:]))
        score = (delta, -average)
        if best_score is None or score < best_score:
            best, best_score = candidate, score
    return best


def infer_cell_value(raw: str) -> CellValue:
    """Infer the typed value of one trimmed cell.

    Priority order is number, boolean, date, text. A bare year such as
    `2024` is therefore a number, never a date.
    """

    number = parse_number(raw)
    if number is not None:
        return NumberValue(number)

    lowered = raw.casefold()
    if lowered in {"true", "false"}:
        return BooleanValue(lowered == "true")

    moment = parse_date(raw)
    if moment is not None:
        return DateValue(moment)

    return TextValue(raw)


def parse_number(raw: str) -> float | None:
    """Parse a plain decimal literal (sign, fraction, exponent) into a float."""

    text = raw.strip()
    if not text or _NUMBER_RE.fullmatch(text) is None:
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def parse_date(raw: str) -> datetime | None:
    """Parse a calendar date/time string into a timezone-aware UTC datetime."""

    value = raw.strip()
    if not value:
        return None

    iso = _try_parse_iso_datetime(value)
    if iso is not None:
        return iso

    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)

    return None


def _try_parse_iso_datetime(value: str) -> datetime | None:
    """Try parsing ISO-8601 date/datetime strings (best-effort)."""

    normalized = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _iter_records(raw_text: str, *, delimiter: str) -> Iterator[list[str]]:
    """Yield trimmed, non-blank records from delimited text."""

    _raise_field_size_limit()
    reader = csv.reader(io.StringIO(raw_text, newline=""), delimiter=delimiter, strict=True)
    for record in reader:
        cells = [cell.strip() for cell in record]
        if not cells or (len(cells) == 1 and not cells[0]):
            continue
        yield cells


def _unique_column_names(header: list[str]) -> tuple[str, ...]:
    """Return header names, suffixing repeats so every column name is unique."""

    seen: dict[str, int] = {}
    names: list[str] = []
    for name in header:
        if name not in seen:
            seen[name] = 1
            names.append(name)
            continue
        seen[name] += 1
        candidate = f"{name} ({seen[name]})"
        while candidate in seen:
            seen[name] += 1
            candidate = f"{name} ({seen[name]})"
        seen[candidate] = 1
        names.append(candidate)
    return tuple(names)


def _preview_field_counts(raw_text: str, *, delimiter: str) -> list[int]:
    """Return the field counts of the first non-blank records for one delimiter."""

    _raise_field_size_limit()
    reader = csv.reader(io.StringIO(raw_text, newline=""), delimiter=delimiter)
    counts: list[int] = []
    try:
        for record in reader:
            if not record or (len(record) == 1 and not record[0].strip()):
                continue
            counts.append(len(record))
            if len(counts) >= _PREVIEW_RECORDS:
                break
    except csv.Error:
        logger.debug("Delimiter %r does not split the preview cleanly", delimiter)
        return []
    return counts


def _raise_field_size_limit() -> None:
    """Lift the csv module's per-field size cap so large quoted cells parse."""

    if csv.field_size_limit() < _FIELD_SIZE_LIMIT:
        csv.field_size_limit(_FIELD_SIZE_LIMIT)
