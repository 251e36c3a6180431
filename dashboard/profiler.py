"""Column profiling for parsed Live Dashboard datasets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from .values import CellValue, NumberValue, Row, ValueType

SAMPLE_VALUE_LIMIT: Final[int] = 10


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Derived type and statistics for one dataset column.

    Args:
        name: Column name as it appears in row keys.
        inferred_type: `number`/`boolean`/`date` when every non-empty value has
            that type, otherwise `text`.
        sample_values: First distinct values in first-seen order (capped).
        unique_count: Number of distinct values in the column.
        min: Minimum across all numeric values (numeric columns only).
        max: Maximum across all numeric values (numeric columns only).
    """

    name: str
    inferred_type: ValueType
    sample_values: tuple[CellValue, ...]
    unique_count: int
    min: float | None = None
    max: float | None = None


def profile_columns(rows: Sequence[Row]) -> tuple[ColumnDescriptor, ...]:
    """Profile every column present in the first row.

    Args:
        rows: Parsed rows sharing one key set.

    Returns:
        One ColumnDescriptor per column, in column order. Empty input yields
        an empty tuple.
    """

    if not rows:
        return ()
    return tuple(profile_column(rows, name) for name in rows[0])


def profile_column(rows: Sequence[Row], name: str) -> ColumnDescriptor:
    """Profile a single column across all rows."""

    values = [row[name] for row in rows if row.get(name) is not None]
    distinct = list(dict.fromkeys(values))
    inferred = _classify(values)

    minimum = maximum = None
    if inferred == "number":
        numbers = [value.number for value in values if isinstance(value, NumberValue)]
        if numbers:
            minimum, maximum = min(numbers), max(numbers)

    return ColumnDescriptor(
        name=name,
        inferred_type=inferred,
        sample_values=tuple(distinct[:SAMPLE_VALUE_LIMIT]),
        unique_count=len(distinct),
        min=minimum,
        max=maximum,
    )


def find_column(columns: Sequence[ColumnDescriptor], name: str | None) -> ColumnDescriptor | None:
    """Return the descriptor for `name`, or None when absent."""

    if name is None:
        return None
    for column in columns:
        if column.name == name:
            return column
    return None


def _classify(values: Sequence[CellValue]) -> ValueType:
    """Return the single shared type of the non-empty values, else text."""

    types = {value.value_type for value in values if not value.is_empty()}
    if len(types) == 1:
        (only,) = types
        return only
    return "text"
