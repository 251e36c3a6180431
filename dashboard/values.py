"""Tagged cell values for Live Dashboard rows.

Rows produced by the parser hold exactly one of four immutable value types.
Downstream code dispatches on the value type instead of guessing at runtime
types, and relies on two coercions:

- `display()` is the string form used for categories and equality filters.
- `as_number()` is the numeric form used for aggregation (non-numeric cells
  coerce to 0).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Literal, TypeAlias

ValueType = Literal["text", "number", "boolean", "date"]


@dataclass(frozen=True, slots=True)
class TextValue:
    """A free-text cell (including the empty string)."""

    text: str

    @property
    def value_type(self) -> ValueType:
        return "text"

    def display(self) -> str:
        return self.text

    def as_number(self) -> float:
        return 0.0

    def is_empty(self) -> bool:
        return self.text == ""


@dataclass(frozen=True, slots=True)
class NumberValue:
    """A finite numeric cell."""

    number: float

    @property
    def value_type(self) -> ValueType:
        return "number"

    def display(self) -> str:
        return format_number(self.number)

    def as_number(self) -> float:
        return self.number

    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class BooleanValue:
    """A `true`/`false` cell."""

    flag: bool

    @property
    def value_type(self) -> ValueType:
        return "boolean"

    def display(self) -> str:
        return "true" if self.flag else "false"

    def as_number(self) -> float:
        return 1.0 if self.flag else 0.0

    def is_empty(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class DateValue:
    """A calendar date/time cell stored as a timezone-aware UTC datetime."""

    moment: datetime

    @property
    def value_type(self) -> ValueType:
        return "date"

    def display(self) -> str:
        if self.moment.time() == time(0, 0):
            return self.moment.date().isoformat()
        return self.moment.isoformat()

    def as_number(self) -> float:
        return epoch_millis(self.moment)

    def is_empty(self) -> bool:
        return False


CellValue: TypeAlias = TextValue | NumberValue | BooleanValue | DateValue
Row: TypeAlias = Mapping[str, CellValue]

EMPTY_TEXT = TextValue("")


def format_number(number: float) -> str:
    """Format a float the way a chart category label should read.

    Integral values render without a fractional part (`10`, not `10.0`).
    """

    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


def epoch_millis(moment: datetime) -> float:
    """Return milliseconds since the Unix epoch for a datetime (naive = UTC)."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp() * 1000.0


def numeric_or_zero(value: CellValue | None) -> float:
    """Coerce a possibly-missing cell to a number, treating missing as 0."""

    if value is None:
        return 0.0
    number = value.as_number()
    if math.isnan(number):
        return 0.0
    return number
