"""Filter and aggregation engine for Live Dashboard charts.

`evaluate_chart` turns one ChartConfiguration plus the dataset rows into a
render-ready ChartSpecification. It never raises for configuration problems:
missing columns, empty metric lists and empty value sets all degrade to
well-defined empty or zero results so charts that are mid-edit still render.

Metric values are coerced to numbers before aggregation and anything
non-numeric (or missing) counts as 0. A text column picked as a metric
therefore aggregates to 0 instead of failing; `validator` surfaces a warning
for that case.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .chart_config import ChartConfiguration, FilterPredicate, FilterValue
from .parser import parse_date, parse_number
from .values import NumberValue, Row, epoch_millis, format_number, numeric_or_zero

logger = logging.getLogger(__name__)

_SERIES_TYPE_BY_KIND = {"area": "line", "stacked_bar": "bar"}


@dataclass(frozen=True, slots=True)
class ChartSeries:
    """One aggregated series aligned to `ChartSpecification.categories`."""

    name: str
    type: str
    data: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class ChartSpecification:
    """Evaluated chart output consumed by the renderer.

    Args:
        chart_id: Id of the configuration that produced this output.
        title: Chart title.
        kind: Configured chart kind.
        categories: Distinct x-axis values in first-seen order.
        series: One series per metric column.
        missing_columns: Referenced columns absent from the dataset. When
            non-empty, `categories` and `series` are empty.
    """

    chart_id: str
    title: str
    kind: str
    categories: tuple[str, ...]
    series: tuple[ChartSeries, ...]
    missing_columns: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.categories or not self.series


def evaluate_chart(config: ChartConfiguration, rows: Sequence[Row]) -> ChartSpecification:
    """Evaluate a chart configuration against dataset rows.

    Args:
        config: Chart configuration to evaluate.
        rows: Dataset rows (all sharing one key set).

    Returns:
        ChartSpecification with one series per metric column.
    """

    dataset_columns = tuple(rows[0]) if rows else ()
    if rows:
        missing = tuple(name for name in config.referenced_columns() if name not in rows[0])
        if missing:
            logger.debug("Chart %s references missing columns: %s", config.id, missing)
            return _empty_spec(config, missing_columns=missing)

    x_column = config.x_axis_column
    if x_column is None:
        x_column = dataset_columns[0] if dataset_columns else None
    filtered = apply_filters(rows, config.filters)

    buckets: dict[str, list[Row]] = {}
    if x_column is not None:
        for row in filtered:
            buckets.setdefault(row[x_column].display(), []).append(row)

    series_type = series_type_for(config.kind)
    series = tuple(
        ChartSeries(
            name=metric,
            type=series_type,
            data=tuple(
                aggregate([numeric_or_zero(row.get(metric)) for row in bucket], config.aggregation)
                for bucket in buckets.values()
            ),
        )
        for metric in config.y_metric_columns
    )
    return ChartSpecification(
        chart_id=config.id,
        title=config.title,
        kind=config.kind,
        categories=tuple(buckets),
        series=series,
    )


def evaluate_working_set(configs: Iterable[ChartConfiguration], rows: Sequence[Row]) -> list[ChartSpecification]:
    """Evaluate every configuration of a working set, in order."""

    return [evaluate_chart(config, rows) for config in configs]


def aggregate(values: Sequence[float], aggregation: str) -> float:
    """Reduce values with an aggregation function.

    Empty inputs yield 0 for every aggregation; unknown aggregation names fall
    back to `sum`.
    """

    if aggregation == "count":
        return float(len(values))
    if not values:
        return 0.0
    if aggregation == "average":
        return sum(values) / len(values)
    if aggregation == "min":
        return min(values)
    if aggregation == "max":
        return max(values)
    return float(sum(values))


def apply_filters(rows: Iterable[Row], filters: Sequence[FilterPredicate]) -> list[Row]:
    """Return rows matching every predicate (all rows when there are none)."""

    if not filters:
        return list(rows)
    return [row for row in rows if all(row_matches(row, predicate) for predicate in filters)]


def row_matches(row: Row, predicate: FilterPredicate) -> bool:
    """Evaluate one predicate against one row.

    Unsupported operators, missing cells and unusable operands match nothing.
    """

    cell = row.get(predicate.column)
    if cell is None:
        return False

    operator = predicate.operator
    if operator == "equals":
        bound = _operand_number(predicate.value)
        if isinstance(cell, NumberValue) and bound is not None:
            return cell.number == bound
        return cell.display() == _operand_text(predicate.value)
    if operator == "contains":
        return _operand_text(predicate.value).casefold() in cell.display().casefold()
    if operator in {"gt", "lt"}:
        bound = _operand_number(predicate.value)
        if bound is None:
            return False
        number = numeric_or_zero(cell)
        return number > bound if operator == "gt" else number < bound
    if operator == "between":
        bounds = _operand_range(predicate.value)
        if bounds is None:
            return False
        low, high = bounds
        return low <= numeric_or_zero(cell) <= high
    return False


def series_type_for(kind: str) -> str:
    """Map a chart kind to the renderer series type."""

    return _SERIES_TYPE_BY_KIND.get(kind, kind)


def _empty_spec(config: ChartConfiguration, *, missing_columns: tuple[str, ...]) -> ChartSpecification:
    return ChartSpecification(
        chart_id=config.id,
        title=config.title,
        kind=config.kind,
        categories=(),
        series=(),
        missing_columns=missing_columns,
    )


def _operand_text(value: FilterValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(float(value))
    return str(value).strip()


def _operand_number(value: object) -> float | None:
    """Coerce a filter operand to a number; date-like strings become epoch ms."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    number = parse_number(value)
    if number is not None:
        return number
    moment = parse_date(value)
    if moment is not None:
        return epoch_millis(moment)
    return None


def _operand_range(value: FilterValue) -> tuple[float, float] | None:
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        return None
    low, high = (_operand_number(item) for item in value)
    if low is None or high is None:
        return None
    return low, high
