"""Chart configuration schema for the Live Dashboard.

A chart configuration binds dataset columns to one chart: which column feeds
the x-axis, which numeric columns become series, how values are aggregated,
and which row filters apply. Configurations are user-editable, so unlike the
other engine types they are mutable; copies must be made with
`copy.deepcopy` (see `ChartWorkingSet.duplicate`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Literal, TypeAlias

ChartKind = Literal["line", "bar", "stacked_bar", "area", "pie", "scatter", "table"]
Aggregation = Literal["sum", "average", "count", "min", "max"]
FilterOperator = Literal["equals", "contains", "gt", "lt", "between"]

FilterValue: TypeAlias = str | float | tuple[float | str, float | str]

CHART_KINDS: Final[tuple[str, ...]] = ("line", "bar", "stacked_bar", "area", "pie", "scatter", "table")
AGGREGATIONS: Final[tuple[str, ...]] = ("sum", "average", "count", "min", "max")
FILTER_OPERATORS: Final[tuple[str, ...]] = ("equals", "contains", "gt", "lt", "between")


@dataclass(frozen=True, slots=True)
class FilterPredicate:
    """One row predicate applied before aggregation.

    Args:
        column: Column the predicate reads.
        operator: Comparison operator.
        value: Comparison operand. `between` expects an inclusive
            `(low, high)` pair.
    """

    column: str
    operator: FilterOperator
    value: FilterValue


@dataclass(slots=True)
class ChartConfiguration:
    """Editable specification of one chart's data bindings.

    Args:
        id: Identifier unique within the working set.
        kind: Visualization type.
        title: Chart title.
        x_axis_column: Category column; the dataset's first column when None.
        y_metric_columns: Ordered metric columns, one series each.
        group_by_column: Optional low-cardinality categorical column.
        aggregation: Reduction applied per category and metric.
        filters: Predicates AND-ed over rows before aggregation.
    """

    id: str
    kind: ChartKind
    title: str
    x_axis_column: str | None = None
    y_metric_columns: list[str] = field(default_factory=list)
    group_by_column: str | None = None
    aggregation: Aggregation = "sum"
    filters: list[FilterPredicate] = field(default_factory=list)

    def referenced_columns(self) -> tuple[str, ...]:
        """Return every column name the configuration depends on, de-duplicated."""

        names: list[str] = []
        if self.x_axis_column is not None:
            names.append(self.x_axis_column)
        names.extend(self.y_metric_columns)
        if self.group_by_column is not None:
            names.append(self.group_by_column)
        names.extend(predicate.column for predicate in self.filters)
        return tuple(dict.fromkeys(names))
