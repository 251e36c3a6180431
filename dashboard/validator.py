"""Validation for Live Dashboard chart configurations.

Validation is advisory: the engine evaluates any configuration without
raising, so results here only drive UI messages. Errors mark configurations
that will render empty or misbehave; warnings mark ones that render but are
probably not what the user meant.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .chart_config import AGGREGATIONS, CHART_KINDS, FILTER_OPERATORS, ChartConfiguration
from .profiler import ColumnDescriptor, find_column


@dataclass(frozen=True, slots=True)
class ChartConfigurationValidationResult:
    """Validation result for a ChartConfiguration.

    Args:
        is_valid: True when no errors exist.
        errors: Problems that make the chart empty or unusable.
        warnings: Non-fatal issues intended for UI display.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_chart_configuration(
    config: ChartConfiguration,
    columns: Sequence[ColumnDescriptor],
) -> ChartConfigurationValidationResult:
    """Validate a configuration against the active dataset's columns.

    Args:
        config: Configuration to check.
        columns: Column descriptors of the active dataset.

    Returns:
        ChartConfigurationValidationResult with errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []
    label = f"Chart[{config.id}]"

    if not config.id.strip():
        errors.append("Chart id must be a non-empty string.")
    if not config.title.strip():
        errors.append(f"{label} title must be a non-empty string.")
    if config.kind not in CHART_KINDS:
        errors.append(f"{label} kind is not a supported value: {config.kind!r}.")
    if config.aggregation not in AGGREGATIONS:
        errors.append(f"{label} aggregation is not a supported value: {config.aggregation!r}.")

    for name in config.referenced_columns():
        if find_column(columns, name) is None:
            errors.append(f"{label} references unknown column {name!r}.")

    if not config.y_metric_columns:
        warnings.append(f"{label} has no metric columns; it will render without data.")
    for name in config.y_metric_columns:
        column = find_column(columns, name)
        if column is not None and column.inferred_type != "number" and config.aggregation != "count":
            warnings.append(
                f"{label} metric {name!r} is {column.inferred_type}, not number; its values aggregate as 0."
            )

    if config.kind == "pie" and len(config.y_metric_columns) > 1:
        warnings.append(f"{label} pie charts show one ring per metric; consider a single metric.")

    for idx, predicate in enumerate(config.filters):
        if predicate.operator not in FILTER_OPERATORS:
            errors.append(f"{label}.filters[{idx}] operator is not supported: {predicate.operator!r}.")
        if predicate.operator == "between" and (
            not isinstance(predicate.value, (tuple, list)) or len(predicate.value) != 2
        ):
            errors.append(f"{label}.filters[{idx}] 'between' requires a (low, high) pair.")

    return ChartConfigurationValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
