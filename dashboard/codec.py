"""JSON encoding/decoding helpers for Live Dashboard session snapshots.

Cell values are stored tagged (`{"type": ..., "value": ...}`) so a restored
dataset is identical to the one that was saved, not re-inferred from text.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, cast

from .chart_config import ChartConfiguration, FilterPredicate
from .profiler import ColumnDescriptor
from .values import BooleanValue, CellValue, DateValue, NumberValue, Row, TextValue


def encode_value(value: CellValue) -> dict[str, Any]:
    """Encode a tagged cell value."""

    if isinstance(value, NumberValue):
        return {"type": "number", "value": value.number}
    if isinstance(value, BooleanValue):
        return {"type": "boolean", "value": value.flag}
    if isinstance(value, DateValue):
        return {"type": "date", "value": value.moment.isoformat()}
    return {"type": "text", "value": value.text}


def decode_value(payload: dict[str, Any]) -> CellValue:
    """Decode a tagged cell value.

    Raises:
        ValueError: When the tag is unknown or the value is malformed.
    """

    kind = payload.get("type")
    raw = payload.get("value")
    if kind == "number":
        return NumberValue(float(raw))  # type: ignore[arg-type]
    if kind == "boolean":
        return BooleanValue(bool(raw))
    if kind == "date":
        moment = datetime.fromisoformat(str(raw))
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return DateValue(moment)
    if kind == "text":
        return TextValue("" if raw is None else str(raw))
    raise ValueError(f"Unknown cell value type: {kind!r}.")


def encode_rows(rows: Sequence[Row]) -> list[dict[str, Any]]:
    """Encode rows into JSON-serializable dictionaries (key order kept)."""

    return [{name: encode_value(value) for name, value in row.items()} for row in rows]


def decode_rows(payload: Sequence[dict[str, Any]]) -> tuple[Row, ...]:
    """Decode rows previously produced by `encode_rows`."""

    return tuple({name: decode_value(value) for name, value in row.items()} for row in payload)


def encode_columns(columns: Sequence[ColumnDescriptor]) -> list[dict[str, Any]]:
    """Encode column descriptors."""

    return [
        {
            "name": column.name,
            "inferred_type": column.inferred_type,
            "sample_values": [encode_value(value) for value in column.sample_values],
            "unique_count": column.unique_count,
            "min": column.min,
            "max": column.max,
        }
        for column in columns
    ]


def decode_columns(payload: Sequence[dict[str, Any]]) -> tuple[ColumnDescriptor, ...]:
    """Decode column descriptors previously produced by `encode_columns`."""

    return tuple(
        ColumnDescriptor(
            name=str(raw["name"]),
            inferred_type=raw.get("inferred_type") or "text",
            sample_values=tuple(decode_value(value) for value in raw.get("sample_values") or ()),
            unique_count=int(raw.get("unique_count") or 0),
            min=_parse_float(raw.get("min")),
            max=_parse_float(raw.get("max")),
        )
        for raw in payload
    )


def encode_chart_configuration(config: ChartConfiguration) -> dict[str, Any]:
    """Encode a chart configuration."""

    return {
        "id": config.id,
        "kind": config.kind,
        "title": config.title,
        "x_axis_column": config.x_axis_column,
        "y_metric_columns": list(config.y_metric_columns),
        "group_by_column": config.group_by_column,
        "aggregation": config.aggregation,
        "filters": [
            {
                "column": predicate.column,
                "operator": predicate.operator,
                "value": list(predicate.value) if isinstance(predicate.value, tuple) else predicate.value,
            }
            for predicate in config.filters
        ],
    }


def decode_chart_configuration(payload: dict[str, Any]) -> ChartConfiguration:
    """Decode a chart configuration previously produced by `encode_chart_configuration`."""

    filters = []
    for raw in cast(list[dict[str, Any]], payload.get("filters") or []):
        value = raw.get("value")
        if isinstance(value, list):
            value = tuple(value)
        filters.append(FilterPredicate(column=str(raw["column"]), operator=raw["operator"], value=value))

    return ChartConfiguration(
        id=str(payload["id"]),
        kind=payload.get("kind") or "bar",
        title=str(payload.get("title") or ""),
        x_axis_column=payload.get("x_axis_column"),
        y_metric_columns=[str(name) for name in payload.get("y_metric_columns") or []],
        group_by_column=payload.get("group_by_column"),
        aggregation=payload.get("aggregation") or "sum",
        filters=filters,
    )


def _parse_float(value: object) -> float | None:
    """Best-effort float parsing for snapshot payloads."""

    if value is None or value == "":
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
