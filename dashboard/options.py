"""Renderer payloads for evaluated Live Dashboard charts.

Two shapes are produced from a ChartSpecification:

- `chart_spec_payload`: the plain `{title, categories, series}` contract.
- `build_chart_options`: ECharts-style options for the browser renderer.
"""

from __future__ import annotations

from typing import Any, TypedDict

from .engine import ChartSpecification


class SeriesPayload(TypedDict):
    """One series in the plain chart specification payload."""

    name: str
    type: str
    data: list[float]


class ChartSpecPayload(TypedDict):
    """The plain chart specification payload."""

    title: str
    categories: list[str]
    series: list[SeriesPayload]


STACK_KEY = "total"


def chart_spec_payload(spec: ChartSpecification) -> ChartSpecPayload:
    """Return the `{title, categories, series}` payload for a specification."""

    return {
        "title": spec.title,
        "categories": list(spec.categories),
        "series": [{"name": s.name, "type": s.type, "data": list(s.data)} for s in spec.series],
    }


def build_chart_options(spec: ChartSpecification) -> dict[str, Any]:
    """Synthesize renderer options for a chart specification.

    Args:
        spec: Evaluated chart specification.

    Returns:
        JSON-serializable options. `pie` charts carry name/value pairs and no
        axes; `table` charts carry `columns`/`rows` instead of series.
    """

    title = {"text": spec.title, "left": "center"}
    metric_names = [series.name for series in spec.series]

    if spec.kind == "table":
        return {
            "title": title,
            "columns": ["category", *metric_names],
            "rows": [
                [category, *(series.data[idx] for series in spec.series)]
                for idx, category in enumerate(spec.categories)
            ],
        }

    if spec.kind == "pie":
        return {
            "title": title,
            "tooltip": {"trigger": "item"},
            "legend": {"data": list(spec.categories), "bottom": 0},
            "series": [
                {
                    "name": series.name,
                    "type": "pie",
                    "radius": _pie_radius(idx, len(spec.series)),
                    "data": [
                        {"name": category, "value": value}
                        for category, value in zip(spec.categories, series.data)
                    ],
                }
                for idx, series in enumerate(spec.series)
            ],
        }

    series_options: list[dict[str, Any]] = []
    for series in spec.series:
        option: dict[str, Any] = {"name": series.name, "type": series.type, "data": list(series.data)}
        if spec.kind == "area":
            option["areaStyle"] = {}
        if spec.kind == "stacked_bar":
            option["stack"] = STACK_KEY
        series_options.append(option)

    return {
        "title": title,
        "tooltip": {"trigger": "axis"},
        "legend": {"data": metric_names, "bottom": 0},
        "xAxis": {"type": "category", "data": list(spec.categories)},
        "yAxis": {"type": "value"},
        "series": series_options,
    }


def _pie_radius(index: int, total: int) -> str | list[str]:
    """Nest multiple pie series as concentric rings."""

    if total <= 1:
        return "60%"
    step = 70 // total
    inner = index * step
    return [f"{inner}%", f"{inner + step - 5}%"]
