"""Chart template catalog and column binding.

Templates are dataset-independent starter sets of charts. Binding a template
to a dataset is a pure, deterministic heuristic:

- x-axis: the first date column, else the first column.
- metrics: the first two numeric columns (fewer when fewer exist).
- group-by: the first text column with fewer than 10 distinct values.

The user may edit every binding afterwards; binding never prompts.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Final

import yaml

from .chart_config import AGGREGATIONS, CHART_KINDS, Aggregation, ChartConfiguration, ChartKind
from .profiler import ColumnDescriptor

DEFAULT_CATALOG_PATH: Final[Path] = Path(__file__).resolve().parent / "data" / "chart_templates.yaml"
LOW_CARDINALITY_LIMIT: Final[int] = 10
MAX_TEMPLATE_METRICS: Final[int] = 2


@dataclass(frozen=True, slots=True)
class TemplateStep:
    """A partial chart spec with no column bindings."""

    kind: ChartKind
    title: str
    aggregation: Aggregation


@dataclass(frozen=True, slots=True)
class ChartTemplate:
    """A named, immutable chart blueprint.

    Args:
        name: Display name.
        description: Short description for the template picker.
        steps: Ordered partial chart specs.
    """

    name: str
    description: str
    steps: tuple[TemplateStep, ...]

    @property
    def slug(self) -> str:
        return slugify(self.name)


def slugify(name: str) -> str:
    """Lowercase a name and collapse whitespace runs into hyphens."""

    return re.sub(r"\s+", "-", name.strip().lower())


def load_chart_templates(path: Path | str = DEFAULT_CATALOG_PATH) -> tuple[ChartTemplate, ...]:
    """Load and validate a template catalog from YAML.

    Args:
        path: Catalog file path.

    Returns:
        Templates in file order.

    Raises:
        ValueError: When a template is missing a name or steps, or a step
            declares an unsupported kind or aggregation.
    """

    payload = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    raw_templates = payload.get("templates") or []
    return tuple(_decode_template(raw, index=idx) for idx, raw in enumerate(raw_templates))


@lru_cache(maxsize=1)
def list_chart_templates() -> tuple[ChartTemplate, ...]:
    """Return the built-in template catalog."""

    return load_chart_templates(DEFAULT_CATALOG_PATH)


def get_chart_template(key: str) -> ChartTemplate | None:
    """Look up a built-in template by slug or display name."""

    wanted = slugify(key)
    for template in list_chart_templates():
        if template.slug == wanted:
            return template
    return None


def bind_template(template: ChartTemplate, columns: Sequence[ColumnDescriptor]) -> list[ChartConfiguration]:
    """Instantiate a template against a dataset's columns.

    Args:
        template: Template to instantiate.
        columns: Column descriptors of the active dataset.

    Returns:
        One ChartConfiguration per template step, with ids
        `<template-slug>-<step index>`.
    """

    x_axis = _first_date_column(columns)
    metrics = [column.name for column in columns if column.inferred_type == "number"][:MAX_TEMPLATE_METRICS]
    group_by = _first_low_cardinality_text_column(columns)

    return [
        ChartConfiguration(
            id=f"{template.slug}-{index}",
            kind=step.kind,
            title=step.title,
            x_axis_column=x_axis,
            y_metric_columns=list(metrics),
            group_by_column=group_by,
            aggregation=step.aggregation,
            filters=[],
        )
        for index, step in enumerate(template.steps)
    ]


instantiate = bind_template


def template_catalog_payload(templates: Sequence[ChartTemplate] | None = None) -> list[dict[str, Any]]:
    """Return a JSON-serializable listing of templates."""

    if templates is None:
        templates = list_chart_templates()
    return [
        {
            "slug": template.slug,
            "name": template.name,
            "description": template.description,
            "steps": [
                {"kind": step.kind, "title": step.title, "aggregation": step.aggregation}
                for step in template.steps
            ],
        }
        for template in templates
    ]


def _first_date_column(columns: Sequence[ColumnDescriptor]) -> str | None:
    for column in columns:
        if column.inferred_type == "date":
            return column.name
    return columns[0].name if columns else None


def _first_low_cardinality_text_column(columns: Sequence[ColumnDescriptor]) -> str | None:
    for column in columns:
        if column.inferred_type == "text" and column.unique_count < LOW_CARDINALITY_LIMIT:
            return column.name
    return None


def _decode_template(raw: Any, *, index: int) -> ChartTemplate:
    """Decode one catalog entry."""

    if not isinstance(raw, dict):
        raise ValueError(f"templates[{index}] must be a mapping.")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise ValueError(f"templates[{index}].name must be a non-empty string.")
    raw_steps = raw.get("steps") or []
    if not raw_steps:
        raise ValueError(f"templates[{index}] ({name!r}) must declare at least one step.")

    steps: list[TemplateStep] = []
    for step_index, step in enumerate(raw_steps):
        if not isinstance(step, dict):
            raise ValueError(f"templates[{index}].steps[{step_index}] must be a mapping.")
        kind = str(step.get("kind") or "")
        aggregation = str(step.get("aggregation") or "sum")
        if kind not in CHART_KINDS:
            raise ValueError(f"templates[{index}].steps[{step_index}] has unsupported kind {kind!r}.")
        if aggregation not in AGGREGATIONS:
            raise ValueError(
                f"templates[{index}].steps[{step_index}] has unsupported aggregation {aggregation!r}."
            )
        steps.append(
            TemplateStep(
                kind=kind,  # type: ignore[arg-type]
                title=str(step.get("title") or name),
                aggregation=aggregation,  # type: ignore[arg-type]
            )
        )

    return ChartTemplate(name=name, description=str(raw.get("description") or ""), steps=tuple(steps))
