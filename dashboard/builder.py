"""Working set of chart configurations for one Live Dashboard session.

The working set owns id uniqueness: ids handed out here never collide with a
configuration currently in the set, and duplicate ids are never reused for
the lifetime of the working set.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import fields
from itertools import count
from typing import Any

from .chart_config import Aggregation, ChartConfiguration, ChartKind, FilterPredicate

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset(f.name for f in fields(ChartConfiguration)) - {"id"}


class ChartWorkingSet:
    """Ordered, id-unique collection of user-editable chart configurations."""

    def __init__(self, configs: Iterable[ChartConfiguration] = ()) -> None:
        self._charts: list[ChartConfiguration] = []
        self._counter = count(1)
        self.extend(configs)

    def __iter__(self) -> Iterator[ChartConfiguration]:
        return iter(list(self._charts))

    def __len__(self) -> int:
        return len(self._charts)

    def __contains__(self, chart_id: object) -> bool:
        return any(chart.id == chart_id for chart in self._charts)

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(chart.id for chart in self._charts)

    def get(self, chart_id: str) -> ChartConfiguration | None:
        """Return the configuration with `chart_id`, or None."""

        for chart in self._charts:
            if chart.id == chart_id:
                return chart
        return None

    def create(
        self,
        *,
        kind: ChartKind,
        title: str,
        y_metric_columns: Sequence[str] = (),
        x_axis_column: str | None = None,
        group_by_column: str | None = None,
        aggregation: Aggregation = "sum",
        filters: Sequence[FilterPredicate] = (),
    ) -> ChartConfiguration:
        """Create a configuration from scratch and append it.

        Returns:
            The stored configuration, with a generated `chart-<n>` id.
        """

        chart = ChartConfiguration(
            id=self._next_id("chart"),
            kind=kind,
            title=title,
            x_axis_column=x_axis_column,
            y_metric_columns=list(y_metric_columns),
            group_by_column=group_by_column,
            aggregation=aggregation,
            filters=list(filters),
        )
        self._charts.append(chart)
        logger.debug("Created chart %s (%s)", chart.id, chart.kind)
        return chart

    def add(self, config: ChartConfiguration) -> ChartConfiguration:
        """Append a configuration, renaming it when its id is already taken.

        Returns:
            The stored configuration (the same object, possibly re-identified).
        """

        if config.id in self:
            original = config.id
            config.id = self._next_id(original)
            logger.debug("Renamed colliding chart id %s -> %s", original, config.id)
        self._charts.append(config)
        return config

    def extend(self, configs: Iterable[ChartConfiguration]) -> list[ChartConfiguration]:
        """Append several configurations (e.g. template output) in order."""

        return [self.add(config) for config in configs]

    def duplicate(self, chart_id: str) -> ChartConfiguration:
        """Deep-copy a configuration under a fresh id, placed after the original.

        Raises:
            KeyError: When `chart_id` is not in the working set.
        """

        original = self.get(chart_id)
        if original is None:
            raise KeyError(chart_id)

        clone = copy.deepcopy(original)
        clone.id = self._next_id(f"{original.id}-copy")
        position = self._charts.index(original) + 1
        self._charts.insert(position, clone)
        logger.debug("Duplicated chart %s -> %s", original.id, clone.id)
        return clone

    def update(self, chart_id: str, **changes: Any) -> ChartConfiguration:
        """Edit fields of one configuration in place.

        Raises:
            KeyError: When `chart_id` is not in the working set.
            ValueError: When a change names a field that cannot be edited.
        """

        chart = self.get(chart_id)
        if chart is None:
            raise KeyError(chart_id)

        unknown = sorted(set(changes) - _EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit chart fields: {unknown}.")

        for name, value in changes.items():
            if name in {"y_metric_columns", "filters"}:
                value = list(value)
            setattr(chart, name, value)
        return chart

    def remove(self, chart_id: str) -> None:
        """Remove a configuration; unknown ids are ignored."""

        self._charts = [chart for chart in self._charts if chart.id != chart_id]

    def clear(self) -> None:
        self._charts = []

    def _next_id(self, prefix: str) -> str:
        """Return `<prefix>-<n>` for the next unused counter value."""

        while True:
            candidate = f"{prefix}-{next(self._counter)}"
            if candidate not in self:
                return candidate
