"""Unit tests for the chart working set."""

from __future__ import annotations

import pytest

from dashboard.builder import ChartWorkingSet
from dashboard.chart_config import ChartConfiguration, FilterPredicate
from dashboard.templates import bind_template, get_chart_template

pytestmark = pytest.mark.unit


def test_create_assigns_unique_ids() -> None:
    """Charts created from scratch get sequential unique ids."""

    charts = ChartWorkingSet()
    first = charts.create(kind="bar", title="A", y_metric_columns=["revenue"])
    second = charts.create(kind="line", title="B")

    assert first.id != second.id
    assert charts.ids == (first.id, second.id)
    assert first.y_metric_columns == ["revenue"]


def test_duplicate_is_an_independent_deep_copy() -> None:
    """Editing a duplicate never changes the original."""

    charts = ChartWorkingSet()
    original = charts.create(
        kind="bar",
        title="Revenue",
        y_metric_columns=["revenue"],
        filters=[FilterPredicate(column="region", operator="equals", value="North")],
    )
    other = charts.create(kind="pie", title="Other")

    clone = charts.duplicate(original.id)
    clone.y_metric_columns.append("units")
    charts.update(clone.id, title="Revenue copy", filters=[])

    assert clone.id not in {original.id, other.id}
    assert charts.ids == (original.id, clone.id, other.id)
    assert original.y_metric_columns == ["revenue"]
    assert original.title == "Revenue"
    assert len(original.filters) == 1


def test_duplicate_unknown_id_raises_key_error() -> None:
    """Duplicating a chart that is not in the set fails loudly."""

    with pytest.raises(KeyError):
        ChartWorkingSet().duplicate("missing")


def test_remove_deletes_only_the_named_chart() -> None:
    """Removing a chart leaves the others untouched; unknown ids are ignored."""

    charts = ChartWorkingSet()
    keep = charts.create(kind="bar", title="Keep")
    drop = charts.create(kind="bar", title="Drop")

    charts.remove(drop.id)
    charts.remove("never-existed")

    assert charts.ids == (keep.id,)


def test_update_rejects_id_changes() -> None:
    """Ids are owned by the working set."""

    charts = ChartWorkingSet()
    chart = charts.create(kind="bar", title="A")

    with pytest.raises(ValueError):
        charts.update(chart.id, id="other")


def test_extend_renames_colliding_template_ids(sales_columns) -> None:
    """Applying the same template twice keeps every id unique."""

    template = get_chart_template("kpi-overview")
    assert template is not None
    charts = ChartWorkingSet()

    charts.extend(bind_template(template, sales_columns))
    charts.extend(bind_template(template, sales_columns))

    assert len(charts) == 6
    assert len(set(charts.ids)) == 6
    assert charts.ids[:3] == ("kpi-overview-0", "kpi-overview-1", "kpi-overview-2")


def test_add_keeps_free_ids() -> None:
    """A configuration with an unused id is stored as-is."""

    charts = ChartWorkingSet()
    stored = charts.add(ChartConfiguration(id="custom", kind="table", title="T"))

    assert stored.id == "custom"
    assert "custom" in charts
