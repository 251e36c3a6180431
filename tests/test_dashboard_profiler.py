"""Unit tests for column profiling."""

from __future__ import annotations

import pytest

from dashboard.parser import parse_rows
from dashboard.profiler import SAMPLE_VALUE_LIMIT, find_column, profile_columns
from dashboard.values import NumberValue, TextValue

pytestmark = pytest.mark.unit


def test_profile_columns_infers_types_and_ranges(sales_columns) -> None:
    """Each column gets its shared type and numeric columns get min/max."""

    by_name = {column.name: column for column in sales_columns}

    assert [column.name for column in sales_columns] == ["date", "region", "revenue", "units", "active"]
    assert by_name["date"].inferred_type == "date"
    assert by_name["region"].inferred_type == "text"
    assert by_name["active"].inferred_type == "boolean"
    assert by_name["revenue"].inferred_type == "number"
    assert (by_name["revenue"].min, by_name["revenue"].max) == (25.5, 200.0)
    assert by_name["region"].min is None


def test_profile_columns_counts_distinct_values_in_first_seen_order(sales_columns) -> None:
    """Sample values keep first-seen order and unique_count counts distinct values."""

    region = find_column(sales_columns, "region")

    assert region is not None
    assert region.unique_count == 3
    assert region.sample_values == (TextValue("North"), TextValue("South"), TextValue("East"))


def test_profile_columns_falls_back_to_text_for_mixed_types() -> None:
    """A column mixing numbers and words is text."""

    columns = profile_columns(parse_rows("value\n1\ntwo\n3\n"))
    assert columns[0].inferred_type == "text"


def test_profile_columns_ignores_empty_cells_when_typing() -> None:
    """Empty cells do not demote a numeric column."""

    columns = profile_columns(parse_rows("a,b\n1,x\n,y\n3,z\n"))

    assert columns[0].inferred_type == "number"
    assert (columns[0].min, columns[0].max) == (1.0, 3.0)


def test_profile_columns_caps_sample_values() -> None:
    """At most SAMPLE_VALUE_LIMIT distinct samples are kept."""

    text = "n\n" + "\n".join(str(idx) for idx in range(25)) + "\n"
    column = profile_columns(parse_rows(text))[0]

    assert column.unique_count == 25
    assert len(column.sample_values) == SAMPLE_VALUE_LIMIT
    assert column.sample_values[0] == NumberValue(0.0)


def test_profile_columns_of_no_rows_is_empty() -> None:
    """Profiling nothing yields nothing."""

    assert profile_columns([]) == ()
