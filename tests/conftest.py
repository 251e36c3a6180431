"""Pytest fixtures shared across engine and Django integration tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

SALES_CSV = "\n".join(
    [
        "date,region,revenue,units,active",
        "2024-01-01,North,100,10,true",
        "2024-01-01,South,50,5,false",
        "2024-01-02,North,200,20,true",
        "2024-01-03,East,25.5,3,true",
        "",
    ]
)


@pytest.fixture
def sales_csv() -> str:
    """Return a small dataset with date, text, number and boolean columns."""

    return SALES_CSV


@pytest.fixture
def sales_rows(sales_csv):
    """Return the parsed rows of `sales_csv`."""

    from dashboard.parser import parse_rows

    return parse_rows(sales_csv)


@pytest.fixture
def sales_columns(sales_rows):
    """Return the column descriptors of `sales_csv`."""

    from dashboard.profiler import profile_columns

    return profile_columns(sales_rows)


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
