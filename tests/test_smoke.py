"""Minimal smoke tests for the project scaffolding."""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

pytestmark = pytest.mark.unit

DASHBOARD_DIR = Path(__file__).resolve().parent.parent / "dashboard"


def test_dashboard_engine_imports() -> None:
    """Import the dashboard package and verify the public entry points exist."""

    from dashboard import LiveDashboardSession, evaluate_chart, parse_tabular_text, profile_columns

    assert callable(evaluate_chart)
    assert callable(parse_tabular_text)
    assert callable(profile_columns)
    assert LiveDashboardSession().has_data is False


def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tiaiSolutions.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS


def test_dashboard_engine_does_not_import_django() -> None:
    """The engine stays framework-free so datasets never touch the server stack."""

    offenders: list[str] = []
    for path in sorted(DASHBOARD_DIR.glob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom):
                names = [node.module or ""]
            else:
                continue
            if any(name == "django" or name.startswith("django.") for name in names):
                offenders.append(path.name)

    assert offenders == []
