"""Run the Live Dashboard engine on a local CSV file and print the result."""

from __future__ import annotations

import json
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from dashboard.errors import DashboardError
from dashboard.options import build_chart_options
from dashboard.session import LiveDashboardSession

DEFAULT_TEMPLATE = "kpi-overview"


class Command(BaseCommand):
    """Profile a CSV file and print renderer options for template charts."""

    help = "Profile a CSV file and print chart renderer options as JSON (the file never leaves this machine)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("csv_path", help="Path to a .csv file.")
        parser.add_argument(
            "--template",
            action="append",
            dest="templates",
            default=None,
            help=f"Chart template slug or name to apply; repeatable (default: {DEFAULT_TEMPLATE}).",
        )
        parser.add_argument(
            "--indent",
            type=int,
            default=2,
            help="JSON indentation (default: 2).",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path = Path(options["csv_path"])
        templates: list[str] = options["templates"] or [DEFAULT_TEMPLATE]
        indent: int = options["indent"]

        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc.strerror or exc}") from exc

        session = LiveDashboardSession(max_upload_bytes=settings.LIVE_DASHBOARD_MAX_UPLOAD_BYTES)
        try:
            session.load_upload(path.name, payload)
            for template in templates:
                session.apply_template(template)
        except DashboardError as exc:
            raise CommandError(exc.message) from exc
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        validation = session.validate_charts()
        report = {
            "rows": len(session.rows),
            "columns": [
                {
                    "name": column.name,
                    "type": column.inferred_type,
                    "unique": column.unique_count,
                    "min": column.min,
                    "max": column.max,
                }
                for column in session.columns
            ],
            "charts": [
                {
                    "id": spec.chart_id,
                    "title": spec.title,
                    "kind": spec.kind,
                    "warnings": list(validation[spec.chart_id].warnings),
                    "options": build_chart_options(spec),
                }
                for spec in session.chart_specs()
            ],
        }
        self.stdout.write(json.dumps(report, indent=indent))
        return None
