"""Live Dashboard engine for the TIAI Solutions site.

This package parses visitor-supplied tabular text, profiles its columns, binds
chart templates, and evaluates chart configurations into declarative chart
specifications. It operates purely on in-memory inputs: it must not import
Django, perform database I/O, or send the visitor's data anywhere.
"""

from .engine import evaluate_chart
from .parser import parse_tabular_text
from .profiler import profile_columns
from .session import LiveDashboardSession

__all__ = ["LiveDashboardSession", "evaluate_chart", "parse_tabular_text", "profile_columns"]
