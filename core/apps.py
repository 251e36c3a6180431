"""App configuration for the core Django app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (site API, lead capture, static data)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Site backend"
