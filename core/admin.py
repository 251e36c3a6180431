"""Admin registrations for the core app."""

from __future__ import annotations

from django.contrib import admin

from core.models import Contact, Download, Lead


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    """Admin configuration for Contact."""

    list_display = ("created_at", "name", "email", "company", "timeframe", "budget")
    search_fields = ("name", "email", "company")
    readonly_fields = ("id", "created_at")


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    """Admin configuration for Lead."""

    list_display = ("created_at", "source")
    list_filter = ("source",)
    readonly_fields = ("id", "created_at")


@admin.register(Download)
class DownloadAdmin(admin.ModelAdmin):
    """Admin configuration for Download."""

    list_display = ("created_at", "template_name", "email", "company")
    list_filter = ("template_name",)
    search_fields = ("email", "company")
    readonly_fields = ("id", "created_at")
