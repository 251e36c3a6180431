"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/contact", views.api_contact, name="api_contact"),
    path("api/lead", views.api_lead, name="api_lead"),
    path("api/download", views.api_download, name="api_download"),
    path("api/health", views.api_health, name="api_health"),
    path("api/dashboard/templates", views.api_dashboard_templates, name="api_dashboard_templates"),
    path("data/<str:filename>", views.data_file, name="data_file"),
]
