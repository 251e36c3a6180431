"""JSON views for the TIAI Solutions public API and static data files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from core.forms import ContactForm, DownloadForm, LeadForm
from core.ratelimit import rate_limit
from core.services import create_contact, create_download, create_lead
from dashboard.templates import template_catalog_payload

logger = logging.getLogger(__name__)

CONTACT_SUCCESS_MESSAGE = "Thank you for your message. We'll respond within 24 hours."


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    """Decode a request body into a JSON object, or None when it is not one."""

    try:
        payload = json.loads(request.body or b"{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _invalid(error: str, details: Any = None) -> JsonResponse:
    """Return a 400 response with an error message and field details."""

    return JsonResponse({"error": error, "details": details or {}}, status=400)


@csrf_exempt
@require_POST
@rate_limit(5, 300, scope="contact")
def api_contact(request: HttpRequest) -> JsonResponse:
    """Store a contact submission and record a `contact_form` lead."""

    payload = _json_body(request)
    if payload is None:
        return _invalid("Invalid form data")
    if str(payload.get("honeypot") or "").strip():
        logger.warning("Contact submission rejected by honeypot")
        return JsonResponse({"error": "Spam detected"}, status=400)

    form = ContactForm(data=payload)
    if not form.is_valid():
        return _invalid("Invalid form data", form.errors.get_json_data())

    try:
        create_contact(form.cleaned_data)
    except DatabaseError:
        logger.exception("Contact form error")
        return JsonResponse({"error": "Something went wrong. Please try again or email us directly."}, status=500)
    return JsonResponse({"success": True, "message": CONTACT_SUCCESS_MESSAGE})


@csrf_exempt
@require_POST
@rate_limit(10, 60, scope="lead")
def api_lead(request: HttpRequest) -> JsonResponse:
    """Record a funnel event."""

    payload = _json_body(request)
    if payload is None:
        return _invalid("Invalid lead data")
    form = LeadForm(data=payload)
    if not form.is_valid():
        return _invalid("Invalid lead data", form.errors.get_json_data())

    try:
        lead = create_lead(source=form.cleaned_data["source"], payload=form.cleaned_data["payload"])
    except DatabaseError:
        logger.exception("Lead tracking error")
        return JsonResponse({"error": "Failed to track lead"}, status=500)
    return JsonResponse({"success": True, "leadId": str(lead.id)})


@csrf_exempt
@require_POST
@rate_limit(10, 60, scope="download")
def api_download(request: HttpRequest) -> JsonResponse:
    """Record a template download request."""

    payload = _json_body(request)
    if payload is None:
        return _invalid("Invalid download data")
    form = DownloadForm(data=payload)
    if not form.is_valid():
        return _invalid("Invalid download data", form.errors.get_json_data())

    try:
        download = create_download(**form.cleaned_data)
    except DatabaseError:
        logger.exception("Download tracking error")
        return JsonResponse({"error": "Failed to track download"}, status=500)
    return JsonResponse({"success": True, "downloadId": str(download.id)})


@require_GET
def api_health(request: HttpRequest) -> JsonResponse:
    """Report liveness with the current server time."""

    return JsonResponse({"status": "healthy", "timestamp": timezone.now().isoformat()})


@require_GET
def api_dashboard_templates(request: HttpRequest) -> JsonResponse:
    """Return the Live Dashboard chart template catalog.

    The catalog is static; visitor datasets are never sent to the server.
    """

    return JsonResponse({"templates": template_catalog_payload()})


@require_GET
def data_file(request: HttpRequest, filename: str) -> JsonResponse:
    """Serve a JSON content file from `SITE_DATA_DIR`.

    Args:
        request: Incoming request.
        filename: Requested file name; must end in `.json`.

    Returns:
        The decoded file contents, 400 for non-JSON names, or 404 when the file
        is missing or unreadable.
    """

    if not filename.endswith(".json"):
        return JsonResponse({"error": "Only JSON files are allowed"}, status=400)

    data_dir = Path(settings.SITE_DATA_DIR).resolve()
    path = (data_dir / filename).resolve()
    if path.parent != data_dir:
        return JsonResponse({"error": "File not found"}, status=404)

    try:
        contents = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Error serving data file %s", filename, exc_info=True)
        return JsonResponse({"error": "File not found"}, status=404)
    return JsonResponse(contents, safe=False)
