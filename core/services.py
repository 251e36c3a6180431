"""Service-layer functions for the core app.

Services in `core` own the ORM writes and reads behind the public endpoints so
views only deal with request parsing and response shaping.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet

from core.models import Contact, Download, Lead

logger = logging.getLogger(__name__)

CONTACT_LEAD_SOURCE = "contact_form"

_CONTACT_FIELDS = ("name", "email", "company", "role", "message", "timeframe", "budget")


def create_contact(data: dict[str, Any]) -> Contact:
    """Persist a contact submission and record the matching lead event.

    Args:
        data: Cleaned `ContactForm` data. Unknown keys (e.g. the honeypot) are
            ignored.

    Returns:
        The created Contact.
    """

    fields = {name: data.get(name) or "" for name in _CONTACT_FIELDS}
    with transaction.atomic():
        contact = Contact.objects.create(**fields)
        create_lead(source=CONTACT_LEAD_SOURCE, payload={"contactId": str(contact.id), **fields})
    logger.info("Contact submission stored: id=%s", contact.id)
    return contact


def create_lead(*, source: str, payload: dict[str, Any] | None = None) -> Lead:
    """Persist a lead event.

    Args:
        source: Event origin label.
        payload: Optional JSON-serializable details.

    Returns:
        The created Lead.
    """

    lead = Lead.objects.create(source=source, payload=payload or {})
    logger.info("Lead recorded: id=%s source=%s", lead.id, source)
    return lead


def create_download(*, template_name: str, email: str, company: str = "") -> Download:
    """Persist a template download request."""

    download = Download.objects.create(template_name=template_name, email=email, company=company or "")
    logger.info("Download recorded: id=%s template=%s", download.id, template_name)
    return download


def list_contacts() -> QuerySet[Contact]:
    """Return contact submissions, newest first."""

    return Contact.objects.order_by("-created_at")


def list_leads(*, source: str | None = None) -> QuerySet[Lead]:
    """Return lead events, newest first, optionally filtered by source."""

    queryset = Lead.objects.order_by("-created_at")
    if source:
        queryset = queryset.filter(source=source)
    return queryset


def list_downloads() -> QuerySet[Download]:
    """Return download requests, newest first."""

    return Download.objects.order_by("-created_at")
