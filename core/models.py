"""Database models for the core app.

The site persists only visitor-submitted marketing records:

- contact form submissions,
- lead events (form submissions, template downloads, other funnel events),
- template download requests.

Live Dashboard datasets are never stored; there is deliberately no model for
them.
"""

from __future__ import annotations

import uuid

from django.db import models


class Contact(models.Model):
    """A contact form submission.

    Attributes:
        name: Visitor name.
        email: Reply address.
        company: Optional company name.
        role: Optional job role.
        message: Free-text enquiry.
        timeframe: Optional project timeframe selection.
        budget: Optional budget bracket selection.
        created_at: Submission timestamp.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    email = models.EmailField()
    company = models.CharField(max_length=100, blank=True)
    role = models.CharField(max_length=100, blank=True)
    message = models.TextField()
    timeframe = models.CharField(max_length=100, blank=True)
    budget = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Contact({self.name} <{self.email}>)"


class Lead(models.Model):
    """A funnel event recorded for analytics.

    Attributes:
        source: Event origin (e.g. `contact_form`, `template_download`).
        payload: Arbitrary JSON details supplied with the event.
        created_at: Event timestamp.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    source = models.CharField(max_length=100)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Lead(source={self.source}, created_at={self.created_at.isoformat() if self.created_at else None})"


class Download(models.Model):
    """A template download request.

    Attributes:
        template_name: Name of the requested template.
        email: Address the visitor supplied.
        company: Optional company name.
        created_at: Request timestamp.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    template_name = models.CharField(max_length=200)
    email = models.EmailField()
    company = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Download({self.template_name} -> {self.email})"
