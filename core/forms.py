"""Forms validating the site's public JSON endpoints.

Each form is bound to the decoded JSON body of a request rather than to
`request.POST`; errors are returned to the client via `errors.get_json_data()`.
"""

from __future__ import annotations

from typing import Any

from django import forms


class ContactForm(forms.Form):
    """Validate a contact form submission."""

    name = forms.CharField(
        max_length=100,
        error_messages={"required": "Name is required", "max_length": "Name too long"},
    )
    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    company = forms.CharField(
        required=False,
        max_length=100,
        error_messages={"max_length": "Company name too long"},
    )
    role = forms.CharField(required=False, max_length=100)
    message = forms.CharField(
        min_length=10,
        max_length=2000,
        error_messages={
            "required": "Message must be at least 10 characters",
            "min_length": "Message must be at least 10 characters",
            "max_length": "Message too long",
        },
    )
    timeframe = forms.CharField(required=False, max_length=100)
    budget = forms.CharField(required=False, max_length=100)
    honeypot = forms.CharField(required=False)

    def clean_honeypot(self) -> str:
        """Reject submissions where the hidden field was filled in."""

        value = self.cleaned_data.get("honeypot") or ""
        if value:
            raise forms.ValidationError("Bot detected")
        return value


class LeadForm(forms.Form):
    """Validate a lead tracking event."""

    source = forms.CharField(max_length=100)
    payload = forms.JSONField(required=False)

    def clean_payload(self) -> dict[str, Any]:
        """Normalize the payload to a JSON object."""

        payload = self.cleaned_data.get("payload")
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise forms.ValidationError("Payload must be a JSON object.")
        return payload


class DownloadForm(forms.Form):
    """Validate a template download request."""

    template_name = forms.CharField(
        max_length=200,
        error_messages={"required": "Template name is required"},
    )
    email = forms.EmailField(error_messages={"invalid": "Invalid email address"})
    company = forms.CharField(
        required=False,
        max_length=100,
        error_messages={"max_length": "Company name too long"},
    )
