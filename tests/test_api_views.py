"""Integration tests for the public JSON API and static data endpoint."""

from __future__ import annotations

import json

import pytest
from django.core.cache import cache
from django.urls import reverse

from core.models import Contact, Download, Lead
from core.services import list_leads

pytestmark = pytest.mark.integration

VALID_CONTACT = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "company": "Analytical Engines",
    "message": "We would like help building a KPI dashboard.",
    "timeframe": "1-3 months",
    "budget": "$10k-$25k",
    "honeypot": "",
}


@pytest.fixture(autouse=True)
def _clear_rate_limits():
    """Start each test with empty rate-limit counters."""

    cache.clear()
    yield
    cache.clear()


def _post(client, name: str, payload: object):
    return client.post(reverse(name), data=json.dumps(payload), content_type="application/json")


@pytest.mark.django_db
def test_contact_creates_contact_and_lead(client) -> None:
    """A valid submission stores the contact and a `contact_form` lead."""

    response = _post(client, "core:api_contact", VALID_CONTACT)

    assert response.status_code == 200
    assert response.json()["success"] is True
    contact = Contact.objects.get()
    assert contact.email == "ada@example.com"
    lead = list_leads(source="contact_form").get()
    assert lead.payload["contactId"] == str(contact.id)
    assert lead.payload["company"] == "Analytical Engines"


@pytest.mark.django_db
def test_contact_honeypot_is_rejected_as_spam(client) -> None:
    """Filled honeypots are rejected without storing anything."""

    response = _post(client, "core:api_contact", {**VALID_CONTACT, "honeypot": "http://spam"})

    assert response.status_code == 400
    assert response.json() == {"error": "Spam detected"}
    assert not Contact.objects.exists()
    assert not Lead.objects.exists()


@pytest.mark.django_db
def test_contact_invalid_data_returns_details(client) -> None:
    """Validation errors are returned per field."""

    response = _post(client, "core:api_contact", {**VALID_CONTACT, "email": "nope", "message": "short"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid form data"
    assert set(body["details"]) == {"email", "message"}
    assert not Contact.objects.exists()


@pytest.mark.django_db
def test_contact_rejects_non_object_body(client) -> None:
    """Bodies that are not JSON objects are invalid form data."""

    response = client.post(reverse("core:api_contact"), data="not json", content_type="application/json")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid form data"


@pytest.mark.django_db
def test_contact_is_rate_limited_per_ip(client) -> None:
    """The sixth contact request within the window is refused."""

    statuses = [_post(client, "core:api_contact", VALID_CONTACT).status_code for _ in range(6)]

    assert statuses == [200, 200, 200, 200, 200, 429]
    response = _post(client, "core:api_contact", VALID_CONTACT)
    assert response.json() == {"error": "Too many requests. Please try again later."}
    assert Contact.objects.count() == 5


@pytest.mark.django_db
def test_rate_limits_are_tracked_per_endpoint(client) -> None:
    """Exhausting one endpoint's budget leaves the others available."""

    for _ in range(5):
        _post(client, "core:api_contact", VALID_CONTACT)

    response = _post(client, "core:api_lead", {"source": "pricing_page"})
    assert response.status_code == 200


@pytest.mark.django_db
def test_lead_endpoint_records_event(client) -> None:
    """Leads store their source and payload."""

    response = _post(client, "core:api_lead", {"source": "live_dashboard", "payload": {"template": "kpi-overview"}})

    assert response.status_code == 200
    lead = Lead.objects.get(id=response.json()["leadId"])
    assert lead.source == "live_dashboard"
    assert lead.payload == {"template": "kpi-overview"}


@pytest.mark.django_db
def test_lead_requires_source_and_object_payload(client) -> None:
    """Missing sources and non-object payloads are invalid."""

    response = _post(client, "core:api_lead", {"payload": [1, 2]})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid lead data"
    assert set(body["details"]) == {"source", "payload"}


@pytest.mark.django_db
def test_download_endpoint_records_request(client) -> None:
    """Download requests are stored and identified."""

    response = _post(
        client,
        "core:api_download",
        {"template_name": "KPI Dashboard Kit", "email": "grace@example.com"},
    )

    assert response.status_code == 200
    download = Download.objects.get(id=response.json()["downloadId"])
    assert download.template_name == "KPI Dashboard Kit"
    assert download.company == ""


@pytest.mark.django_db
def test_download_rejects_invalid_email(client) -> None:
    """Download requests need a valid address."""

    response = _post(client, "core:api_download", {"template_name": "Kit", "email": "nope"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid download data"


def test_post_endpoints_reject_get(client) -> None:
    """Write endpoints only accept POST."""

    assert client.get(reverse("core:api_contact")).status_code == 405


def test_health_reports_status_and_timestamp(client) -> None:
    """Health checks report liveness."""

    body = client.get(reverse("core:api_health")).json()

    assert body["status"] == "healthy"
    assert body["timestamp"]


def test_api_responses_carry_cors_headers(client) -> None:
    """API responses allow cross-origin callers."""

    response = client.get(reverse("core:api_health"), HTTP_ORIGIN="https://partner.example")
    assert response["Access-Control-Allow-Origin"] == "*"


def test_api_preflight_short_circuits(client) -> None:
    """OPTIONS preflights to the API are answered directly."""

    response = client.options(
        reverse("core:api_contact"),
        HTTP_ORIGIN="https://partner.example",
        HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
    )

    assert response.status_code == 200
    assert "POST" in response["Access-Control-Allow-Methods"]
    assert "content-type" in response["Access-Control-Allow-Headers"]


def test_non_api_responses_have_no_cors_headers(client, settings, tmp_path) -> None:
    """CORS headers are limited to the API prefix."""

    settings.SITE_DATA_DIR = tmp_path
    (tmp_path / "tools.json").write_text("[]", encoding="utf-8")

    response = client.get(reverse("core:data_file", args=["tools.json"]), HTTP_ORIGIN="https://partner.example")
    assert "Access-Control-Allow-Origin" not in response


def test_dashboard_templates_lists_catalog(client) -> None:
    """The template catalog is served without any dataset."""

    body = client.get(reverse("core:api_dashboard_templates")).json()
    assert [entry["name"] for entry in body["templates"]] == [
        "KPI Overview",
        "Category Breakdown",
        "Time Series Analysis",
    ]


def test_data_file_serves_json(client, settings, tmp_path) -> None:
    """JSON files under SITE_DATA_DIR are returned as parsed JSON."""

    settings.SITE_DATA_DIR = tmp_path
    (tmp_path / "services.json").write_text(json.dumps({"services": ["BI"]}), encoding="utf-8")

    response = client.get(reverse("core:data_file", args=["services.json"]))

    assert response.status_code == 200
    assert response.json() == {"services": ["BI"]}


def test_data_file_rejects_non_json_names(client) -> None:
    """Only .json names are served."""

    response = client.get(reverse("core:data_file", args=["secrets.txt"]))

    assert response.status_code == 400
    assert response.json() == {"error": "Only JSON files are allowed"}


def test_data_file_missing_is_404(client, settings, tmp_path) -> None:
    """Missing files are reported as not found."""

    settings.SITE_DATA_DIR = tmp_path
    response = client.get(reverse("core:data_file", args=["missing.json"]))

    assert response.status_code == 404
    assert response.json() == {"error": "File not found"}


def test_bundled_chart_data_is_served(client) -> None:
    """The repository ships chart sample data."""

    response = client.get(reverse("core:data_file", args=["charts.json"]))
    assert response.status_code == 200
