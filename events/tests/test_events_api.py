"""
API tests for the events app.

Covers the public catalog (listing filters, detail, anonymous access)
and the staff-only management endpoints for events and categories.
"""
import re
from datetime import timedelta

import pytest
from django.utils import timezone

from events.models import Category, Event, EventStatistics, Ticket
from registrations.models import Attendee, Registration


def _event_payload(**overrides):
    now = timezone.now()
    payload = {
        "title": "Open Tournament",
        "description": "All belts welcome",
        "start_date": (now + timedelta(days=20)).isoformat(),
        "end_date": (now + timedelta(days=21)).isoformat(),
        "registration_open_date": (now - timedelta(days=1)).isoformat(),
        "registration_close_date": (now + timedelta(days=10)).isoformat(),
        "location": "Bandung",
        "max_capacity": 200,
        "admin_fee": 5000,
        "tickets": [
            {
                "name": "Tanding",
                "price": 75000,
                "available_from": (now - timedelta(days=1)).isoformat(),
                "available_until": (now + timedelta(days=10)).isoformat(),
                "max_capacity": 50,
                "type": "ONSITE",
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
def test_public_list_allows_anonymous(client, event, ticket):
    resp = client.get("/api/events/")
    assert resp.status_code == 200
    rows = resp.json()["results"]
    assert [e["id"] for e in rows] == [event.id]
    assert rows[0]["current_registrations"] == 0
    assert rows[0]["tickets"][0]["name"] == "Tanding"


@pytest.mark.django_db
def test_list_reports_registrations_from_statistics(client, event):
    EventStatistics.objects.create(event=event, total_revenue=115000, total_registrations=3)
    rows = client.get("/api/events/").json()["results"]
    assert rows[0]["current_registrations"] == 3


@pytest.mark.django_db
def test_list_filters(client, event, category):
    now = timezone.now()
    closed = Event.objects.create(
        title="Last Year Cup",
        description="",
        start_date=now - timedelta(days=40),
        end_date=now - timedelta(days=39),
        registration_open_date=now - timedelta(days=90),
        registration_close_date=now - timedelta(days=60),
        location="Surabaya",
        max_capacity=10,
    )

    open_ids = [e["id"] for e in client.get("/api/events/?status=open").json()["results"]]
    assert open_ids == [event.id]

    closed_ids = [e["id"] for e in client.get("/api/events/?status=CLOSED").json()["results"]]
    assert closed_ids == [closed.id]

    search_ids = [e["id"] for e in client.get("/api/events/?search=cup").json()["results"]]
    assert search_ids == [closed.id]

    cat_ids = [e["id"] for e in client.get(f"/api/events/?category={category.id}").json()["results"]]
    assert cat_ids == [event.id]


@pytest.mark.django_db
def test_detail_and_missing_event(client, event):
    resp = client.get(f"/api/events/{event.id}/")
    assert resp.status_code == 200
    assert resp.json()["event_code"] == event.event_code

    missing = client.get("/api/events/99999/")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Event not found"


@pytest.mark.django_db
def test_event_code_format(event):
    assert re.fullmatch(r"evt-\d{13}-[0-9a-f]{8}", event.event_code)


@pytest.mark.django_db
def test_admin_endpoints_require_staff(auth_client, client):
    assert auth_client.get("/api/admin/events/").status_code == 403
    assert client.get("/api/admin/events/").status_code == 401


@pytest.mark.django_db
def test_admin_create_event_with_tickets_and_categories(staff_client, category):
    payload = _event_payload(category_ids=[category.id])
    resp = staff_client.post("/api/admin/events/", payload, content_type="application/json")
    assert resp.status_code == 201, resp.json()
    body = resp.json()
    assert body["status"] == "ACTIVE"
    assert body["event_code"].startswith("evt-")
    assert [c["id"] for c in body["categories"]] == [category.id]
    assert len(body["tickets"]) == 1
    assert Ticket.objects.filter(event_id=body["id"], price=75000).exists()


@pytest.mark.django_db
def test_admin_create_rejects_inverted_dates(staff_client):
    now = timezone.now()
    payload = _event_payload(end_date=(now + timedelta(days=1)).isoformat())
    resp = staff_client.post("/api/admin/events/", payload, content_type="application/json")
    assert resp.status_code == 400
    assert "end_date" in resp.json()["fields"]


@pytest.mark.django_db
def test_admin_update_replaces_tickets(staff_client, event, ticket):
    now = timezone.now()
    new_tickets = [
        {
            "name": "Seni Tunggal",
            "price": 60000,
            "available_from": now.isoformat(),
            "available_until": (now + timedelta(days=5)).isoformat(),
            "max_capacity": 20,
        }
    ]
    resp = staff_client.patch(
        f"/api/admin/events/{event.id}/",
        {"title": "Renamed", "tickets": new_tickets},
        content_type="application/json",
    )
    assert resp.status_code == 200, resp.json()
    assert resp.json()["title"] == "Renamed"
    assert list(event.tickets.values_list("name", flat=True)) == ["Seni Tunggal"]


@pytest.mark.django_db
def test_admin_update_keeps_tickets_with_attendees(staff_client, event, ticket, user):
    registration = Registration.objects.create(
        event=event, user=user, registration_number="REG-1", total_amount=115000, payment_method="OFFLINE"
    )
    Attendee.objects.create(
        registration=registration, ticket=ticket, full_name="A", gender="F",
        age_category="SD", belt_level="DASAR", phone_number="0812",
    )
    resp = staff_client.patch(
        f"/api/admin/events/{event.id}/", {"tickets": []}, content_type="application/json"
    )
    assert resp.status_code == 400
    assert Ticket.objects.filter(pk=ticket.pk).exists()


@pytest.mark.django_db
def test_admin_archive_and_statistics(staff_client, event):
    resp = staff_client.post(f"/api/admin/events/{event.id}/archive/")
    assert resp.status_code == 200
    event.refresh_from_db()
    assert event.status == Event.STATUS_ARCHIVED

    stats = staff_client.get(f"/api/admin/events/{event.id}/statistics/").json()
    assert stats["total_registrations"] == 0

    EventStatistics.objects.create(event=event, total_revenue=200000, total_registrations=2)
    stats = staff_client.get(f"/api/admin/events/{event.id}/statistics/").json()
    assert stats["total_revenue"] == 200000


@pytest.mark.django_db
def test_admin_delete_cascades(staff_client, event, ticket, user):
    registration = Registration.objects.create(
        event=event, user=user, registration_number="REG-2", total_amount=115000, payment_method="OFFLINE"
    )
    Attendee.objects.create(
        registration=registration, ticket=ticket, full_name="A", gender="F",
        age_category="SD", belt_level="DASAR", phone_number="0812",
    )
    EventStatistics.objects.create(event=event)

    resp = staff_client.delete(f"/api/admin/events/{event.id}/")
    assert resp.status_code == 204
    assert not Event.objects.filter(pk=event.pk).exists()
    assert not Registration.objects.exists()
    assert not Attendee.objects.exists()
    assert not Ticket.objects.exists()


@pytest.mark.django_db
def test_category_crud(staff_client):
    resp = staff_client.post(
        "/api/admin/categories/", {"name": "Kata", "description": ""}, content_type="application/json"
    )
    assert resp.status_code == 201
    cat_id = resp.json()["id"]

    dup = staff_client.post("/api/admin/categories/", {"name": "Kata"}, content_type="application/json")
    assert dup.status_code == 400

    assert staff_client.delete(f"/api/admin/categories/{cat_id}/").status_code == 204
    assert not Category.objects.filter(pk=cat_id).exists()
