"""
Common test fixtures.

Provides users and JWT-authenticated Django test clients (a regular
user, a second user and a staff user), an event that is open for
registration with two ticket types, and a patched iPaymu transport.
"""
from datetime import timedelta
from unittest import mock

import pytest
from django.contrib.auth.models import User
from django.test import Client
from django.utils import timezone

from events.models import Category, Event, Ticket


def _jwt_client(username: str, password: str) -> Client:
    client = Client()
    resp = client.post(
        "/api/auth/token/",
        {"username": username, "password": password},
        content_type="application/json",
    )
    assert resp.status_code == 200
    token = resp.json()["access"]
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {token}"
    return client


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="u1", password="pass12345", email="u1@example.com", first_name="Budi", last_name="Santoso"
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="u2", password="pass12345", email="u2@example.com")


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username="staff", password="pass12345", email="staff@example.com", is_staff=True)


@pytest.fixture
def auth_client(db, user):
    """Authenticate a Django test client as ``user`` using JWT tokens."""
    return _jwt_client("u1", "pass12345")


@pytest.fixture
def other_client(db, other_user):
    return _jwt_client("u2", "pass12345")


@pytest.fixture
def staff_client(db, staff_user):
    return _jwt_client("staff", "pass12345")


@pytest.fixture
def category(db):
    return Category.objects.create(name="Silat", description="Pencak silat")


@pytest.fixture
def event(db, category):
    """An event whose registration window contains now, admin fee 15000."""
    now = timezone.now()
    event = Event.objects.create(
        title="Kejuaraan Silat",
        description="Regional championship",
        start_date=now + timedelta(days=30),
        end_date=now + timedelta(days=31),
        registration_open_date=now - timedelta(days=1),
        registration_close_date=now + timedelta(days=7),
        location="Jakarta",
        max_capacity=100,
        admin_fee=15000,
    )
    event.categories.add(category)
    return event


def _ticket(event, name, price, capacity):
    now = timezone.now()
    return Ticket.objects.create(
        event=event,
        name=name,
        price=price,
        available_from=now - timedelta(days=1),
        available_until=now + timedelta(days=7),
        max_capacity=capacity,
    )


@pytest.fixture
def ticket(event):
    """Single remaining-seat ticket priced 100000."""
    return _ticket(event, "Tanding", 100000, 1)


@pytest.fixture
def second_ticket(event):
    return _ticket(event, "Seni", 50000, 10)


@pytest.fixture
def free_ticket(event):
    return _ticket(event, "Free", 0, 10)


@pytest.fixture
def attendee_data():
    """Attendee records as the services expect them."""
    def make(n=1, **extra):
        return [
            {
                "full_name": f"Atlet {i}",
                "gender": "M",
                "age_category": "SD",
                "belt_level": "DASAR",
                "phone_number": f"08120000000{i}",
                **extra,
            }
            for i in range(n)
        ]
    return make


@pytest.fixture
def gateway():
    """Patch the HTTP transport used by the iPaymu client.

    Every call returns a new transaction id; the mock records calls.
    """
    counter = {"n": 0}

    def fake_post(url, json=None, headers=None, timeout=None):
        counter["n"] += 1
        resp = mock.Mock(ok=True, status_code=200)
        resp.json.return_value = {
            "Status": 200,
            "Message": "success",
            "KodeTransaksi": f"TRX{counter['n']:04d}",
            "PaymentUrl": f"https://sandbox.ipaymu.test/payment/TRX{counter['n']:04d}",
        }
        return resp

    with mock.patch("payments.ipaymu.requests.post", side_effect=fake_post) as post:
        yield post
