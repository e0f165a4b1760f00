"""
Tests for the registration workflow in ``registrations.services``.
"""
import re
from datetime import timedelta
from unittest import mock

import pytest
import requests
from django.utils import timezone

from common.errors import (
    AttendeeCountMismatchError,
    CapacityExceededError,
    EventNotFoundError,
    GatewayError,
    RegistrationAlreadyPaidError,
    RegistrationClosedError,
    TicketNotFoundError,
)
from events.models import Ticket
from registrations import services
from registrations.models import Attendee, Registration


@pytest.mark.django_db
def test_online_registration_totals_and_opens_one_transaction(user, event, ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
    )

    registration = Registration.objects.get(pk=result.registration_id)
    assert registration.total_amount == 115000
    assert registration.admin_fee == 15000
    assert registration.status == Registration.STATUS_PENDING
    assert registration.payment_status == Registration.PAYMENT_PENDING
    assert registration.attendees.count() == 1
    assert gateway.call_count == 1
    assert registration.payment_id == "TRX0001"
    assert result.payment_url == "https://sandbox.ipaymu.test/payment/TRX0001"
    assert result.registration_number == registration.registration_number


@pytest.mark.django_db
def test_gateway_request_shape(user, event, ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
    )

    url = gateway.call_args.args[0]
    body = gateway.call_args.kwargs["json"]
    headers = gateway.call_args.kwargs["headers"]
    assert url == "https://sandbox.ipaymu.test/api/transaksi/merchant"
    assert body["amount"] == 115000
    assert body["price"] == [115000]
    assert body["qty"] == [1]
    assert body["action"] == "payment"
    assert body["merchantid"] == "0000001234567890"
    assert body["name"] == "Budi Santoso"
    assert body["phone"] == "081200000000"
    assert body["returnUrl"] == f"http://testserver/registration/{result.registration_id}/status"
    assert body["notifyUrl"] == "http://testserver/api/payments/ipaymu-callback"
    assert headers["va"] == "0000001234567890"
    assert headers["Content-Request"] == "JSON"


@pytest.mark.django_db
def test_offline_registration_never_calls_gateway(user, event, ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    assert result.payment_url is None
    assert gateway.call_count == 0
    registration = Registration.objects.get(pk=result.registration_id)
    assert registration.payment_id is None
    assert registration.status == Registration.STATUS_PENDING


@pytest.mark.django_db
def test_free_online_registration_never_calls_gateway(user, event, free_ticket, attendee_data, gateway):
    event.admin_fee = 0
    event.save()
    result = services.create_registration(
        event.id, user, [{"ticket_id": free_ticket.id, "quantity": 2}], attendee_data(2), "ONLINE"
    )
    assert result.payment_url is None
    assert gateway.call_count == 0
    assert Registration.objects.get(pk=result.registration_id).total_amount == 0


@pytest.mark.django_db
def test_total_sums_every_selection(user, event, ticket, second_ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id,
        user,
        [{"ticket_id": ticket.id, "quantity": 1}, {"ticket_id": second_ticket.id, "quantity": 2}],
        attendee_data(3),
        "OFFLINE",
    )
    assert Registration.objects.get(pk=result.registration_id).total_amount == 100000 + 2 * 50000 + 15000


@pytest.mark.django_db
def test_attendees_cycle_through_selections(user, event, second_ticket, free_ticket, attendee_data):
    result = services.create_registration(
        event.id,
        user,
        [{"ticket_id": second_ticket.id, "quantity": 2}, {"ticket_id": free_ticket.id, "quantity": 1}],
        attendee_data(3),
        "OFFLINE",
    )
    tickets = list(
        Attendee.objects.filter(registration_id=result.registration_id)
        .order_by("id")
        .values_list("ticket_id", flat=True)
    )
    assert tickets == [second_ticket.id, free_ticket.id, second_ticket.id]


@pytest.mark.django_db
def test_registration_number_format(user, event, ticket, attendee_data):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    assert re.fullmatch(r"REG-\d{13}-[0-9A-F]{8}", result.registration_number)


@pytest.mark.django_db
def test_unknown_event(user, attendee_data):
    with pytest.raises(EventNotFoundError):
        services.create_registration(999, user, [{"ticket_id": 1, "quantity": 1}], attendee_data(1), "OFFLINE")


@pytest.mark.django_db
def test_registration_before_window_is_rejected(user, event, ticket, attendee_data, gateway):
    event.registration_open_date = timezone.now() + timedelta(days=1)
    event.save()

    with pytest.raises(RegistrationClosedError) as exc:
        services.create_registration(
            event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
        )
    assert str(exc.value) == "Registration is not open for this event"
    assert not Registration.objects.exists()
    assert not Attendee.objects.exists()
    assert gateway.call_count == 0


@pytest.mark.django_db
def test_ticket_of_another_event_is_not_found(user, event, attendee_data):
    other = Ticket.objects.create(
        event=type(event).objects.create(
            title="Other",
            description="",
            start_date=event.start_date,
            end_date=event.end_date,
            registration_open_date=event.registration_open_date,
            registration_close_date=event.registration_close_date,
            location="x",
            max_capacity=1,
        ),
        name="Elsewhere",
        price=1,
        available_from=event.registration_open_date,
        available_until=event.registration_close_date,
        max_capacity=5,
    )
    with pytest.raises(TicketNotFoundError) as exc:
        services.create_registration(
            event.id, user, [{"ticket_id": other.id, "quantity": 1}], attendee_data(1), "OFFLINE"
        )
    assert str(exc.value) == f"Ticket with ID {other.id} not found"


@pytest.mark.django_db
def test_capacity_exceeded(user, event, ticket, attendee_data):
    with pytest.raises(CapacityExceededError) as exc:
        services.create_registration(
            event.id, user, [{"ticket_id": ticket.id, "quantity": 2}], attendee_data(2), "OFFLINE"
        )
    assert str(exc.value) == "Not enough capacity for ticket Tanding"
    assert not Registration.objects.exists()


@pytest.mark.django_db
def test_second_registration_for_last_seat_is_rejected(user, other_user, event, ticket, attendee_data, gateway):
    services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
    )
    with pytest.raises(CapacityExceededError):
        services.create_registration(
            event.id, other_user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
        )
    assert Registration.objects.count() == 1
    assert gateway.call_count == 1


@pytest.mark.django_db
def test_gateway_failure_rolls_everything_back(user, event, ticket, attendee_data):
    with mock.patch("payments.ipaymu.requests.post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(GatewayError):
            services.create_registration(
                event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
            )
    assert not Registration.objects.exists()
    assert not Attendee.objects.exists()


@pytest.mark.django_db
def test_process_payment_switches_to_online(user, event, ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    registration = Registration.objects.get(pk=result.registration_id)

    paid = services.process_registration_payment(registration, "ONLINE")
    registration.refresh_from_db()
    assert paid.payment_url is not None
    assert registration.payment_method == "ONLINE"
    assert registration.payment_id == "TRX0001"
    assert gateway.call_count == 1


@pytest.mark.django_db
def test_process_payment_offline_only_updates_method(user, event, ticket, attendee_data, gateway):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "ONLINE"
    )
    registration = Registration.objects.get(pk=result.registration_id)

    outcome = services.process_registration_payment(registration, "OFFLINE")
    registration.refresh_from_db()
    assert outcome.payment_url is None
    assert registration.payment_method == "OFFLINE"
    assert gateway.call_count == 1


@pytest.mark.django_db
def test_process_payment_rejects_paid_registration(user, event, ticket, attendee_data):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    registration = Registration.objects.get(pk=result.registration_id)
    services.update_registration_status(registration, status="CONFIRMED", payment_status="PAID")

    with pytest.raises(RegistrationAlreadyPaidError):
        services.process_registration_payment(registration, "ONLINE")


@pytest.mark.django_db
def test_add_attendees_checks_capacity_and_keeps_total(user, event, ticket, second_ticket, attendee_data):
    result = services.create_registration(
        event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    registration = Registration.objects.get(pk=result.registration_id)

    with pytest.raises(CapacityExceededError):
        services.add_attendees(registration, attendee_data(1, ticket_id=ticket.id))

    updated = services.add_attendees(registration, attendee_data(2, ticket_id=second_ticket.id))
    assert updated.attendees.count() == 3
    assert updated.total_amount == 115000


@pytest.mark.django_db
def test_list_user_registrations_newest_first(user, other_user, event, second_ticket, attendee_data):
    first = services.create_registration(
        event.id, user, [{"ticket_id": second_ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    second = services.create_registration(
        event.id, user, [{"ticket_id": second_ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    services.create_registration(
        event.id, other_user, [{"ticket_id": second_ticket.id, "quantity": 1}], attendee_data(1), "OFFLINE"
    )
    ids = [r.id for r in services.list_user_registrations(user)]
    assert ids == [second.registration_id, first.registration_id]


@pytest.mark.django_db
def test_attendee_count_must_match_ticket_quantities(user, event, ticket, attendee_data, gateway):
    with pytest.raises(AttendeeCountMismatchError) as exc:
        services.create_registration(
            event.id, user, [{"ticket_id": ticket.id, "quantity": 1}], attendee_data(3), "OFFLINE"
        )
    assert str(exc.value) == "Expected 1 attendees for the selected tickets, got 3"
    assert not Registration.objects.exists()
    assert Attendee.objects.filter(ticket=ticket).count() == 0
    assert gateway.call_count == 0
