"""
Registration workflow.

``create_registration`` is the checkout: it validates the event window
and ticket capacity, prices the order, stores the registration and its
attendees and, for paid online orders, opens a gateway transaction.
Everything happens inside one database transaction, so a failure at any
step (including the gateway call) leaves nothing behind.

Ticket rows are locked with ``select_for_update`` while capacity is
checked, which serialises concurrent checkouts for the same ticket on
databases that support row locks.
"""
import logging
import uuid
from collections import Counter
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Prefetch
from django.utils import timezone
from django_filters.utils import translate_validation

from common.errors import (
    AttendeeCountMismatchError,
    CapacityExceededError,
    EventNotFoundError,
    RegistrationAlreadyPaidError,
    RegistrationClosedError,
    RegistrationNotFoundError,
    TicketNotFoundError,
)
from events.models import Event, Ticket
from payments.ipaymu import get_client
from .filters import RegistrationFilter
from .models import Attendee, Registration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    registration_id: int
    registration_number: str
    payment_url: str | None = None


def generate_registration_number() -> str:
    return f"REG-{int(timezone.now().timestamp() * 1000)}-{uuid.uuid4().hex[:8].upper()}"


def _payment_urls(registration_id: int) -> tuple[str, str]:
    base = settings.APP_BASE_URL
    return (
        f"{base}/registration/{registration_id}/status",
        f"{base}/api/payments/ipaymu-callback",
    )


def _display_name(user) -> str:
    return user.get_full_name() or user.get_username()


def _open_gateway_payment(registration: Registration, event: Event, user, phone: str) -> str:
    """Create the gateway transaction, store its id and return the payment URL."""
    return_url, notify_url = _payment_urls(registration.id)
    txn = get_client().create_transaction(
        product=[f"Event Registration: {event.title}"],
        qty=[1],
        price=[registration.total_amount],
        amount=registration.total_amount,
        note=f"Registration for {event.title}",
        name=_display_name(user),
        email=user.email,
        phone=phone,
        return_url=return_url,
        notify_url=notify_url,
    )
    registration.payment_id = txn.transaction_id
    registration.save(update_fields=["payment_id", "payment_method", "payment_status", "updated_at"])
    return txn.payment_url


def _lock_event_tickets(event: Event, ticket_ids) -> dict[int, Ticket]:
    tickets = Ticket.objects.select_for_update().filter(event=event, id__in=set(ticket_ids))
    return {t.id: t for t in tickets}


def _check_capacity(requested: Counter, tickets: dict[int, Ticket]) -> None:
    """Raise CapacityExceededError if any ticket cannot take the requested seats."""
    taken = dict(
        Attendee.objects.filter(ticket_id__in=requested.keys())
        .values("ticket_id")
        .annotate(n=Count("id"))
        .values_list("ticket_id", "n")
    )
    for ticket_id, quantity in requested.items():
        ticket = tickets[ticket_id]
        if taken.get(ticket_id, 0) + quantity > ticket.max_capacity:
            raise CapacityExceededError(ticket.name)


def _attendee(registration: Registration, ticket_id: int, data: dict) -> Attendee:
    return Attendee(
        registration=registration,
        ticket_id=ticket_id,
        full_name=data["full_name"],
        gender=data["gender"],
        age_category=data["age_category"],
        belt_level=data["belt_level"],
        phone_number=data["phone_number"],
        biodata_url=data.get("biodata_url") or "",
        consent_url=data.get("consent_url") or "",
    )


@transaction.atomic
def create_registration(
    event_id,
    user,
    ticket_selections: list[dict],
    attendees_data: list[dict],
    payment_method: str,
) -> RegistrationResult:
    """Register attendees for an event.

    ``ticket_selections`` is a list of ``{"ticket_id", "quantity"}`` and
    ``attendees_data`` a list of attendee records, one per seat.  Attendees
    are given tickets by position, cycling through the selections.
    """
    event = Event.objects.filter(pk=event_id).first()
    if event is None:
        raise EventNotFoundError(event_id)

    if not event.is_registration_open():
        raise RegistrationClosedError()

    seats = sum(s["quantity"] for s in ticket_selections)
    if len(attendees_data) != seats:
        raise AttendeeCountMismatchError(len(attendees_data), seats)

    tickets = _lock_event_tickets(event, [s["ticket_id"] for s in ticket_selections])
    for selection in ticket_selections:
        if selection["ticket_id"] not in tickets:
            raise TicketNotFoundError(selection["ticket_id"])

    requested = Counter()
    for selection in ticket_selections:
        requested[selection["ticket_id"]] += selection["quantity"]
    _check_capacity(requested, tickets)

    total_amount = sum(
        tickets[s["ticket_id"]].price * s["quantity"] for s in ticket_selections
    ) + event.admin_fee

    registration = Registration.objects.create(
        event=event,
        user=user,
        registration_number=generate_registration_number(),
        total_amount=total_amount,
        admin_fee=event.admin_fee,
        payment_method=payment_method,
        status=Registration.STATUS_PENDING,
        payment_status=Registration.PAYMENT_PENDING,
    )

    # TODO: let each attendee name its ticket instead of cycling through selections
    Attendee.objects.bulk_create([
        _attendee(registration, ticket_selections[i % len(ticket_selections)]["ticket_id"], data)
        for i, data in enumerate(attendees_data)
    ])

    logger.info(
        "Registration %s created for event %s: total=%s method=%s",
        registration.registration_number, event.id, total_amount, payment_method,
    )

    payment_url = None
    if payment_method == Registration.PAYMENT_ONLINE and total_amount > 0:
        phone = attendees_data[0]["phone_number"] if attendees_data else ""
        payment_url = _open_gateway_payment(registration, event, user, phone)

    return RegistrationResult(
        registration_id=registration.id,
        registration_number=registration.registration_number,
        payment_url=payment_url,
    )


@transaction.atomic
def process_registration_payment(registration: Registration, payment_method: str) -> RegistrationResult:
    """(Re)start payment for an existing registration."""
    registration = (
        Registration.objects.select_for_update()
        .select_related("event", "user")
        .get(pk=registration.pk)
    )
    if registration.payment_status == Registration.PAYMENT_PAID:
        raise RegistrationAlreadyPaidError()

    registration.payment_method = payment_method
    payment_url = None
    if payment_method == Registration.PAYMENT_ONLINE and registration.total_amount > 0:
        registration.payment_status = Registration.PAYMENT_PENDING
        first = registration.attendees.first()
        payment_url = _open_gateway_payment(
            registration, registration.event, registration.user, first.phone_number if first else ""
        )
    else:
        registration.save(update_fields=["payment_method", "updated_at"])

    return RegistrationResult(
        registration_id=registration.id,
        registration_number=registration.registration_number,
        payment_url=payment_url,
    )


def _with_details(qs):
    return qs.select_related("event", "user").prefetch_related(
        Prefetch("attendees", queryset=Attendee.objects.select_related("ticket"))
    )


def get_registration_details(registration_id) -> Registration:
    try:
        return _with_details(Registration.objects.all()).get(pk=registration_id)
    except (Registration.DoesNotExist, ValueError, TypeError):
        raise RegistrationNotFoundError()


def list_user_registrations(user):
    return _with_details(
        Registration.objects.filter(user=user).prefetch_related("event__categories")
    ).order_by("-created_at", "-id")


@transaction.atomic
def add_attendees(registration: Registration, attendees_data: list[dict]) -> Registration:
    """Append attendees to a registration.

    Each record carries its own ``ticket_id``.  The stored total is left
    as it was at checkout.
    """
    tickets = _lock_event_tickets(registration.event, [a["ticket_id"] for a in attendees_data])
    for data in attendees_data:
        if data["ticket_id"] not in tickets:
            raise TicketNotFoundError(data["ticket_id"])

    _check_capacity(Counter(a["ticket_id"] for a in attendees_data), tickets)

    Attendee.objects.bulk_create([_attendee(registration, a["ticket_id"], a) for a in attendees_data])
    logger.info("Added %d attendees to registration %s", len(attendees_data), registration.id)
    return get_registration_details(registration.id)


def update_registration_status(registration: Registration, status=None, payment_status=None) -> Registration:
    """Manual status change by an admin, e.g. confirming an offline payment."""
    fields = ["updated_at"]
    if status:
        registration.status = status
        fields.append("status")
    if payment_status:
        registration.payment_status = payment_status
        fields.append("payment_status")
    registration.save(update_fields=fields)
    logger.info(
        "Registration %s set to %s/%s", registration.id, registration.status, registration.payment_status
    )
    return registration


def list_event_registrations(event: Event, params=None):
    """Registrations for an event, filtered by ``params``.

    Attendee filters (``age_category``, ``belt_level``) restrict both the
    registrations returned and the attendees prefetched on each one.
    """
    params = params or {}
    qs = Registration.objects.filter(event=event).select_related("user").order_by("-created_at", "-id")
    filterset = RegistrationFilter(params, queryset=qs)
    if not filterset.is_valid():
        raise translate_validation(filterset.errors)
    qs = filterset.qs

    attendees = Attendee.objects.select_related("ticket")
    if params.get("age_category"):
        attendees = attendees.filter(age_category=params["age_category"])
    if params.get("belt_level"):
        attendees = attendees.filter(belt_level=params["belt_level"])
    return qs.prefetch_related(Prefetch("attendees", queryset=attendees))


def registrations_for_export(event: Event):
    return _with_details(Registration.objects.filter(event=event)).order_by("created_at", "id")
