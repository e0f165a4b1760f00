"""
Catalog operations for events, tickets and categories.

Writes that touch more than one table (event + categories + tickets)
run inside a single transaction.  Listing annotates every event with
``current_registrations`` taken from the statistics counter cache.
"""
import logging

from django.db import transaction
from django.utils import timezone

from common.errors import EventNotFoundError
from .models import Event, EventStatistics, Ticket

logger = logging.getLogger(__name__)

LISTING_OPEN = "OPEN"
LISTING_CLOSED = "CLOSED"

_EVENT_FIELDS = (
    "title",
    "description",
    "start_date",
    "end_date",
    "registration_open_date",
    "registration_close_date",
    "location",
    "image_url",
    "max_capacity",
    "admin_fee",
)


def _replace_tickets(event: Event, tickets: list[dict]) -> None:
    event.tickets.all().delete()
    Ticket.objects.bulk_create([Ticket(event=event, **data) for data in tickets])


@transaction.atomic
def create_event(data: dict, category_ids=None, tickets=None) -> Event:
    """Create an event together with its categories and ticket types."""
    event = Event.objects.create(**{k: v for k, v in data.items() if k in _EVENT_FIELDS})
    if category_ids:
        event.categories.set(category_ids)
    if tickets:
        Ticket.objects.bulk_create([Ticket(event=event, **t) for t in tickets])
    logger.info("Created event %s (%s)", event.id, event.event_code)
    return event


@transaction.atomic
def update_event(event: Event, data: dict, category_ids=None, tickets=None) -> Event:
    """Update event fields.

    ``category_ids`` and ``tickets`` replace the current sets when given
    (an empty list clears them); ``None`` leaves them untouched.
    """
    changed = [k for k in data if k in _EVENT_FIELDS]
    for field in changed:
        setattr(event, field, data[field])
    if changed:
        event.save(update_fields=changed + ["updated_at"])
    if category_ids is not None:
        event.categories.set(category_ids)
    if tickets is not None:
        _replace_tickets(event, tickets)
    return event


def get_event(event_id) -> Event:
    try:
        return Event.objects.prefetch_related("categories", "tickets").get(pk=event_id)
    except (Event.DoesNotExist, ValueError, TypeError):
        raise EventNotFoundError(event_id)


def list_events(search: str | None = None, category_ids=None, status: str | None = None):
    """Return events newest first, each annotated with ``current_registrations``.

    ``status`` is either an event status (ACTIVE/ARCHIVED) or one of the
    listing states ``OPEN`` (registration window contains now) and
    ``CLOSED`` (registration window has ended).
    """
    now = timezone.now()
    qs = Event.objects.prefetch_related("categories", "tickets").select_related("statistics")
    if search:
        qs = qs.filter(title__icontains=search)
    if status == LISTING_OPEN:
        qs = qs.filter(registration_open_date__lte=now, registration_close_date__gte=now)
    elif status == LISTING_CLOSED:
        qs = qs.filter(registration_close_date__lt=now)
    elif status:
        qs = qs.filter(status=status)
    if category_ids:
        qs = qs.filter(categories__id__in=category_ids).distinct()

    events = list(qs.order_by("-created_at"))
    for event in events:
        event.current_registrations = (
            event.statistics.total_registrations if _has_statistics(event) else 0
        )
    return events


def _has_statistics(event: Event) -> bool:
    try:
        event.statistics
    except EventStatistics.DoesNotExist:
        return False
    return True


def archive_event(event: Event) -> Event:
    event.status = Event.STATUS_ARCHIVED
    event.save(update_fields=["status", "updated_at"])
    logger.info("Archived event %s", event.id)
    return event


@transaction.atomic
def delete_event(event: Event) -> None:
    """Delete an event and everything hanging off it.

    Tickets, category links, statistics, registrations and their
    attendees go with it.
    """
    event_id = event.id
    event.categories.clear()
    EventStatistics.objects.filter(event=event).delete()
    event.delete()
    logger.info("Deleted event %s", event_id)


def get_event_statistics(event: Event) -> EventStatistics | None:
    return EventStatistics.objects.filter(event=event).first()
