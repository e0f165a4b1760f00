"""
Read-only aggregates for the admin dashboard.

Nothing in this module writes.  Periods resolve to a ``(start, end)``
pair of aware datetimes; either end may be ``None`` meaning unbounded.
Revenue only counts PAID registrations.
"""
from __future__ import annotations

import datetime
from datetime import timedelta

from django.db.models import Count, F, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from events.models import Event
from registrations.models import Attendee, Registration

PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_QUARTER = "quarter"
PERIOD_YEAR = "year"
PERIOD_CUSTOM = "custom"
PERIODS = (PERIOD_WEEK, PERIOD_MONTH, PERIOD_QUARTER, PERIOD_YEAR, PERIOD_CUSTOM)

REPORT_TYPES = ("revenue", "registrations", "events", "attendees")

TREND_DAYS = 30
MONTHS_BACK = 12
TOP_EVENTS = 10


def _start_of_day(d: datetime.date):
    return timezone.make_aware(datetime.datetime.combine(d, datetime.time.min))


def _end_of_day(d: datetime.date):
    return timezone.make_aware(datetime.datetime.combine(d, datetime.time.max))


def get_date_range(period: str, start_date=None, end_date=None, now=None):
    """Resolve a period name (or explicit dates) into ``(start, end)``.

    Explicit ``start_date`` and ``end_date`` win over the period name and
    cover whole days.  ``custom`` without both dates is unbounded.
    """
    if start_date and end_date:
        return _start_of_day(start_date), _end_of_day(end_date)

    now = timezone.localtime(now or timezone.now())
    today = now.date()
    if period == PERIOD_WEEK:
        return now - timedelta(weeks=1), now
    if period == PERIOD_MONTH:
        return _start_of_day(today.replace(day=1)), now
    if period == PERIOD_QUARTER:
        first_month = (today.month - 1) // 3 * 3 + 1
        return _start_of_day(today.replace(month=first_month, day=1)), now
    if period == PERIOD_YEAR:
        return _start_of_day(today.replace(month=1, day=1)), now
    return None, None


def _in_range(qs, field: str, start, end):
    if start:
        qs = qs.filter(**{f"{field}__gte": start})
    if end:
        qs = qs.filter(**{f"{field}__lte": end})
    return qs


def _paid():
    return Registration.objects.filter(payment_status=Registration.PAYMENT_PAID)


def get_dashboard_analytics(period: str = PERIOD_MONTH, start_date=None, end_date=None) -> dict:
    start, end = get_date_range(period, start_date, end_date)
    now = timezone.now()

    active_events = _in_range(Event.objects.filter(status=Event.STATUS_ACTIVE), "created_at", start, end).count()
    registrations = _in_range(Registration.objects.all(), "created_at", start, end).count()
    revenue = _in_range(_paid(), "created_at", start, end).aggregate(total=Sum("total_amount"))["total"] or 0
    attendees = _in_range(Attendee.objects.all(), "created_at", start, end).count()

    trend_start = now - timedelta(days=TREND_DAYS)
    registration_trend = (
        Registration.objects.filter(created_at__gte=trend_start, status=Registration.STATUS_CONFIRMED)
        .annotate(date=TruncDate("created_at"))
        .values("date")
        .annotate(count=Count("id"))
        .order_by("-date")[:TREND_DAYS]
    )
    revenue_trend = (
        _paid().filter(created_at__gte=trend_start)
        .annotate(date=TruncDate("created_at"))
        .values("date")
        .annotate(amount=Sum("total_amount"))
        .order_by("-date")[:TREND_DAYS]
    )
    revenue_by_month = (
        _paid().filter(created_at__gte=now - timedelta(days=365))
        .annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(revenue=Sum("total_amount"))
        .order_by("month")
    )
    by_event = (
        _in_range(Registration.objects.all(), "created_at", start, end)
        .values(event_name=F("event__title"))
        .annotate(registrations=Count("id"))
        .order_by("-registrations")[:TOP_EVENTS]
    )

    return {
        "kpis": {
            "total_events": active_events,
            "total_registrations": registrations,
            "total_revenue": int(revenue),
            "total_attendees": attendees,
        },
        "trends": {
            "registrations": [{"date": r["date"].isoformat(), "count": r["count"]} for r in registration_trend],
            "revenue": [{"date": r["date"].isoformat(), "amount": int(r["amount"] or 0)} for r in revenue_trend],
        },
        "charts": {
            "revenue_by_month": [
                {"month": r["month"].strftime("%Y-%m"), "revenue": int(r["revenue"] or 0)}
                for r in revenue_by_month
            ],
            "registrations_by_event": list(by_event),
        },
    }


def _revenue_report(start, end) -> tuple[list, int]:
    rows = list(
        _in_range(_paid(), "created_at", start, end)
        .order_by("-created_at")
        .values("registration_number", "total_amount", "created_at", event_name=F("event__title"))
    )
    return rows, sum(r["total_amount"] for r in rows)


def _registrations_report(start, end) -> tuple[list, int]:
    rows = list(
        _in_range(Registration.objects.all(), "created_at", start, end)
        .order_by("-created_at")
        .values(
            "id",
            "registration_number",
            "status",
            "payment_status",
            "total_amount",
            "created_at",
            event_name=F("event__title"),
            user_email=F("user__email"),
        )
    )
    return rows, len(rows)


def _events_report(start, end) -> tuple[list, int]:
    rows = list(
        _in_range(Event.objects.all(), "created_at", start, end)
        .order_by("-created_at")
        .values(
            "id", "title", "description", "start_date", "end_date", "location", "max_capacity", "status",
            "created_at",
        )
    )
    return rows, len(rows)


def _attendees_report(start, end) -> tuple[list, int]:
    rows = list(
        _in_range(Attendee.objects.all(), "created_at", start, end)
        .order_by("-created_at")
        .values(
            "id",
            "full_name",
            "gender",
            "age_category",
            "belt_level",
            "phone_number",
            "created_at",
            event_name=F("registration__event__title"),
            registration_number=F("registration__registration_number"),
        )
    )
    return rows, len(rows)


_REPORTS = {
    "revenue": _revenue_report,
    "registrations": _registrations_report,
    "events": _events_report,
    "attendees": _attendees_report,
}


def get_analytics_report(report_type: str, period: str = PERIOD_MONTH, start_date=None, end_date=None) -> dict:
    if report_type not in _REPORTS:
        raise ValueError(f"Invalid report type: {report_type}")
    if start_date and end_date:
        period = PERIOD_CUSTOM
    start, end = get_date_range(period, start_date, end_date)
    data, total = _REPORTS[report_type](start, end)
    return {"type": report_type, "data": data, "summary": {"total": total, "period": period}}
