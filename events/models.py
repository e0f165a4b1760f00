"""
Models for the events app (catalog store).

An `Event` owns its `Ticket` types and is tagged with zero or more
`Category` rows.  `EventStatistics` is a denormalised counter cache
updated additively when a payment is confirmed; it is never recomputed
from registrations.  All money amounts are integers in the smallest
currency unit.
"""
import uuid

from django.db import models
from django.utils import timezone


def generate_event_code() -> str:
    return f"evt-{int(timezone.now().timestamp() * 1000)}-{uuid.uuid4().hex[:8]}"


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """An event attendees can register for within its registration window."""

    STATUS_ACTIVE = "ACTIVE"
    STATUS_ARCHIVED = "ARCHIVED"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_ARCHIVED, "Archived"),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField()
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    registration_open_date = models.DateTimeField()
    registration_close_date = models.DateTimeField()
    location = models.CharField(max_length=255)
    image_url = models.URLField(max_length=500, blank=True)
    event_code = models.CharField(max_length=64, unique=True, default=generate_event_code, editable=False)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    max_capacity = models.PositiveIntegerField()
    admin_fee = models.PositiveIntegerField(default=0, help_text="Flat fee added to every registration")
    categories = models.ManyToManyField(Category, related_name="events", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["registration_open_date", "registration_close_date"], name="events_reg_window_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def is_registration_open(self, now=None) -> bool:
        now = now or timezone.now()
        return self.registration_open_date <= now <= self.registration_close_date


class Ticket(models.Model):
    """A ticket type sold for an event."""

    TYPE_ONLINE = "ONLINE"
    TYPE_ONSITE = "ONSITE"
    TYPE_CHOICES = [
        (TYPE_ONLINE, "Online"),
        (TYPE_ONSITE, "Onsite"),
    ]

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.PositiveIntegerField(help_text="Ticket price in cents")
    available_from = models.DateTimeField()
    available_until = models.DateTimeField()
    max_capacity = models.PositiveIntegerField()
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_ONLINE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.event_id})"


class EventStatistics(models.Model):
    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="statistics")
    total_revenue = models.BigIntegerField(default=0)
    total_registrations = models.PositiveIntegerField(default=0)
    last_updated = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "event statistics"

    def __str__(self) -> str:
        return f"Statistics for event {self.event_id}"
