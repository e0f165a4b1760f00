"""
Models for the registrations app.

A `Registration` is one checkout for an event by one user; it covers one
or more `Attendee` rows, each tied to the ticket it occupies.  The
stored ``total_amount`` is computed once at creation and never
recomputed.
"""
from django.conf import settings
from django.db import models

from events.models import Event, Ticket


class Registration(models.Model):
    STATUS_PENDING = "PENDING"
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_CANCELLED = "CANCELLED"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_ONLINE = "ONLINE"
    PAYMENT_OFFLINE = "OFFLINE"
    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_ONLINE, "Online"),
        (PAYMENT_OFFLINE, "Offline"),
    ]

    PAYMENT_PENDING = "PENDING"
    PAYMENT_PAID = "PAID"
    PAYMENT_FAILED = "FAILED"
    PAYMENT_REFUNDED = "REFUNDED"
    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_FAILED, "Failed"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    registration_number = models.CharField(max_length=64, unique=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(
        max_length=16, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING, db_index=True
    )
    total_amount = models.PositiveIntegerField()
    admin_fee = models.PositiveIntegerField(default=0)
    payment_id = models.CharField(max_length=128, blank=True, null=True, db_index=True)
    invoice_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.registration_number


class Attendee(models.Model):
    """One named participant occupying a ticket slot."""

    AGE_TK = "TK"
    AGE_SD = "SD"
    AGE_SMP = "SMP"
    AGE_SMA = "SMA"
    AGE_CATEGORY_CHOICES = [
        (AGE_TK, "TK"),
        (AGE_SD, "SD"),
        (AGE_SMP, "SMP"),
        (AGE_SMA, "SMA"),
    ]

    BELT_DASAR = "DASAR"
    BELT_MC_I = "MC_I"
    BELT_MC_II = "MC_II"
    BELT_MC_III = "MC_III"
    BELT_MC_IV = "MC_IV"
    BELT_LEVEL_CHOICES = [
        (BELT_DASAR, "Dasar"),
        (BELT_MC_I, "MC I"),
        (BELT_MC_II, "MC II"),
        (BELT_MC_III, "MC III"),
        (BELT_MC_IV, "MC IV"),
    ]

    registration = models.ForeignKey(Registration, on_delete=models.CASCADE, related_name="attendees")
    # A ticket with attendees can only go away together with its event.
    ticket = models.ForeignKey(Ticket, on_delete=models.RESTRICT, related_name="attendees")
    full_name = models.CharField(max_length=255)
    gender = models.CharField(max_length=20)
    age_category = models.CharField(max_length=8, choices=AGE_CATEGORY_CHOICES)
    belt_level = models.CharField(max_length=8, choices=BELT_LEVEL_CHOICES)
    phone_number = models.CharField(max_length=32)
    biodata_url = models.URLField(max_length=500, blank=True)
    consent_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.full_name
