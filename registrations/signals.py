"""
Signal handlers for the registrations app.

Every saved change to a registration is pushed to the
``registration_<id>`` channel group once the transaction commits, so
the status page can update without polling.
"""
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Registration


def status_payload(registration: Registration) -> dict:
    return {
        "registrationId": registration.id,
        "registrationNumber": registration.registration_number,
        "status": registration.status,
        "paymentStatus": registration.payment_status,
    }


def _broadcast(registration_id: int, payload: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(
        f"registration_{registration_id}",
        {"type": "registration.status", "payload": payload},
    )


@receiver(post_save, sender=Registration)
def push_registration_status(sender, instance: Registration, created, **kwargs):
    if created:
        return
    payload = status_payload(instance)
    transaction.on_commit(lambda: _broadcast(instance.id, payload))
