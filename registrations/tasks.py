"""
Celery tasks for the registrations app.

The confirmation email is sent out of band once a payment has been
confirmed, so the gateway callback never waits on SMTP.
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import Registration

logger = logging.getLogger(__name__)


@shared_task
def send_confirmation_email(registration_id: int) -> None:
    """Email the registrant that their registration is confirmed."""
    registration = (
        Registration.objects.select_related("event", "user").filter(pk=registration_id).first()
    )
    if registration is None:
        logger.warning("Confirmation email skipped: registration %s not found", registration_id)
        return
    user = registration.user
    if not user.email:
        logger.warning("Confirmation email skipped: user %s has no email", user.pk)
        return

    event = registration.event
    name = user.get_full_name() or user.get_username()
    body = (
        f"Dear {name},\n\n"
        f"Your registration for {event.title} has been confirmed.\n\n"
        f"Registration Number: {registration.registration_number}\n"
        f"Event Date: {event.start_date:%Y-%m-%d %H:%M}\n"
        f"Total Amount: Rp. {registration.total_amount / 100:.2f}\n\n"
        "Thank you for registering!"
    )
    send_mail(
        subject=f"Registration Confirmation for {event.title}",
        message=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
    )
    logger.info("Confirmation email sent for registration %s", registration.registration_number)
