"""
Payment state changes driven by the gateway.

``apply_gateway_callback`` handles iPaymu's notify POST: it checks the
signature, then moves the matching registration to PAID/CONFIRMED
(adding it to the event statistics) or, while still PENDING, to
FAILED/CANCELLED.  A verified success also recovers a FAILED
registration.  Registrations that were already paid never move again,
so a repeated callback leaves the statistics alone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.errors import (
    InvalidSignatureError,
    RegistrationNotFoundError,
    RegistrationNotRefundableError,
)
from events.models import EventStatistics
from registrations.models import Registration
from registrations.tasks import send_confirmation_email
from .ipaymu import STATUS_FAILURE, STATUS_SUCCESS, get_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallbackOutcome:
    CONFIRMED = "confirmed"
    FAILED = "failed"
    ALREADY_PROCESSED = "already_processed"
    UNHANDLED = "unhandled"

    result: str
    message: str
    registration_id: int | None = None


def _locked_registration(transaction_id: str) -> Registration:
    registration = (
        Registration.objects.select_for_update().filter(payment_id=transaction_id).first()
    )
    if registration is None:
        logger.warning("Callback for unknown transaction %s", transaction_id)
        raise RegistrationNotFoundError()
    return registration


def record_paid_registration(registration: Registration) -> None:
    """Add a paid registration to its event's statistics."""
    stats, _ = EventStatistics.objects.select_for_update().get_or_create(event_id=registration.event_id)
    EventStatistics.objects.filter(pk=stats.pk).update(
        total_revenue=F("total_revenue") + registration.total_amount,
        total_registrations=F("total_registrations") + 1,
        last_updated=timezone.now(),
    )


@transaction.atomic
def _confirm(transaction_id: str) -> CallbackOutcome:
    registration = _locked_registration(transaction_id)
    if registration.payment_status in (Registration.PAYMENT_PAID, Registration.PAYMENT_REFUNDED):
        logger.info("Callback for %s ignored: payment already %s", transaction_id, registration.payment_status)
        return CallbackOutcome(CallbackOutcome.ALREADY_PROCESSED, "Payment already processed", registration.id)

    registration.payment_status = Registration.PAYMENT_PAID
    registration.status = Registration.STATUS_CONFIRMED
    registration.save(update_fields=["payment_status", "status", "updated_at"])
    record_paid_registration(registration)

    registration_id = registration.id
    transaction.on_commit(lambda: send_confirmation_email.delay(registration_id))
    logger.info("Payment confirmed for registration %s (%s)", registration.registration_number, transaction_id)
    return CallbackOutcome(CallbackOutcome.CONFIRMED, "Payment confirmed successfully", registration.id)


@transaction.atomic
def _fail(transaction_id: str) -> CallbackOutcome:
    registration = _locked_registration(transaction_id)
    if registration.payment_status != Registration.PAYMENT_PENDING:
        return CallbackOutcome(CallbackOutcome.ALREADY_PROCESSED, "Payment already processed", registration.id)

    registration.payment_status = Registration.PAYMENT_FAILED
    registration.status = Registration.STATUS_CANCELLED
    registration.save(update_fields=["payment_status", "status", "updated_at"])
    logger.info("Payment failed for registration %s (%s)", registration.registration_number, transaction_id)
    return CallbackOutcome(CallbackOutcome.FAILED, "Payment failed", registration.id)


def apply_gateway_callback(transaction_id: str, status: str, description: str = "", sign: str = "") -> CallbackOutcome:
    """Apply an iPaymu notify callback.

    Raises:
        InvalidSignatureError: the signature does not match; nothing changes.
        RegistrationNotFoundError: no registration carries ``transaction_id``.
    """
    if not get_client().verify_callback_signature(sign):
        logger.warning("Rejected callback for transaction %s: invalid signature", transaction_id)
        raise InvalidSignatureError()

    if status == STATUS_SUCCESS:
        return _confirm(transaction_id)
    if status == STATUS_FAILURE:
        return _fail(transaction_id)

    logger.info("Unhandled callback status %r for transaction %s (%s)", status, transaction_id, description)
    return CallbackOutcome(CallbackOutcome.UNHANDLED, f"Unhandled status: {status}")


@transaction.atomic
def refund_registration(registration: Registration) -> Registration:
    """Refund a paid online registration through the gateway.

    Event statistics are not reduced.
    """
    registration = Registration.objects.select_for_update().get(pk=registration.pk)
    if registration.payment_status != Registration.PAYMENT_PAID:
        raise RegistrationNotRefundableError("Only paid registrations can be refunded")
    if registration.payment_method != Registration.PAYMENT_ONLINE or not registration.payment_id:
        raise RegistrationNotRefundableError("Only online payments can be refunded through the gateway")

    get_client().refund_transaction(registration.payment_id, amount=registration.total_amount)
    registration.payment_status = Registration.PAYMENT_REFUNDED
    registration.status = Registration.STATUS_CANCELLED
    registration.save(update_fields=["payment_status", "status", "updated_at"])
    logger.info("Registration %s refunded", registration.registration_number)
    return registration
