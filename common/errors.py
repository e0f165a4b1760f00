"""Domain error codes shared by the registration and payment workflows.

Services raise these; the DRF exception handler in ``common.exceptions``
turns them into ``{"error": ...}`` responses with the mapped HTTP status.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    ATTENDEE_COUNT_MISMATCH = "ATTENDEE_COUNT_MISMATCH"
    REGISTRATION_ALREADY_PAID = "REGISTRATION_ALREADY_PAID"
    REGISTRATION_NOT_REFUNDABLE = "REGISTRATION_NOT_REFUNDABLE"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return self.message


class EventNotFoundError(DomainError):
    def __init__(self, event_id) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class TicketNotFoundError(DomainError):
    def __init__(self, ticket_id) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message=f"Ticket with ID {ticket_id} not found",
        )
        self.ticket_id = ticket_id


class RegistrationNotFoundError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )


class RegistrationClosedError(DomainError):
    """Raised when now is outside the event's registration window."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_CLOSED,
            message="Registration is not open for this event",
        )


class CapacityExceededError(DomainError):
    def __init__(self, ticket_name: str) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message=f"Not enough capacity for ticket {ticket_name}",
        )


class AttendeeCountMismatchError(DomainError):
    """Raised when the attendee list does not match the ticket quantities."""

    def __init__(self, attendees: int, seats: int) -> None:
        super().__init__(
            code=ErrorCode.ATTENDEE_COUNT_MISMATCH,
            message=f"Expected {seats} attendees for the selected tickets, got {attendees}",
        )


class RegistrationAlreadyPaidError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_ALREADY_PAID,
            message="Registration has already been paid",
        )


class RegistrationNotRefundableError(DomainError):
    def __init__(self, reason: str = "Only paid online registrations can be refunded") -> None:
        super().__init__(code=ErrorCode.REGISTRATION_NOT_REFUNDABLE, message=reason)


class GatewayError(DomainError):
    """Raised when the payment gateway cannot be reached or rejects a request."""

    def __init__(self, detail: str) -> None:
        super().__init__(code=ErrorCode.GATEWAY_ERROR, message=detail)


class InvalidSignatureError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.INVALID_SIGNATURE, message="Invalid signature")
