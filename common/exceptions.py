"""
DRF exception handling for the project.

Every API error leaves the server as ``{"error": "<message>"}``.  Domain
errors are mapped to HTTP statuses by their code; DRF's own exceptions
keep their status code.  Validation errors also expose the per-field
messages under ``"fields"``.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_CLOSED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ATTENDEE_COUNT_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REGISTRATION_ALREADY_PAID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REGISTRATION_NOT_REFUNDABLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SIGNATURE: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.GATEWAY_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _first_message(data):
    """Pick a human-readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for key, value in data.items():
            message = _first_message(value)
            if message:
                return message if key == "non_field_errors" else f"{key}: {message}"
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def api_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        http_status = STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST)
        if http_status >= 500:
            logger.error("Domain error %s: %s", exc.code.value, exc.message)
        return Response({"error": exc.message, "code": exc.code.value}, status=http_status)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled API error", exc_info=exc)
        return Response(
            {"error": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {"error": _first_message(response.data) or "Request failed"}
    if isinstance(response.data, dict) and "detail" not in response.data:
        payload["fields"] = response.data
    elif isinstance(response.data, list):
        payload["fields"] = response.data
    response.data = payload
    return response
