"""
Gateway callback endpoint.

iPaymu POSTs the outcome of a payment to
``/api/payments/ipaymu-callback`` as JSON or form data with the fields
``id``, ``status``, ``keterangan`` and ``sign``.  The endpoint is not
authenticated; the signature is the only credential.
"""
from __future__ import annotations

import logging

from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework import views
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .services import apply_gateway_callback

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class IpaymuCallbackView(views.APIView):
    """Apply a payment outcome reported by iPaymu."""

    authentication_classes = []  # no authentication
    permission_classes = [AllowAny]
    throttle_classes = []

    def post(self, request):
        data = request.data
        transaction_id = data.get("id") or data.get("trx_id")
        if not transaction_id:
            raise ValidationError({"id": "This field is required."})

        outcome = apply_gateway_callback(
            transaction_id=str(transaction_id),
            status=data.get("status", ""),
            description=data.get("keterangan", ""),
            sign=data.get("sign", ""),
        )
        return Response({"message": outcome.message})
