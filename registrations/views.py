"""
API views for the registrations app.

User-facing endpoints cover checkout (``POST /api/events/{id}/register/``),
the registration detail and status page, restarting payment, adding
attendees and the user dashboard.  Admin endpoints list, export and
manually update registrations.
"""
import logging

from django.http import HttpResponse
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.errors import RegistrationNotFoundError
from common.pagination import RegistrationPagination
from common.permissions import IsEventAdmin, IsRegistrationOwner
from events.services import get_event
from payments.services import refund_registration
from . import services
from .exports import export_registrations_csv
from .serializers import (
    AddAttendeesSerializer,
    PaymentRequestSerializer,
    RegisterSerializer,
    RegistrationResultSerializer,
    RegistrationSerializer,
    RegistrationStatusSerializer,
)

logger = logging.getLogger(__name__)


class EventRegisterView(APIView):
    """Register the caller's attendees for an event."""

    permission_classes = [IsAuthenticated]

    @extend_schema(request=RegisterSerializer, responses=RegistrationResultSerializer)
    def post(self, request, event_id):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = services.create_registration(
            event_id=event_id,
            user=request.user,
            ticket_selections=data["ticket_selections"],
            attendees_data=data["attendees_data"],
            payment_method=data["payment_method"],
        )
        return Response(RegistrationResultSerializer(result).data, status=status.HTTP_201_CREATED)


class RegistrationViewSet(viewsets.GenericViewSet):
    """A registration as seen by its owner."""

    permission_classes = [IsAuthenticated, IsRegistrationOwner]
    serializer_class = RegistrationSerializer

    def get_object(self):
        registration = services.get_registration_details(self.kwargs["pk"])
        self.check_object_permissions(self.request, registration)
        return registration

    def _owned(self):
        """Like get_object, but a registration owned by someone else is reported as missing."""
        registration = services.get_registration_details(self.kwargs["pk"])
        if registration.user_id != self.request.user.id:
            raise RegistrationNotFoundError()
        return registration

    def retrieve(self, request, pk=None):
        return Response({"registration": RegistrationSerializer(self.get_object()).data})

    @extend_schema(request=PaymentRequestSerializer, responses=RegistrationResultSerializer)
    @action(detail=True, methods=["post"], url_path="payment")
    def payment(self, request, pk=None):
        registration = self._owned()
        serializer = PaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.process_registration_payment(
            registration, serializer.validated_data["payment_method"]
        )
        return Response(RegistrationResultSerializer(result).data)

    @extend_schema(request=AddAttendeesSerializer, responses=RegistrationSerializer)
    @action(detail=True, methods=["post"], url_path="attendees")
    def attendees(self, request, pk=None):
        registration = self._owned()
        serializer = AddAttendeesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = services.add_attendees(registration, serializer.validated_data["attendees_data"])
        return Response({"registration": RegistrationSerializer(registration).data})


class DashboardRegistrationsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses=RegistrationSerializer(many=True))
    def get(self, request):
        registrations = services.list_user_registrations(request.user)
        return Response({"registrations": RegistrationSerializer(registrations, many=True).data})


class AdminEventRegistrationsView(generics.ListAPIView):
    """
    Registrations for one event.

    Query params: ``age_category``, ``belt_level``, ``status``,
    ``payment_status``, ``page`` and ``limit``.
    """

    permission_classes = [IsEventAdmin]
    serializer_class = RegistrationSerializer
    pagination_class = RegistrationPagination
    filter_backends = []

    def get_queryset(self):
        event = get_event(self.kwargs["event_id"])
        return services.list_event_registrations(event, self.request.query_params)


class AdminEventRegistrationsExportView(APIView):
    permission_classes = [IsEventAdmin]

    def get(self, request, event_id):
        event = get_event(event_id)
        response = HttpResponse(export_registrations_csv(event), content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="event-{event.id}-registrations.csv"'
        return response


class AdminRegistrationViewSet(viewsets.GenericViewSet):
    permission_classes = [IsEventAdmin]
    serializer_class = RegistrationSerializer

    def get_object(self):
        return services.get_registration_details(self.kwargs["pk"])

    @extend_schema(request=RegistrationStatusSerializer, responses=RegistrationSerializer)
    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        registration = self.get_object()
        serializer = RegistrationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.update_registration_status(
            registration,
            status=serializer.validated_data.get("status"),
            payment_status=serializer.validated_data.get("payment_status"),
        )
        return Response(RegistrationSerializer(self.get_object()).data)

    @extend_schema(request=None, responses=RegistrationSerializer)
    @action(detail=True, methods=["post"], url_path="refund")
    def refund(self, request, pk=None):
        registration = refund_registration(self.get_object())
        logger.info("Registration %s refunded by %s", registration.id, request.user.pk)
        return Response(RegistrationSerializer(self.get_object()).data)
