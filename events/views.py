"""
ViewSets for the events app.

``EventViewSet`` is the public, read-only catalog.  ``CategoryViewSet``
and ``AdminEventViewSet`` back the admin panel and require a staff user.
Writes go through ``events.services`` so the event, its categories and
its tickets are stored in one transaction.
"""
import logging

from django.db.models import RestrictedError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from common.permissions import IsEventAdmin
from . import services
from .models import Category, Event
from .serializers import (
    CategorySerializer,
    EventSerializer,
    EventStatisticsSerializer,
    EventWriteSerializer,
)

logger = logging.getLogger(__name__)


def _parse_category_ids(raw: str | None) -> list[int]:
    """Parse ``?category=1,2`` into a list of ints; junk values are ignored."""
    if not raw:
        return []
    return [int(part) for part in raw.split(",") if part.strip().isdigit()]


@extend_schema(
    parameters=[
        OpenApiParameter("search", str, description="Case-insensitive title match"),
        OpenApiParameter("category", str, description="Comma-separated category ids"),
        OpenApiParameter("status", str, description="OPEN, CLOSED, ACTIVE or ARCHIVED"),
    ]
)
class EventViewSet(viewsets.ReadOnlyModelViewSet):
    """Public event catalog; anonymous access is allowed."""

    serializer_class = EventSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        params = self.request.query_params
        return services.list_events(
            search=params.get("search") or None,
            category_ids=_parse_category_ids(params.get("category")),
            status=(params.get("status") or "").upper() or None,
        )

    def get_object(self):
        return services.get_event(self.kwargs["pk"])


class CategoryViewSet(viewsets.ModelViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsEventAdmin]
    pagination_class = None


class AdminEventViewSet(viewsets.ModelViewSet):
    """Admin CRUD over events, plus archive and statistics actions."""

    permission_classes = [IsEventAdmin]

    def get_queryset(self):
        params = self.request.query_params
        return services.list_events(
            search=params.get("search") or None,
            category_ids=_parse_category_ids(params.get("category")),
            status=(params.get("status") or "").upper() or None,
        )

    def get_object(self):
        return services.get_event(self.kwargs["pk"])

    def get_serializer_class(self):
        if self.action in ("create", "update", "partial_update"):
            return EventWriteSerializer
        return EventSerializer

    @staticmethod
    def _split(validated: dict):
        data = dict(validated)
        categories = data.pop("category_ids", None)
        tickets = data.pop("tickets", None)
        category_ids = [c.id for c in categories] if categories is not None else None
        return data, category_ids, tickets

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data, category_ids, tickets = self._split(serializer.validated_data)
        event = services.create_event(data, category_ids=category_ids, tickets=tickets)
        event = services.get_event(event.id)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data, category_ids, tickets = self._split(serializer.validated_data)
        try:
            services.update_event(event, data, category_ids=category_ids, tickets=tickets)
        except RestrictedError:
            raise ValidationError({"tickets": "Tickets that already have attendees cannot be replaced."})
        return Response(EventSerializer(services.get_event(event.id)).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_event(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="archive")
    def archive(self, request, pk=None):
        event = services.archive_event(self.get_object())
        return Response(EventSerializer(event).data)

    @action(detail=True, methods=["get"], url_path="statistics")
    def statistics(self, request, pk=None):
        event = self.get_object()
        stats = services.get_event_statistics(event)
        if stats is None:
            return Response({"event_id": event.id, "total_revenue": 0, "total_registrations": 0})
        return Response(EventStatisticsSerializer(stats).data)
