"""Admin routes for registrations, mounted under ``/api/admin/``."""
from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import (
    AdminEventRegistrationsExportView,
    AdminEventRegistrationsView,
    AdminRegistrationViewSet,
)

router = SimpleRouter()
router.register(r"registrations", AdminRegistrationViewSet, basename="admin-registration")

urlpatterns = router.urls + [
    path(
        "events/<int:event_id>/registrations/",
        AdminEventRegistrationsView.as_view(),
        name="admin-event-registrations",
    ),
    path(
        "events/<int:event_id>/registrations/export/",
        AdminEventRegistrationsExportView.as_view(),
        name="admin-event-registrations-export",
    ),
]
