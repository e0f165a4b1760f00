from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import DashboardRegistrationsView, EventRegisterView, RegistrationViewSet

router = SimpleRouter()
router.register(r"registrations", RegistrationViewSet, basename="registration")

urlpatterns = router.urls + [
    path("events/<int:event_id>/register/", EventRegisterView.as_view(), name="event-register"),
    path("dashboard/registrations/", DashboardRegistrationsView.as_view(), name="dashboard-registrations"),
]
