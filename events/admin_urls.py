"""Admin routes for the catalog, mounted under ``/api/admin/``."""
from rest_framework.routers import SimpleRouter

from .views import AdminEventViewSet, CategoryViewSet

router = SimpleRouter()
router.register(r"categories", CategoryViewSet, basename="admin-category")
router.register(r"events", AdminEventViewSet, basename="admin-event")

urlpatterns = router.urls
