"""
URL configuration for the event registration backend.

Public endpoints live under `/api/`, staff-only management endpoints
under `/api/admin/`.  Authentication endpoints are nested under
`/api/auth/`.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
)
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from eventreg_backend.views import index


urlpatterns = [
    path("", index, name="index"),
    path("django-admin/", admin.site.urls),

    #  Swagger/Redoc
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Auth endpoints
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/auth/token/verify/", TokenVerifyView.as_view(), name="token_verify"),

    path("api/", include("events.urls")),
    path("api/", include("registrations.urls")),
    path("api/payments/", include("payments.urls")),
    path("api/admin/", include("events.admin_urls")),
    path("api/admin/", include("registrations.admin_urls")),
    path("api/admin/analytics/", include("analytics.urls")),
]
