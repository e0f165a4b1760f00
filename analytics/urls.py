"""
URL configuration for the analytics app.

Included under ``/api/admin/analytics/`` in the project-level URL config.
"""
from django.urls import path

from .views import AnalyticsReportView, DashboardAnalyticsView


urlpatterns = [
    path("", DashboardAnalyticsView.as_view(), name="analytics-dashboard"),
    path("reports/", AnalyticsReportView.as_view(), name="analytics-reports"),
]
