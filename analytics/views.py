"""
Views for the analytics app.

Both endpoints are staff-only and read-only.  Query params:
``period`` (week, month, quarter, year, custom), ``start_date`` and
``end_date`` (YYYY-MM-DD); reports also take ``type``.
"""
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import views
from rest_framework.response import Response

from common.permissions import IsEventAdmin
from . import services
from .serializers import AnalyticsQuerySerializer, ReportQuerySerializer


class DashboardAnalyticsView(views.APIView):
    """KPIs, 30-day trends and charts for the admin dashboard."""

    permission_classes = [IsEventAdmin]

    @extend_schema(parameters=[AnalyticsQuerySerializer])
    def get(self, request):
        params = AnalyticsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        return Response(services.get_dashboard_analytics(**params.validated_data))


class AnalyticsReportView(views.APIView):
    permission_classes = [IsEventAdmin]

    @extend_schema(parameters=[ReportQuerySerializer])
    def get(self, request):
        params = ReportQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = dict(params.validated_data)
        report_type = data.pop("type")
        return Response(services.get_analytics_report(report_type, **data))
