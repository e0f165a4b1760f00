"""Query-parameter validation for the analytics endpoints."""
from rest_framework import serializers

from .services import PERIOD_CUSTOM, PERIOD_MONTH, PERIODS, REPORT_TYPES


class AnalyticsQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=PERIODS, default=PERIOD_MONTH)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, data):
        start, end = data.get("start_date"), data.get("end_date")
        if data["period"] == PERIOD_CUSTOM and not (start and end):
            raise serializers.ValidationError("Invalid period or missing custom date range")
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must not be before start date."})
        return data


class ReportQuerySerializer(AnalyticsQuerySerializer):
    type = serializers.ChoiceField(choices=REPORT_TYPES, default="revenue")
