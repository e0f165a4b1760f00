"""
Serializers for the events app.

Read serializers expose events with their categories and tickets.
``EventWriteSerializer`` is used by the admin endpoints; it accepts
``category_ids`` and a nested ``tickets`` list and hands the actual
writes to ``events.services``.
"""
from rest_framework import serializers

from .models import Category, Event, EventStatistics, Ticket


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for Category objects."""

    class Meta:
        model = Category
        fields = ["id", "name", "description", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class TicketSerializer(serializers.ModelSerializer):
    """Serializer for Ticket objects."""

    class Meta:
        model = Ticket
        fields = [
            "id",
            "event_id",
            "name",
            "description",
            "price",
            "available_from",
            "available_until",
            "max_capacity",
            "type",
        ]
        read_only_fields = ["id", "event_id"]

    def validate(self, data):
        available_from = data.get("available_from")
        available_until = data.get("available_until")
        if available_from and available_until and available_until <= available_from:
            raise serializers.ValidationError(
                {"available_until": "Availability end must be later than its start."}
            )
        return data


class EventSerializer(serializers.ModelSerializer):
    """Read serializer for events, including catalog relations."""

    categories = CategorySerializer(many=True, read_only=True)
    tickets = TicketSerializer(many=True, read_only=True)
    current_registrations = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "event_code",
            "title",
            "description",
            "start_date",
            "end_date",
            "registration_open_date",
            "registration_close_date",
            "location",
            "image_url",
            "status",
            "max_capacity",
            "admin_fee",
            "categories",
            "tickets",
            "current_registrations",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_current_registrations(self, obj) -> int:
        return getattr(obj, "current_registrations", 0)


class EventWriteSerializer(serializers.ModelSerializer):
    """Admin serializer for creating and updating events."""

    category_ids = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), many=True, required=False
    )
    tickets = TicketSerializer(many=True, required=False)

    class Meta:
        model = Event
        fields = [
            "title",
            "description",
            "start_date",
            "end_date",
            "registration_open_date",
            "registration_close_date",
            "location",
            "image_url",
            "max_capacity",
            "admin_fee",
            "category_ids",
            "tickets",
        ]

    def validate_title(self, value: str) -> str:
        if value and len(value.strip()) < 3:
            raise serializers.ValidationError("Title must be at least 3 characters long.")
        return value

    def validate(self, data):
        """
        Rules:
        - end_date must be strictly later than start_date
        - registration must close after it opens
        Missing values fall back to the instance on partial updates.
        """
        def current(name):
            if name in data:
                return data[name]
            return getattr(self.instance, name, None)

        start_date, end_date = current("start_date"), current("end_date")
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError({"end_date": "End date must be later than start date."})

        opens, closes = current("registration_open_date"), current("registration_close_date")
        if opens and closes and closes <= opens:
            raise serializers.ValidationError(
                {"registration_close_date": "Registration must close after it opens."}
            )
        return data


class EventStatisticsSerializer(serializers.ModelSerializer):
    event_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = EventStatistics
        fields = ["event_id", "total_revenue", "total_registrations", "last_updated", "created_at"]
        read_only_fields = fields
