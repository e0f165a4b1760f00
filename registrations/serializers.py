"""
Serializers for the registrations app.

Request bodies posted by the registration pages use camelCase keys
(``ticketSelections``, ``attendeesData``, ``paymentMethod`` ...); each
field maps onto the snake_case name the services expect through
``source``.  Response serializers use the model field names.
"""
from rest_framework import serializers

from events.models import Ticket
from .models import Attendee, Registration


class TicketSelectionSerializer(serializers.Serializer):
    ticketId = serializers.IntegerField(source="ticket_id")
    quantity = serializers.IntegerField(min_value=1)


class AttendeeInputSerializer(serializers.Serializer):
    fullName = serializers.CharField(source="full_name", max_length=255)
    gender = serializers.CharField(max_length=20)
    ageCategory = serializers.ChoiceField(source="age_category", choices=Attendee.AGE_CATEGORY_CHOICES)
    beltLevel = serializers.ChoiceField(source="belt_level", choices=Attendee.BELT_LEVEL_CHOICES)
    phoneNumber = serializers.CharField(source="phone_number", max_length=32)
    biodataUrl = serializers.URLField(source="biodata_url", required=False, allow_blank=True, allow_null=True)
    consentUrl = serializers.URLField(source="consent_url", required=False, allow_blank=True, allow_null=True)


class AttendeeWithTicketSerializer(AttendeeInputSerializer):
    ticketId = serializers.IntegerField(source="ticket_id")


class RegisterSerializer(serializers.Serializer):
    """Body of ``POST /api/events/{id}/register/``."""

    ticketSelections = TicketSelectionSerializer(source="ticket_selections", many=True, allow_empty=False)
    attendeesData = AttendeeInputSerializer(source="attendees_data", many=True, allow_empty=False)
    paymentMethod = serializers.ChoiceField(
        source="payment_method", choices=Registration.PAYMENT_METHOD_CHOICES
    )

    def validate(self, attrs):
        seats = sum(s["quantity"] for s in attrs["ticket_selections"])
        if len(attrs["attendees_data"]) != seats:
            raise serializers.ValidationError(
                {"attendeesData": f"Expected {seats} attendees for the selected tickets"}
            )
        return attrs


class PaymentRequestSerializer(serializers.Serializer):
    paymentMethod = serializers.ChoiceField(
        source="payment_method", choices=Registration.PAYMENT_METHOD_CHOICES
    )


class AddAttendeesSerializer(serializers.Serializer):
    attendeesData = AttendeeWithTicketSerializer(source="attendees_data", many=True, allow_empty=False)


class RegistrationResultSerializer(serializers.Serializer):
    registrationId = serializers.IntegerField(source="registration_id")
    registrationNumber = serializers.CharField(source="registration_number")
    paymentUrl = serializers.URLField(source="payment_url", required=False)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not data.get("paymentUrl"):
            data.pop("paymentUrl", None)
        return data


class TicketBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ticket
        fields = ["id", "name", "price", "type"]


class AttendeeSerializer(serializers.ModelSerializer):
    ticket = TicketBriefSerializer(read_only=True)

    class Meta:
        model = Attendee
        fields = [
            "id",
            "full_name",
            "gender",
            "age_category",
            "belt_level",
            "phone_number",
            "biodata_url",
            "consent_url",
            "ticket",
            "created_at",
        ]


class RegistrationSerializer(serializers.ModelSerializer):
    """Registration with its attendees, a short event summary and the registrant."""

    attendees = AttendeeSerializer(many=True, read_only=True)
    event = serializers.SerializerMethodField()
    user = serializers.SerializerMethodField()

    class Meta:
        model = Registration
        fields = [
            "id",
            "registration_number",
            "status",
            "payment_method",
            "payment_status",
            "total_amount",
            "admin_fee",
            "payment_id",
            "invoice_url",
            "event",
            "user",
            "attendees",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_event(self, obj) -> dict:
        event = obj.event
        return {
            "id": event.id,
            "title": event.title,
            "start_date": event.start_date,
            "end_date": event.end_date,
            "location": event.location,
        }

    def get_user(self, obj) -> dict:
        user = obj.user
        return {"id": user.id, "name": user.get_full_name() or user.get_username(), "email": user.email}


class RegistrationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Registration.STATUS_CHOICES, required=False)
    payment_status = serializers.ChoiceField(choices=Registration.PAYMENT_STATUS_CHOICES, required=False)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError("Provide status or payment_status.")
        return data
