"""
FilterSet for the admin registration listing.

``status`` and ``payment_status`` filter the registration itself;
``age_category`` and ``belt_level`` keep registrations that have at
least one matching attendee.
"""
import django_filters

from .models import Attendee, Registration


class RegistrationFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Registration.STATUS_CHOICES)
    payment_status = django_filters.ChoiceFilter(choices=Registration.PAYMENT_STATUS_CHOICES)
    age_category = django_filters.ChoiceFilter(
        field_name="attendees__age_category", choices=Attendee.AGE_CATEGORY_CHOICES, distinct=True
    )
    belt_level = django_filters.ChoiceFilter(
        field_name="attendees__belt_level", choices=Attendee.BELT_LEVEL_CHOICES, distinct=True
    )

    class Meta:
        model = Registration
        fields = ["status", "payment_status", "age_category", "belt_level"]
