from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


class PaymentsConfig(AppConfig):
    """Configuration for the payments app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"

    def ready(self) -> None:
        if not (settings.IPAYMU_API_KEY and settings.IPAYMU_MERCHANT_CODE):
            raise ImproperlyConfigured(
                "IPAYMU_API_KEY and IPAYMU_MERCHANT_CODE must be set in the environment"
            )
