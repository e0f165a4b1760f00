from django.apps import AppConfig


class RegistrationsConfig(AppConfig):
    """Configuration for the registrations app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "registrations"

    def ready(self) -> None:
        # Import signal handlers
        from . import signals  # noqa: F401
