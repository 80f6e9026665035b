"""Django application configuration for core."""

from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    """Configuration class for the notification engine app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Notification engine"

    def ready(self) -> None:
        """Configure structured logging outside of test runs."""
        if not getattr(settings, "TEST_MODE", False):
            from core.logging import setup_logging  # noqa: PLC0415

            setup_logging()
