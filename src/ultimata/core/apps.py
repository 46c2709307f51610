"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core application."""

    name = "ultimata.core"
    label = "core"
    verbose_name = "Ultimata Core"
    default_auto_field = "django.db.models.BigAutoField"
