"""Core Django App Configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core app (health, middleware, visit tracking)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"
    label = "core"
    verbose_name = "Core"
