"""LPG Stations Django App Configuration."""

from django.apps import AppConfig


class LpgStationsConfig(AppConfig):
    """Configuration for the lpg_stations app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "lpg_stations"
    verbose_name = "LPG Stations"
