"""User model carrying the actor role used by station authorization."""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Application user: either an administrator or a station manager.

    Attributes:
        role: "admin" or "station" (station manager)
        station: Legacy direct station pointer for station managers. Superseded
            by the assignment ledger but still honoured by the access policy.
        name: Display name shown in manager listings
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Administrator"
        STATION_MANAGER = "station", "Station Manager"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=20, choices=Role.choices, default=Role.ADMIN, db_index=True
    )
    station = models.ForeignKey(
        "lpg_stations.Station",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="legacy_managers",
        help_text="Legacy direct station pointer (see manager assignments)",
    )

    class Meta:
        db_table = "users"
        ordering = ["name", "email"]

    def __str__(self) -> str:
        return self.name or self.email or self.username

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    @property
    def is_station_manager(self) -> bool:
        return self.role == self.Role.STATION_MANAGER
