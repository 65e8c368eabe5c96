"""Station, station history and manager assignment models."""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone

from apps.core.models import TimestampedModel


class StationQuerySet(models.QuerySet):
    """Common station filters."""

    def active(self) -> "StationQuerySet":
        """Stations that are open for business (not permanently closed)."""
        return self.filter(is_active=True)

    def available(self) -> "StationQuerySet":
        """Stations currently able to serve customers."""
        return self.filter(is_available=True)

    def assigned(self) -> "StationQuerySet":
        """Stations with an active manager assignment."""
        return self.filter(Exists(_active_assignments_for_outer_station()))

    def unassigned(self) -> "StationQuerySet":
        """Stations without an active manager assignment."""
        return self.filter(~Exists(_active_assignments_for_outer_station()))

    def within_box(self, bbox: dict[str, float]) -> "StationQuerySet":
        """Pre-filter by a bounding box from `utils.geo.get_bounding_box`."""
        return self.filter(
            latitude__gte=bbox["lat_min"],
            latitude__lte=bbox["lat_max"],
            longitude__gte=bbox["lon_min"],
            longitude__lte=bbox["lon_max"],
        )


class Station(TimestampedModel):
    """
    Model representing an LPG refill station.

    Attributes:
        name: Station name
        address: Street address
        phone: Contact phone number
        email: Contact email (unique)
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        is_available: Whether the station can currently serve (toggled often)
        is_active: Whether the station is open at all (permanent open/closed)
        price_per_kg: Current price; the latest entry of the price history
        operating_hours: Free-text opening hours
        image: Optional picture URL
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    address = models.TextField()
    phone = models.CharField(max_length=20)
    email = models.EmailField(unique=True)
    latitude = models.DecimalField(
        max_digits=10,
        decimal_places=7,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    longitude = models.DecimalField(
        max_digits=10,
        decimal_places=7,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    price_per_kg = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    operating_hours = models.CharField(max_length=100)
    image = models.URLField(max_length=500, null=True, blank=True)

    objects = StationQuerySet.as_manager()

    class Meta:
        db_table = "stations"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["latitude", "longitude"], name="idx_stations_location"),
            models.Index(fields=["is_available"], name="idx_stations_is_available"),
            models.Index(fields=["updated_at"], name="idx_stations_updated_at"),
        ]
        verbose_name = "Station"
        verbose_name_plural = "Stations"

    def __str__(self) -> str:
        return self.name


class AvailabilityLogEntry(models.Model):
    """Append-only record of one availability change."""

    station = models.ForeignKey(
        Station, on_delete=models.CASCADE, related_name="availability_log"
    )
    is_available = models.BooleanField()
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="availability_changes",
    )
    changed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "station_availability_log"
        ordering = ["-changed_at", "-id"]
        indexes = [
            models.Index(fields=["station", "changed_at"], name="idx_availability_log_station"),
        ]

    def __str__(self) -> str:
        state = "available" if self.is_available else "unavailable"
        return f"{self.station_id} {state} @ {self.changed_at:%Y-%m-%d %H:%M}"


class PriceHistoryEntry(models.Model):
    """Append-only record of one price change."""

    station = models.ForeignKey(
        Station, on_delete=models.CASCADE, related_name="price_history"
    )
    price_per_kg = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    effective_from = models.DateTimeField(default=timezone.now)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="price_changes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "price_history"
        ordering = ["-effective_from", "-id"]
        indexes = [
            models.Index(fields=["station", "effective_from"], name="idx_price_history_station"),
        ]
        verbose_name_plural = "Price history"

    def __str__(self) -> str:
        return f"{self.station_id} {self.price_per_kg}/kg from {self.effective_from:%Y-%m-%d}"


class StationLocationHistory(models.Model):
    """Coordinates a station has been recorded at."""

    station = models.ForeignKey(
        Station, on_delete=models.CASCADE, related_name="location_history"
    )
    latitude = models.DecimalField(max_digits=10, decimal_places=7)
    longitude = models.DecimalField(max_digits=10, decimal_places=7)
    recorded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "station_location_history"
        ordering = ["-recorded_at", "-id"]
        indexes = [
            models.Index(fields=["station", "recorded_at"], name="idx_location_history_station"),
        ]
        verbose_name_plural = "Station location history"


class ManagerAssignmentQuerySet(models.QuerySet):
    def active(self) -> "ManagerAssignmentQuerySet":
        return self.filter(removed_at__isnull=True)

    def for_station(self, station_id) -> "ManagerAssignmentQuerySet":
        return self.filter(station_id=station_id)

    def for_manager(self, manager_id) -> "ManagerAssignmentQuerySet":
        return self.filter(manager_id=manager_id)


class ManagerAssignment(TimestampedModel):
    """
    One interval during which a manager was accountable for a station.

    A row is active while `removed_at` is null. Rows are closed, never deleted,
    so the table is the full manager history of every station. At most one
    active row may exist per station.
    """

    manager = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="manager_assignments",
    )
    station = models.ForeignKey(
        Station, on_delete=models.CASCADE, related_name="manager_assignments"
    )
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="assignments_made",
    )
    assigned_at = models.DateTimeField(default=timezone.now)
    removed_at = models.DateTimeField(null=True, blank=True)
    removed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments_removed",
    )
    removal_reason = models.CharField(max_length=255, null=True, blank=True)

    objects = ManagerAssignmentQuerySet.as_manager()

    class Meta:
        db_table = "station_manager_assignments"
        ordering = ["-assigned_at", "-id"]
        indexes = [
            models.Index(fields=["station"], name="idx_assignments_station"),
            models.Index(fields=["manager"], name="idx_assignments_manager"),
            models.Index(fields=["station", "removed_at"], name="idx_assignments_active"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["station"],
                condition=Q(removed_at__isnull=True),
                name="uniq_active_assignment_per_station",
            ),
        ]

    def __str__(self) -> str:
        state = "active" if self.is_active else "removed"
        return f"{self.manager_id} -> {self.station_id} ({state})"

    @property
    def is_active(self) -> bool:
        return self.removed_at is None


def _active_assignments_for_outer_station() -> ManagerAssignmentQuerySet:
    return ManagerAssignment.objects.filter(
        station=OuterRef("pk"), removed_at__isnull=True
    )
