"""
Data access helpers for stations and their history tables.

Services call these instead of touching the ORM directly, so lookups that
need to translate ORM errors into domain errors live in one place.
"""

from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db.models.query import QuerySet

from .exceptions import StationNotFound
from .models import (
    AvailabilityLogEntry,
    ManagerAssignment,
    PriceHistoryEntry,
    Station,
    StationLocationHistory,
)


def get_station(station_id: Any, *, for_update: bool = False) -> Station:
    """
    Fetch a station by id.

    Args:
        station_id: Station primary key (UUID or its string form)
        for_update: Lock the row with SELECT ... FOR UPDATE; only valid
            inside `transaction.atomic()`

    Raises:
        StationNotFound: If the id is malformed or no station has it
    """
    queryset = Station.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=station_id)
    except (Station.DoesNotExist, ValidationError, ValueError) as e:
        raise StationNotFound(f"Station {station_id} not found") from e


def get_stations() -> QuerySet[Station]:
    return Station.objects.all()


def create_station(**fields: Any) -> Station:
    return Station.objects.create(**fields)


def append_availability(
    *, station: Station, is_available: bool, changed_by: Optional[Any] = None
) -> AvailabilityLogEntry:
    return AvailabilityLogEntry.objects.create(
        station=station, is_available=is_available, changed_by=changed_by
    )


def append_price(
    *, station: Station, price_per_kg: Any, updated_by: Optional[Any] = None
) -> PriceHistoryEntry:
    return PriceHistoryEntry.objects.create(
        station=station, price_per_kg=price_per_kg, updated_by=updated_by
    )


def append_location(*, station: Station) -> StationLocationHistory:
    return StationLocationHistory.objects.create(
        station=station, latitude=station.latitude, longitude=station.longitude
    )


def get_price_history(station: Station) -> QuerySet[PriceHistoryEntry]:
    """Price history newest first."""
    return PriceHistoryEntry.objects.filter(station=station).select_related("updated_by")


def get_availability_log(station: Station) -> QuerySet[AvailabilityLogEntry]:
    """Availability changes newest first."""
    return AvailabilityLogEntry.objects.filter(station=station).select_related("changed_by")


def get_active_assignment(station: Station) -> Optional[ManagerAssignment]:
    return (
        ManagerAssignment.objects.active()
        .for_station(station.pk)
        .select_related("manager", "assigned_by")
        .first()
    )


def get_assignments(station: Station) -> QuerySet[ManagerAssignment]:
    """All assignment rows of a station, newest first."""
    return ManagerAssignment.objects.for_station(station.pk).select_related(
        "manager", "assigned_by", "removed_by"
    )
