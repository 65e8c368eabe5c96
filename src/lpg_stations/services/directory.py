"""Station directory: radius search, state changes with history, and station CRUD."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from django.conf import settings
from django.db import transaction
from django.db.models.query import QuerySet

from lpg_stations import repositories
from lpg_stations.exceptions import InvalidDomainValue
from lpg_stations.models import (
    AvailabilityLogEntry,
    PriceHistoryEntry,
    Station,
)
from lpg_stations.services.ranking import NearbyResult, rank_nearby
from lpg_stations.utils.geo import get_bounding_box, haversine_km

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "price_per_kg", "distance")


def _validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90 <= float(latitude) <= 90:
        raise InvalidDomainValue(f"Latitude {latitude} is outside [-90, 90]")
    if not -180 <= float(longitude) <= 180:
        raise InvalidDomainValue(f"Longitude {longitude} is outside [-180, 180]")


def _to_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidDomainValue(f"Invalid price: {value}") from e
    if not price.is_finite() or price < 0:
        raise InvalidDomainValue("Price per kg must be zero or greater")
    return price


class StationDirectoryService:
    """
    Owns every read and write of station state.

    State changes that have a history table (availability, price, location)
    write the history row and the current value in the same transaction,
    with the station row locked.
    """

    def __init__(self) -> None:
        self.default_radius_km = settings.STATION_SEARCH_DEFAULT_RADIUS_KM

    # Search

    def find_within_radius(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        queryset: Optional[QuerySet[Station]] = None,
    ) -> list[Station]:
        """
        Return active stations within `radius_km` of a point, nearest first.

        A bounding box narrows the candidates in SQL; the exact Haversine
        distance then decides membership. A station exactly `radius_km` away
        is included. Each returned station has a `distance_km` attribute.

        Raises:
            InvalidDomainValue: On out-of-range coordinates or a non-positive radius
        """
        _validate_coordinates(latitude, longitude)
        if radius_km is None or float(radius_km) <= 0:
            raise InvalidDomainValue("Radius must be greater than zero")

        latitude, longitude, radius_km = float(latitude), float(longitude), float(radius_km)
        bbox = get_bounding_box(latitude, longitude, radius_km)

        if queryset is None:
            queryset = Station.objects.all()
        candidates = queryset.active().within_box(bbox)

        results: list[Station] = []
        for station in candidates:
            distance = haversine_km(
                latitude, longitude, float(station.latitude), float(station.longitude)
            )
            if distance <= radius_km:
                station.distance_km = distance
                results.append(station)

        results.sort(key=lambda s: (s.distance_km, str(s.pk)))
        return results

    def search_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None,
        available_only: bool = False,
    ) -> NearbyResult:
        """Radius search ranked available-first, then by distance."""
        radius_km = radius_km or self.default_radius_km
        stations = self.find_within_radius(latitude, longitude, radius_km)
        result = rank_nearby(stations, available_only=available_only)

        logger.info(
            "Nearby search completed.",
            extra={
                "radius_km": radius_km,
                "available_count": result.available_count,
                "unavailable_count": result.unavailable_count,
                "available_only": available_only,
            },
        )
        return result

    # State changes

    def set_availability(
        self, station_id: Any, is_available: bool, actor: Optional[Any] = None
    ) -> Station:
        """
        Record an availability change and update the station.

        One log row is written per call, even when the value does not change.
        """
        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)
            repositories.append_availability(
                station=station, is_available=is_available, changed_by=actor
            )
            station.is_available = is_available
            station.save(update_fields=["is_available", "updated_at"])

        logger.info(
            "Station availability updated.",
            extra={
                "station_id": str(station.pk),
                "is_available": is_available,
                "actor_id": str(actor.pk) if actor else None,
            },
        )
        return station

    def set_price(
        self, station_id: Any, price_per_kg: Any, actor: Optional[Any] = None
    ) -> Station:
        """
        Record a new price and make it the station's current price.

        Raises:
            InvalidDomainValue: If the price is negative or not a number
        """
        price = _to_price(price_per_kg)

        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)
            repositories.append_price(station=station, price_per_kg=price, updated_by=actor)
            station.price_per_kg = price
            station.save(update_fields=["price_per_kg", "updated_at"])

        logger.info(
            "Station price updated.",
            extra={
                "station_id": str(station.pk),
                "price_per_kg": str(price),
                "actor_id": str(actor.pk) if actor else None,
            },
        )
        return station

    def set_active(
        self, station_id: Any, is_active: bool, actor: Optional[Any] = None
    ) -> Station:
        """Open or permanently close a station. Availability history is untouched."""
        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)
            station.is_active = is_active
            station.save(update_fields=["is_active", "updated_at"])

        logger.info(
            "Station %s.",
            "activated" if is_active else "deactivated",
            extra={
                "station_id": str(station.pk),
                "actor_id": str(actor.pk) if actor else None,
            },
        )
        return station

    # CRUD

    def get_station(self, station_id: Any) -> Station:
        return repositories.get_station(station_id)

    def create_station(self, data: dict[str, Any], actor: Optional[Any] = None) -> Station:
        """
        Create a station and seed its price and location history.

        Args:
            data: Station field values (already validated by the serializer)
            actor: User performing the change, recorded on the price entry
        """
        data = dict(data)
        _validate_coordinates(data["latitude"], data["longitude"])
        if data.get("price_per_kg") is not None:
            data["price_per_kg"] = _to_price(data["price_per_kg"])

        with transaction.atomic():
            station = repositories.create_station(**data)
            if station.price_per_kg is not None:
                repositories.append_price(
                    station=station, price_per_kg=station.price_per_kg, updated_by=actor
                )
            repositories.append_location(station=station)

        logger.info(
            "Station created.",
            extra={"station_id": str(station.pk), "station_name": station.name},
        )
        return station

    def update_station(
        self, station_id: Any, data: dict[str, Any], actor: Optional[Any] = None
    ) -> Station:
        """
        Apply a partial update to a station.

        Price, availability and coordinate changes are routed through their
        history tables so the current values never drift from the history.
        """
        data = dict(data)
        with transaction.atomic():
            station = repositories.get_station(station_id, for_update=True)

            if "price_per_kg" in data:
                new_price = data.pop("price_per_kg")
                if new_price is None:
                    # The current price must stay the newest history entry
                    if repositories.get_price_history(station).exists():
                        raise InvalidDomainValue("Price per kg cannot be cleared once set")
                    station.price_per_kg = None
                else:
                    new_price = _to_price(new_price)
                    if new_price != station.price_per_kg:
                        repositories.append_price(
                            station=station, price_per_kg=new_price, updated_by=actor
                        )
                    station.price_per_kg = new_price

            if "is_available" in data:
                is_available = data.pop("is_available")
                if is_available != station.is_available:
                    repositories.append_availability(
                        station=station, is_available=is_available, changed_by=actor
                    )
                station.is_available = is_available

            new_lat = data.pop("latitude", station.latitude)
            new_lon = data.pop("longitude", station.longitude)
            _validate_coordinates(new_lat, new_lon)
            moved = Decimal(str(new_lat)) != station.latitude or Decimal(
                str(new_lon)
            ) != station.longitude
            station.latitude = new_lat
            station.longitude = new_lon

            for field_name, value in data.items():
                setattr(station, field_name, value)
            station.save()

            if moved:
                station.refresh_from_db(fields=["latitude", "longitude"])
                repositories.append_location(station=station)

        logger.info(
            "Station updated.",
            extra={"station_id": str(station.pk), "moved": moved},
        )
        return station

    def delete_station(self, station_id: Any) -> None:
        """Hard delete; all history and assignment rows cascade."""
        station = repositories.get_station(station_id)
        pk = str(station.pk)
        station.delete()
        logger.info("Station deleted.", extra={"station_id": pk})

    def list_stations(
        self, filters: Optional[dict[str, Any]] = None
    ) -> Union[QuerySet[Station], list[Station]]:
        """
        List stations with optional filters.

        Supported filters:
            assigned: True for stations with an active manager, False for none
            available: Only stations currently available
            latitude, longitude, radius: Restrict to a radius (default radius
                from settings); the result is then a list carrying `distance_km`
            sort_by: "name", "price_per_kg" or "distance" (distance needs a
                location); otherwise most recently updated first
        """
        filters = filters or {}
        queryset = repositories.get_stations()

        assigned = filters.get("assigned")
        if assigned is True:
            queryset = queryset.assigned()
        elif assigned is False:
            queryset = queryset.unassigned()

        if filters.get("available"):
            queryset = queryset.available()

        sort_by = filters.get("sort_by")
        if sort_by == "name":
            queryset = queryset.order_by("name", "id")
        elif sort_by == "price_per_kg":
            queryset = queryset.order_by("price_per_kg", "id")
        else:
            queryset = queryset.order_by("-updated_at", "id")

        latitude = filters.get("latitude")
        longitude = filters.get("longitude")
        if latitude is None or longitude is None:
            return queryset

        radius_km = filters.get("radius") or self.default_radius_km
        stations = self.find_within_radius(latitude, longitude, radius_km, queryset=queryset)
        if sort_by == "distance":
            return stations
        # Keep the queryset ordering instead of the distance ordering
        by_pk = {station.pk: station for station in stations}
        ordered_pks = queryset.filter(pk__in=list(by_pk)).values_list("pk", flat=True)
        return [by_pk[pk] for pk in ordered_pks]

    def get_price_history(self, station_id: Any) -> QuerySet[PriceHistoryEntry]:
        station = repositories.get_station(station_id)
        return repositories.get_price_history(station)

    def get_availability_log(self, station_id: Any) -> QuerySet[AvailabilityLogEntry]:
        station = repositories.get_station(station_id)
        return repositories.get_availability_log(station)
