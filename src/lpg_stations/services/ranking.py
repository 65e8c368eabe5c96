"""Two-tier ordering of radius search results: available first, then by distance."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from lpg_stations.models import Station


class NearbyOutcome(str, Enum):
    NONE_FOUND = "none_found"
    NONE_AVAILABLE = "none_available"
    RESULTS = "results"


NEARBY_MESSAGES = {
    NearbyOutcome.NONE_FOUND: "No LPG stations found in the specified radius",
    NearbyOutcome.NONE_AVAILABLE: "No available LPG station near you",
    NearbyOutcome.RESULTS: "Nearby stations retrieved successfully",
}

NONE_AVAILABLE_NOTE = "All nearby stations are currently unavailable"


@dataclass
class NearbyResult:
    """
    Ranked stations plus counts over the whole radius result.

    The counts describe every station found in the radius, even when
    `stations` was narrowed to the available ones.
    """

    stations: list[Station] = field(default_factory=list)
    available_count: int = 0
    unavailable_count: int = 0

    @property
    def outcome(self) -> NearbyOutcome:
        if self.available_count == 0 and self.unavailable_count == 0:
            return NearbyOutcome.NONE_FOUND
        if self.available_count == 0:
            return NearbyOutcome.NONE_AVAILABLE
        return NearbyOutcome.RESULTS

    @property
    def message(self) -> str:
        return NEARBY_MESSAGES[self.outcome]


def _sort_key(station: Station) -> tuple[float, str]:
    return (station.distance_km, str(station.pk))


def rank_nearby(stations: Iterable[Station], available_only: bool = False) -> NearbyResult:
    """
    Partition stations by availability and order each tier by distance.

    Every station must carry a `distance_km` attribute (as set by
    `StationDirectoryService.find_within_radius`). Ties on distance are broken
    by station id so the ordering is fully deterministic.

    Args:
        stations: Stations found within the search radius
        available_only: Drop the unavailable tier from the returned list

    Returns:
        NearbyResult with the ordered stations and per-tier counts
    """
    available: list[Station] = []
    unavailable: list[Station] = []
    for station in stations:
        (available if station.is_available else unavailable).append(station)

    available.sort(key=_sort_key)
    unavailable.sort(key=_sort_key)

    ranked = available if available_only else available + unavailable
    return NearbyResult(
        stations=ranked,
        available_count=len(available),
        unavailable_count=len(unavailable),
    )
