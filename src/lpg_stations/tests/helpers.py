"""Shared helpers for station tests."""

from decimal import Decimal
from math import asin, atan2, cos, degrees, radians, sin

from lpg_stations.utils.geo import EARTH_RADIUS_KM

TAMALE = (9.4034, -0.8424)


def destination(lat: float, lon: float, bearing_deg: float, distance_km: float) -> tuple[float, float]:
    """Point reached by travelling `distance_km` from (lat, lon) on a bearing."""
    phi1, lambda1, theta = radians(lat), radians(lon), radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM
    phi2 = asin(sin(phi1) * cos(delta) + cos(phi1) * sin(delta) * cos(theta))
    lambda2 = lambda1 + atan2(
        sin(theta) * sin(delta) * cos(phi1), cos(delta) - sin(phi1) * sin(phi2)
    )
    return degrees(phi2), degrees(lambda2)


def coordinates_at(distance_km: float, bearing_deg: float = 0.0) -> dict[str, Decimal]:
    """Station coordinates `distance_km` from Tamale, rounded to the stored precision."""
    lat, lon = destination(TAMALE[0], TAMALE[1], bearing_deg, distance_km)
    return {
        "latitude": Decimal(f"{lat:.7f}"),
        "longitude": Decimal(f"{lon:.7f}"),
    }
