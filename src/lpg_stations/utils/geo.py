"""Geospatial utility functions for distance calculations and spatial queries."""

from math import asin, atan2, cos, degrees, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0

# Padding (degrees) added to every bounding box edge so float rounding never
# drops a station sitting exactly on the search radius.
_BOX_PADDING_DEG = 1e-6


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points using the Haversine formula.

    Args:
        lat1: Latitude of first point in decimal degrees
        lon1: Longitude of first point in decimal degrees
        lat2: Latitude of second point in decimal degrees
        lon2: Longitude of second point in decimal degrees

    Returns:
        Distance in kilometers (spherical Earth, radius 6371 km)

    Example:
        >>> round(haversine_km(9.4034, -0.8424, 5.6037, -0.1870), 1)  # Tamale to Accra
        428.6
    """
    lat1_rad, lon1_rad = radians(lat1), radians(lon1)
    lat2_rad, lon2_rad = radians(lat2), radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = sin(dlat / 2) ** 2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon / 2) ** 2
    # Clamp: rounding can push `a` a hair outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def get_bounding_box(lat: float, lon: float, radius_km: float) -> dict[str, float]:
    """
    Calculate a lat/lon box that fully contains the circle of `radius_km` around a point.

    Used as a cheap database pre-filter; results are always refined with
    `haversine_km`, so the box may be larger than the circle but never smaller.

    Args:
        lat: Center latitude in decimal degrees
        lon: Center longitude in decimal degrees
        radius_km: Radius in kilometers

    Returns:
        Dictionary with keys: lat_min, lat_max, lon_min, lon_max.
        Longitude bounds widen to [-180, 180] when the circle reaches a pole
        or crosses the antimeridian.

    Example:
        >>> bbox = get_bounding_box(9.4034, -0.8424, 5)
        >>> round(bbox["lat_max"] - bbox["lat_min"], 3)
        0.09
    """
    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = degrees(angular) + _BOX_PADDING_DEG

    lat_min = max(-90.0, lat - lat_delta)
    lat_max = min(90.0, lat + lat_delta)

    # The widest longitude span of a spherical cap is asin(sin(d) / cos(lat))
    cos_lat = cos(radians(lat))
    if lat_min <= -90.0 or lat_max >= 90.0 or sin(angular) >= cos_lat:
        return {"lat_min": lat_min, "lat_max": lat_max, "lon_min": -180.0, "lon_max": 180.0}

    lon_delta = degrees(asin(sin(angular) / cos_lat)) + _BOX_PADDING_DEG
    lon_min = lon - lon_delta
    lon_max = lon + lon_delta

    if lon_min < -180.0 or lon_max > 180.0:
        lon_min, lon_max = -180.0, 180.0

    return {
        "lat_min": lat_min,
        "lat_max": lat_max,
        "lon_min": lon_min,
        "lon_max": lon_max,
    }
