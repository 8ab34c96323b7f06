"""Distance calculation utilities using Haversine formula."""

import math

from ..models import Coordinate

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula to compute the distance between two GPS coordinates.

    Args:
        lat1: Latitude of first point (degrees)
        lon1: Longitude of first point (degrees)
        lat2: Latitude of second point (degrees)
        lon2: Longitude of second point (degrees)

    Returns:
        Distance in kilometers (unrounded)
    """
    # Convert to radians
    lat1_rad = to_radians(lat1)
    lat2_rad = to_radians(lat2)
    delta_lat = to_radians(lat2 - lat1)
    delta_lon = to_radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """
    Distance in kilometers between two coordinates, rounded to 2 decimals.

    Coordinates are not range checked: out-of-range input gives a
    meaningless but numeric result, and NaN propagates.
    """
    return round(haversine(a.lat, a.lon, b.lat, b.lon), 2)


def to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * (math.pi / 180)
