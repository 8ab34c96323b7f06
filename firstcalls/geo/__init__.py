"""Geolocation module for ranking nearby emergency services."""

from .distance import distance, haversine
from .nearest_service import (
    NearestServiceFinder,
    closest_per_category,
    closest_service,
    directions_url,
)

__all__ = [
    "distance",
    "haversine",
    "closest_per_category",
    "closest_service",
    "directions_url",
    "NearestServiceFinder",
]
