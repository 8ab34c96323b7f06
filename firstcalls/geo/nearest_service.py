"""Rank emergency services by distance from the user."""

from collections.abc import Iterable, Sequence

import numpy as np
from scipy.spatial import cKDTree

from ..models import Coordinate, EmergencyService, RankedService, ServiceCategory
from .distance import distance, haversine

DIRECTIONS_URL = "https://www.google.com/maps/dir/{ulat},{ulon}/{slat},{slon}"


def _closest(
    user: Coordinate, candidates: Sequence[EmergencyService]
) -> tuple[EmergencyService, float]:
    """Scan left to right; a later candidate wins only if strictly closer."""
    best = candidates[0]
    min_distance = distance(user, best.coordinate)

    for service in candidates[1:]:
        d = distance(user, service.coordinate)
        if d < min_distance:
            min_distance = d
            best = service

    return best, min_distance


def closest_per_category(
    user: Coordinate,
    services: Sequence[EmergencyService],
    categories: Iterable[ServiceCategory],
) -> list[RankedService]:
    """
    Find the closest service of each enabled category.

    Categories that are disabled or have no matching service are left out.
    Results are sorted by distance; equal distances keep category order.

    Args:
        user: The user's location
        services: Candidate services, in the order they were loaded
        categories: Category filter state

    Returns:
        List of RankedService, nearest first
    """
    if not services:
        return []

    results = []
    for category in categories:
        if not category.enabled:
            continue

        candidates = [s for s in services if s.type == category.id]
        if not candidates:
            continue

        service, min_distance = _closest(user, candidates)
        results.append(RankedService(service, min_distance, category))

    # list.sort is stable
    results.sort(key=lambda r: r.distance)
    return results


def closest_service(
    user: Coordinate, services: Sequence[EmergencyService]
) -> RankedService | None:
    """Closest service regardless of category, or None if there are none."""
    if not services:
        return None

    service, min_distance = _closest(user, services)
    return RankedService(service, min_distance, None)


def directions_url(user: Coordinate, service: EmergencyService) -> str:
    """Google Maps directions link from the user to a service."""
    return DIRECTIONS_URL.format(
        ulat=user.lat, ulon=user.lon, slat=service.lat, slon=service.lon
    )


class NearestServiceFinder:
    """
    Find the k nearest services of a category using one KD-Tree per category.

    Trees are built on 3D unit-sphere points; the reported
    distance is recomputed with Haversine.
    """

    def __init__(self, services: Iterable[EmergencyService] = ()):
        """
        Initialize finder with service data.

        Args:
            services: Services to index, typically the current Overpass result
        """
        self.services_by_type: dict[str, list[EmergencyService]] = {}
        self.trees: dict[str, cKDTree] = {}
        self.load_services(services)

    def load_services(self, services: Iterable[EmergencyService]) -> None:
        """Replace the indexed services and rebuild the trees."""
        self.services_by_type = {}
        for service in services:
            self.services_by_type.setdefault(service.type, []).append(service)
        self._build_trees()

    def _build_trees(self) -> None:
        """Build a KD-Tree per category from service coordinates."""
        self.trees = {}
        for category_id, services in self.services_by_type.items():
            coords = np.array([[s.lat, s.lon] for s in services])
            self.trees[category_id] = cKDTree(unit_vectors(coords))

    def find_nearest(
        self, lat: float, lon: float, category_id: str, k: int = 5
    ) -> list[RankedService]:
        """
        Find the k nearest services of one category to a given point.

        Args:
            lat: Latitude of the query point (degrees)
            lon: Longitude of the query point (degrees)
            category_id: Category to search, e.g. "hospital"
            k: Maximum number of services to return

        Returns:
            List of RankedService (category is None), nearest first
        """
        tree = self.trees.get(category_id)
        if tree is None or k < 1:
            return []

        services = self.services_by_type[category_id]
        k = min(k, len(services))

        # Query KD-Tree
        point = unit_vectors(np.array([[lat, lon]]))[0]
        _, indices = tree.query(point, k=k)

        results = []
        for idx in np.atleast_1d(indices):
            service = services[int(idx)]
            d = haversine(lat, lon, service.lat, service.lon)
            results.append(RankedService(service, round(d, 2), None))

        # Chord order matches great-circle order; the sort only settles rounding
        results.sort(key=lambda r: r.distance)
        return results


def unit_vectors(coords: np.ndarray) -> np.ndarray:
    """
    Map (lat, lon) rows in degrees to points on the unit sphere.

    Straight-line distance between these points grows monotonically with
    great-circle distance, so a KD-Tree over them finds true nearest
    neighbours at any latitude.
    """
    lat = np.radians(coords[:, 0])
    lon = np.radians(coords[:, 1])
    return np.column_stack((
        np.cos(lat) * np.cos(lon),
        np.cos(lat) * np.sin(lon),
        np.sin(lat),
    ))
