"""Overpass QL query construction for emergency service categories."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from ..models import ServiceCategory

ELEMENT_TYPES = ("node", "way", "relation")


@dataclass(frozen=True)
class BoundingBox:
    """Area to search, in degrees."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_string(cls, raw: str) -> "BoundingBox":
        """
        Parse "south,west,north,east".

        Raises ValueError on a wrong number of values, values that are not
        finite numbers within latitude/longitude range, or a box whose
        south/west edge is beyond its north/east edge.
        """
        parts = [p.strip() for p in raw.split(",")]
        if len(parts) != 4:
            raise ValueError(f"expected 4 comma-separated values, got {len(parts)}")
        south, west, north, east = (float(p) for p in parts)
        if not all(math.isfinite(v) for v in (south, west, north, east)):
            raise ValueError("bounds must be finite numbers")
        if not (-90 <= south <= 90 and -90 <= north <= 90):
            raise ValueError("latitude must be within -90..90")
        if not (-180 <= west <= 180 and -180 <= east <= 180):
            raise ValueError("longitude must be within -180..180")
        if south > north or west > east:
            raise ValueError("south/west must not exceed north/east")
        return cls(south, west, north, east)

    def to_overpass(self) -> str:
        return f"{self.south},{self.west},{self.north},{self.east}"


# Dhaka city bounds (approximate)
DHAKA_BOUNDS = BoundingBox(south=23.6850, west=90.3563, north=23.9036, east=90.4264)


def _tag_filters(category: ServiceCategory) -> list[tuple[str, str]]:
    """Tag key/value pairs that identify services of a category."""
    if category.id == "fire_station":
        # Fire stations are tagged with either emergency= or amenity=
        return [("emergency", "fire_station"), ("amenity", "fire_station")]
    return [("amenity", category.id)]


def category_selectors(category: ServiceCategory, bounds: BoundingBox) -> str:
    """Union block selecting all nodes, ways and relations of a category."""
    bbox = bounds.to_overpass()
    lines = [
        f'  {element}["{key}"="{value}"]({bbox});'
        for key, value in _tag_filters(category)
        for element in ELEMENT_TYPES
    ]
    return "(\n" + "\n".join(lines) + "\n);"


def build_query(
    categories: Iterable[ServiceCategory],
    bounds: BoundingBox = DHAKA_BOUNDS,
    timeout: int = 25,
) -> str | None:
    """
    Build an Overpass QL query for the enabled categories.

    Args:
        categories: Category filter state; disabled categories are skipped
        bounds: Area to search
        timeout: Server-side query timeout in seconds

    Returns:
        Query text, or None if no category is enabled
    """
    blocks = [category_selectors(c, bounds) for c in categories if c.enabled]
    if not blocks:
        return None

    return (
        f"[out:json][timeout:{timeout}];\n"
        "(\n"
        + "\n".join(blocks)
        + "\n);\n"
        "out geom;\n"
    )
