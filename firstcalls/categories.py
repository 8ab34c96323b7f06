"""Built-in emergency service categories and filter helpers."""

from collections.abc import Iterable
from dataclasses import replace

from .models import EmergencyService, ServiceCategory

HOSPITAL = "hospital"
POLICE = "police"
FIRE_STATION = "fire_station"

_DEFAULT_CATEGORIES = (
    ServiceCategory(
        id=HOSPITAL,
        name="Hospitals",
        icon="🏥",
        color="#ef4444",
        enabled=True,
        query="amenity=hospital",
    ),
    ServiceCategory(
        id=POLICE,
        name="Police Stations",
        icon="👮",
        color="#3b82f6",
        enabled=True,
        query="amenity=police",
    ),
    ServiceCategory(
        id=FIRE_STATION,
        name="Fire Stations",
        icon="🚒",
        color="#f97316",
        enabled=True,
        query="amenity=fire_station",
    ),
)

CATEGORY_IDS = tuple(c.id for c in _DEFAULT_CATEGORIES)


def default_categories() -> list[ServiceCategory]:
    """Fresh copies of the built-in categories, all enabled."""
    return [replace(c) for c in _DEFAULT_CATEGORIES]


def toggle_category(
    categories: Iterable[ServiceCategory], category_id: str
) -> list[ServiceCategory]:
    """Return a new list with the enabled flag of *category_id* flipped."""
    return [c.toggled() if c.id == category_id else c for c in categories]


def enable_only(
    categories: Iterable[ServiceCategory], category_ids: Iterable[str]
) -> list[ServiceCategory]:
    """Return copies where only the given category ids are enabled."""
    wanted = set(category_ids)
    return [replace(c, enabled=c.id in wanted) for c in categories]


def parse_category_ids(raw: str | None) -> list[str] | None:
    """
    Split a comma-separated list such as "hospital,police".

    Returns None for an empty or missing value (meaning "all categories").
    Unknown ids are kept; they simply match no category.
    """
    if not raw:
        return None
    ids = [part.strip().lower() for part in raw.split(",")]
    return [i for i in ids if i] or None


def service_counts(
    services: Iterable[EmergencyService], categories: Iterable[ServiceCategory]
) -> dict[str, int]:
    """Number of loaded services per category id, zero included."""
    counts = {c.id: 0 for c in categories}
    for service in services:
        if service.type in counts:
            counts[service.type] += 1
    return counts
