"""Normalise Overpass JSON elements into EmergencyService records."""

import logging

from ..models import EmergencyService

logger = logging.getLogger(__name__)


def _first(tags: dict, *keys: str) -> str | None:
    """Value of the first non-empty tag among *keys*."""
    for key in keys:
        value = tags.get(key)
        if value:
            return value
    return None


def classify(tags: dict) -> str:
    """Category id for an element's tags; unknown tags count as hospital."""
    amenity = tags.get("amenity")
    if amenity == "hospital":
        return "hospital"
    if amenity == "police":
        return "police"
    if tags.get("emergency") == "fire_station" or amenity == "fire_station":
        return "fire_station"
    return "hospital"


def default_name(service_type: str) -> str:
    """Placeholder name, e.g. "Fire_station Service"."""
    return f"{service_type[:1].upper()}{service_type[1:]} Service"


def _coordinates(element: dict) -> tuple[float, float] | None:
    """
    Latitude/longitude of an element.

    Nodes carry lat/lon directly; ways and relations fetched with
    ``out geom`` use the first point of their geometry.
    """
    lat, lon = element.get("lat"), element.get("lon")
    if lat is None and lon is None:
        geometry = element.get("geometry")
        if not isinstance(geometry, list) or not geometry:
            return None
        point = geometry[0]
        if not isinstance(point, dict):
            return None
        lat, lon = point.get("lat"), point.get("lon")

    try:
        return float(lat), float(lon)
    except (TypeError, ValueError):
        return None


def parse_element(element: dict) -> EmergencyService | None:
    """Convert one Overpass element, or return None if it is unusable."""
    if not isinstance(element, dict):
        logger.debug("Skipping non-object element: %r", element)
        return None

    element_id = element.get("id")
    if element_id is None:
        logger.debug("Skipping element without id: %r", element)
        return None

    coords = _coordinates(element)
    if coords is None:
        logger.debug("Skipping element %s without coordinates", element_id)
        return None

    raw_tags = element.get("tags")
    if not isinstance(raw_tags, dict):
        raw_tags = {}
    tags = {str(k): str(v) for k, v in raw_tags.items()}
    service_type = classify(tags)

    return EmergencyService(
        id=str(element_id),
        name=_first(tags, "name", "name:en", "name:bn") or default_name(service_type),
        type=service_type,
        lat=coords[0],
        lon=coords[1],
        phone=_first(tags, "phone", "contact:phone", "telephone"),
        address=_first(tags, "addr:full", "address"),
        tags=tags,
    )


def parse_response(data: dict) -> list[EmergencyService]:
    """
    Parse an Overpass JSON response.

    Args:
        data: Decoded JSON body with an "elements" list; anything else
            in its place is treated as no elements

    Returns:
        Services in response order; unusable elements are dropped
    """
    elements = data.get("elements")
    if not isinstance(elements, list):
        elements = []

    services = []
    for element in elements:
        service = parse_element(element)
        if service is not None:
            services.append(service)

    logger.debug("Parsed %d services from %d elements", len(services), len(elements))
    return services
