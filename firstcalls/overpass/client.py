"""HTTP client for the OpenStreetMap Overpass API."""

import logging
from collections.abc import Iterable

import requests

from ..models import EmergencyService, ServiceCategory
from .parser import parse_response
from .query import DHAKA_BOUNDS, BoundingBox, build_query

logger = logging.getLogger(__name__)

OVERPASS_API_URL = "https://overpass-api.de/api/interpreter"


class OverpassClient:
    """
    Fetch emergency services inside a bounding box.

    Failures never propagate: any network, HTTP or decoding error is
    logged and an empty list is returned, so callers can show an
    empty map instead of an error page.
    """

    def __init__(
        self,
        url: str = OVERPASS_API_URL,
        bounds: BoundingBox = DHAKA_BOUNDS,
        timeout: int = 25,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.bounds = bounds
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch_services(self, categories: Iterable[ServiceCategory]) -> list[EmergencyService]:
        """Return services of the enabled categories, or [] on any failure."""
        query = build_query(categories, self.bounds, self.timeout)
        if query is None:
            return []

        try:
            response = self._session.post(
                self.url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.error("Error fetching emergency services: %s", exc)
            return []
        except ValueError as exc:
            logger.error("Overpass returned invalid JSON: %s", exc)
            return []

        if not isinstance(data, dict):
            logger.error("Unexpected Overpass payload type: %s", type(data).__name__)
            return []

        services = parse_response(data)
        logger.info("Fetched %d emergency services from Overpass", len(services))
        return services

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "OverpassClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
