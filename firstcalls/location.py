"""User location validation."""

import math
from enum import Enum

from .models import Coordinate

# Dhaka city centre, used when no location has been shared yet
DEFAULT_LOCATION = Coordinate(23.8103, 90.4125)


class LocationErrorReason(Enum):
    """Why a user location could not be obtained."""

    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"

    @property
    def message(self) -> str:
        return "Unable to get your location. " + _MESSAGES[self]


_MESSAGES = {
    LocationErrorReason.PERMISSION_DENIED: "Please allow location access and try again.",
    LocationErrorReason.UNAVAILABLE: "Location information is unavailable.",
    LocationErrorReason.TIMEOUT: "Location request timed out.",
}


class LocationError(Exception):
    """The user location is missing or unusable."""

    def __init__(self, reason: LocationErrorReason, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = reason.message
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


def resolve_location(lat: float | None, lon: float | None) -> Coordinate:
    """
    Turn raw latitude/longitude values into a Coordinate.

    Raises LocationError(UNAVAILABLE) if either value is missing,
    not finite, or outside the valid geographic range.
    """
    if lat is None or lon is None:
        raise LocationError(LocationErrorReason.UNAVAILABLE, "missing coordinates")

    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        raise LocationError(
            LocationErrorReason.UNAVAILABLE, f"not a number: {lat!r}, {lon!r}"
        ) from None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise LocationError(LocationErrorReason.UNAVAILABLE, "non-finite coordinates")
    if not -90 <= lat <= 90:
        raise LocationError(LocationErrorReason.UNAVAILABLE, f"latitude out of range: {lat}")
    if not -180 <= lon <= 180:
        raise LocationError(LocationErrorReason.UNAVAILABLE, f"longitude out of range: {lon}")

    return Coordinate(lat, lon)
