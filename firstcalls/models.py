"""Domain models for emergency services and their categories."""

from dataclasses import dataclass, field, replace
from typing import NamedTuple


@dataclass(frozen=True)
class Coordinate:
    """WGS84 point in degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class EmergencyService:
    """A hospital, police station or fire station returned by Overpass."""

    id: str
    name: str
    type: str  # Category id: hospital, police or fire_station
    lat: float
    lon: float
    phone: str | None = None
    address: str | None = None
    tags: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lon)

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (useful for JSON serialisation)."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "lat": self.lat,
            "lon": self.lon,
            "phone": self.phone,
            "address": self.address,
            "tags": dict(self.tags),
        }


@dataclass
class ServiceCategory:
    """
    Service type shown in the category filter.

    ``enabled`` is UI state; ranking code reads it but never changes it.
    """

    id: str
    name: str
    icon: str
    color: str
    enabled: bool = True
    query: str = ""  # Overpass tag filter, e.g. amenity=hospital

    def toggled(self) -> "ServiceCategory":
        """Return a copy with the enabled flag flipped."""
        return replace(self, enabled=not self.enabled)


class RankedService(NamedTuple):
    """Closest service of a category and its distance from the user in km."""

    service: EmergencyService
    distance: float
    category: ServiceCategory | None
