"""Shared test fixtures: a handful of services around Dhaka."""

import pytest

from firstcalls.categories import default_categories
from firstcalls.models import Coordinate, EmergencyService


def make_service(id, type, lat, lon, **kwargs) -> EmergencyService:
    return EmergencyService(
        id=str(id),
        name=kwargs.pop("name", f"{type} {id}"),
        type=type,
        lat=lat,
        lon=lon,
        **kwargs,
    )


@pytest.fixture
def user() -> Coordinate:
    return Coordinate(23.8103, 90.4125)


@pytest.fixture
def services() -> list[EmergencyService]:
    return [
        make_service(1, "hospital", 23.80, 90.40, phone="+880 2 1234"),
        make_service(2, "hospital", 23.82, 90.45),
        make_service(3, "police", 23.81, 90.41, address="Gulshan Avenue"),
    ]


@pytest.fixture
def categories():
    return default_categories()
