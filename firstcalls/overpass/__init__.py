"""Overpass API access: query building, HTTP fetch and response parsing."""

from .client import OverpassClient
from .parser import parse_response
from .query import DHAKA_BOUNDS, BoundingBox, build_query

__all__ = [
    "OverpassClient",
    "BoundingBox",
    "DHAKA_BOUNDS",
    "build_query",
    "parse_response",
]
