"""
FastAPI web interface for FirstCalls.

JSON API behind the emergency services map: categories, services,
the closest service per category and per-category statistics.
"""

import logging

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from firstcalls.categories import (
    default_categories,
    enable_only,
    parse_category_ids,
    service_counts,
)
from firstcalls.config import configure_logging, get_settings
from firstcalls.geo import NearestServiceFinder, closest_per_category, directions_url
from firstcalls.location import LocationError, resolve_location
from firstcalls.models import EmergencyService, ServiceCategory
from firstcalls.overpass import OverpassClient
from firstcalls.storage import load_services

logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="FirstCalls",
    description="Nearest hospitals, police stations and fire stations",
    version="0.1.0",
)

# Global instances (loaded on startup or on first request)
overpass_client: OverpassClient | None = None
services_cache: list[EmergencyService] | None = None
finder: NearestServiceFinder | None = None


@app.on_event("startup")
async def startup_event():
    """Configure logging and preload the services CSV cache if present."""
    settings = get_settings()
    configure_logging(settings)

    if settings.services_file.exists():
        logger.info("Preloading services from %s", settings.services_file)
        set_services(load_services(settings.services_file))


@app.on_event("shutdown")
async def shutdown_event():
    if overpass_client is not None:
        overpass_client.close()


def get_client() -> OverpassClient:
    global overpass_client
    if overpass_client is None:
        settings = get_settings()
        overpass_client = OverpassClient(
            settings.overpass_url, settings.bounds, settings.overpass_timeout
        )
    return overpass_client


def set_services(services: list[EmergencyService]) -> None:
    """Replace the current service list wholesale and rebuild the index."""
    global services_cache, finder
    services_cache = services
    finder = NearestServiceFinder(services)


def get_services(refresh: bool = False) -> list[EmergencyService]:
    """
    Current service list, fetched from Overpass on first use.

    An empty fetch result is not cached, so a failed request is retried
    on the next call.
    """
    if services_cache is None or refresh:
        services = get_client().fetch_services(default_categories())
        if not services:
            return []
        set_services(services)
    return services_cache


def select_categories(raw: str | None) -> list[ServiceCategory]:
    categories = default_categories()
    ids = parse_category_ids(raw)
    if ids is not None:
        categories = enable_only(categories, ids)
    return categories


class CategoryInfo(BaseModel):
    """Category filter entry."""

    id: str
    name: str
    icon: str
    color: str
    enabled: bool


class ServiceInfo(BaseModel):
    """Normalised emergency service."""

    id: str
    name: str
    type: str
    lat: float
    lon: float
    phone: str | None = None
    address: str | None = None
    tags: dict[str, str] = {}


class ClosestServiceInfo(BaseModel):
    """Closest service of one category."""

    rank: int
    category: CategoryInfo
    service: ServiceInfo
    distance_km: float
    directions_url: str


class StatsResponse(BaseModel):
    """Number of services per category."""

    counts: dict[str, int]
    total: int


def _category_info(category: ServiceCategory) -> CategoryInfo:
    return CategoryInfo(
        id=category.id,
        name=category.name,
        icon=category.icon,
        color=category.color,
        enabled=category.enabled,
    )


def _service_info(service: EmergencyService) -> ServiceInfo:
    return ServiceInfo(**service.to_dict())


@app.get("/api/categories", response_model=list[CategoryInfo])
async def api_categories(
    categories: str | None = Query(default=None, description="Enabled category ids"),
) -> list[CategoryInfo]:
    """Category filter state."""
    return [_category_info(c) for c in select_categories(categories)]


@app.get("/api/services", response_model=list[ServiceInfo])
def api_services(
    categories: str | None = Query(default=None, description="Enabled category ids"),
    refresh: bool = Query(default=False),
) -> list[ServiceInfo]:
    """Services of the enabled categories."""
    enabled = {c.id for c in select_categories(categories) if c.enabled}
    return [_service_info(s) for s in get_services(refresh) if s.type in enabled]


@app.get("/api/closest", response_model=list[ClosestServiceInfo])
def api_closest(
    lat: float | None = Query(default=None),
    lon: float | None = Query(default=None),
    categories: str | None = Query(default=None, description="Enabled category ids"),
) -> list[ClosestServiceInfo]:
    """Closest service of each enabled category, nearest first."""
    try:
        user = resolve_location(lat, lon)
    except LocationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    results = closest_per_category(user, get_services(), select_categories(categories))
    return [
        ClosestServiceInfo(
            rank=i,
            category=_category_info(r.category),
            service=_service_info(r.service),
            distance_km=r.distance,
            directions_url=directions_url(user, r.service),
        )
        for i, r in enumerate(results, start=1)
    ]


@app.get("/api/nearby", response_model=list[ClosestServiceInfo])
def api_nearby(
    category: str,
    lat: float | None = Query(default=None),
    lon: float | None = Query(default=None),
    k: int = Query(default=5, ge=1, le=50),
) -> list[ClosestServiceInfo]:
    """The k nearest services of a single category."""
    try:
        user = resolve_location(lat, lon)
    except LocationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    known = {c.id: c for c in default_categories()}
    if category not in known:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")

    get_services()
    if finder is None:
        return []

    results = finder.find_nearest(user.lat, user.lon, category, k=k)
    return [
        ClosestServiceInfo(
            rank=i,
            category=_category_info(known[category]),
            service=_service_info(r.service),
            distance_km=r.distance,
            directions_url=directions_url(user, r.service),
        )
        for i, r in enumerate(results, start=1)
    ]


@app.get("/api/stats", response_model=StatsResponse)
def api_stats() -> StatsResponse:
    """Service counts per category and overall."""
    services = get_services()
    return StatsResponse(
        counts=service_counts(services, default_categories()),
        total=len(services),
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "services_loaded": services_cache is not None,
        "services_count": len(services_cache or []),
    }


def run() -> None:
    """Serve the API with uvicorn (console script ``firstcalls-web``)."""
    import uvicorn

    uvicorn.run("firstcalls.web.app:app", host="127.0.0.1", port=8000)
