"""
FirstCalls - Main entry point.

Prints the nearest hospital, police station and fire station.

Usage:
    python -m firstcalls.main --lat 23.81 --lon 90.41
    python -m firstcalls.main --categories hospital,police --services data/services.csv
    python -m firstcalls.main --help
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path

from firstcalls.categories import default_categories, enable_only, parse_category_ids
from firstcalls.config import configure_logging, get_settings
from firstcalls.geo import closest_per_category, directions_url
from firstcalls.location import DEFAULT_LOCATION, LocationError, resolve_location
from firstcalls.models import Coordinate, EmergencyService, RankedService, ServiceCategory
from firstcalls.overpass import OverpassClient
from firstcalls.storage import load_services

logger = logging.getLogger(__name__)


def load_or_fetch_services(
    services_file: Path | None, categories: list[ServiceCategory]
) -> list[EmergencyService]:
    """Read the CSV cache if it exists, otherwise query Overpass."""
    if services_file is not None and services_file.exists():
        logger.info("Loading services from %s", services_file)
        return load_services(services_file)

    settings = get_settings()
    with OverpassClient(
        settings.overpass_url, settings.bounds, settings.overpass_timeout
    ) as client:
        return client.fetch_services(categories)


def result_row(rank: int, result: RankedService) -> list[str]:
    """CSV output row: rank,category,name,distance_km,phone."""
    service = result.service
    return [
        str(rank),
        result.category.id,
        service.name,
        f"{result.distance:.2f}",
        service.phone or "",
    ]


def result_to_dict(rank: int, user: Coordinate, result: RankedService) -> dict:
    return {
        "rank": rank,
        "category": result.category.id,
        "distance_km": result.distance,
        "directions_url": directions_url(user, result.service),
        "service": result.service.to_dict(),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="FirstCalls - Find the nearest emergency services"
    )
    parser.add_argument(
        "--lat",
        type=float,
        default=DEFAULT_LOCATION.lat,
        help=f"User latitude (default: {DEFAULT_LOCATION.lat})",
    )
    parser.add_argument(
        "--lon",
        type=float,
        default=DEFAULT_LOCATION.lon,
        help=f"User longitude (default: {DEFAULT_LOCATION.lon})",
    )
    parser.add_argument(
        "--categories",
        help="Comma-separated categories to rank (default: all)",
    )
    parser.add_argument(
        "--services",
        type=Path,
        default=None,
        help="Path to services CSV (default: FIRSTCALLS_SERVICES_FILE, else live Overpass query)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    try:
        user = resolve_location(args.lat, args.lon)
    except LocationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    categories = default_categories()
    category_ids = parse_category_ids(args.categories)
    if category_ids is not None:
        categories = enable_only(categories, category_ids)

    services_file = args.services or settings.services_file
    services = load_or_fetch_services(services_file, categories)
    results = closest_per_category(user, services, categories)

    if args.json:
        print(json.dumps(
            [result_to_dict(i, user, r) for i, r in enumerate(results, start=1)],
            ensure_ascii=False,
            indent=2,
        ))
    elif not results:
        print("NO_SERVICES")
    else:
        writer = csv.writer(sys.stdout, lineterminator="\n")
        for i, result in enumerate(results, start=1):
            writer.writerow(result_row(i, result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
