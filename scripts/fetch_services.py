#!/usr/bin/env python3
"""
Fetch emergency services from the Overpass API.

Creates a services.csv cache that the CLI and web app load instead of
querying Overpass on every start.
"""

import argparse
import sys
from pathlib import Path

from firstcalls.categories import default_categories, service_counts
from firstcalls.config import configure_logging, get_settings
from firstcalls.overpass import BoundingBox, OverpassClient
from firstcalls.storage import save_services


OUTPUT_FILE = Path(__file__).parent.parent / "data" / "services.csv"


def main():
    parser = argparse.ArgumentParser(description="Fetch emergency services into a CSV cache")
    parser.add_argument("--output", type=Path, default=OUTPUT_FILE, help="Output CSV path")
    parser.add_argument(
        "--bounds",
        type=BoundingBox.from_string,
        default=None,
        help="south,west,north,east (default: FIRSTCALLS_BOUNDS or Dhaka)",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    bounds = args.bounds or settings.bounds

    print("=" * 60)
    print("Overpass Emergency Services Fetcher")
    print("=" * 60)
    print(f"Bounds: {bounds.to_overpass()}")

    categories = default_categories()
    with OverpassClient(settings.overpass_url, bounds, settings.overpass_timeout) as client:
        services = client.fetch_services(categories)

    if not services:
        print("\nNo services fetched.")
        sys.exit(1)

    for category_id, count in service_counts(services, categories).items():
        print(f"  {category_id}: {count}")

    written = save_services(services, args.output)
    print(f"\nSaved {written} services to {args.output}")
    print("\nDone!")


if __name__ == "__main__":
    main()
