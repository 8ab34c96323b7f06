"""CSV cache of fetched emergency services."""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from .models import EmergencyService

logger = logging.getLogger(__name__)

FIELDNAMES = ["id", "name", "type", "lat", "lon", "phone", "address"]


def save_services(services: Iterable[EmergencyService], filepath: str | Path) -> int:
    """
    Write services to CSV. OSM tags are not persisted.

    Returns the number of rows written.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(filepath, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for service in services:
            writer.writerow({
                "id": service.id,
                "name": service.name,
                "type": service.type,
                "lat": service.lat,
                "lon": service.lon,
                "phone": service.phone or "",
                "address": service.address or "",
            })
            count += 1
    return count


def load_services(filepath: str | Path) -> list[EmergencyService]:
    """
    Load services from CSV, in file order.

    Expected columns: id, name, type, lat, lon
    Optional columns: phone, address
    """
    filepath = Path(filepath)
    services = []
    skipped = 0

    with open(filepath, encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                services.append(
                    EmergencyService(
                        id=row["id"].strip(),
                        name=row["name"].strip(),
                        type=row["type"].strip(),
                        lat=float(row["lat"]),
                        lon=float(row["lon"]),
                        phone=(row.get("phone") or "").strip() or None,
                        address=(row.get("address") or "").strip() or None,
                    )
                )
            except (ValueError, KeyError, AttributeError):
                skipped += 1
                continue

    if skipped:
        logger.warning("Skipped %d malformed rows in %s", skipped, filepath)
    return services
