"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from .overpass.query import DHAKA_BOUNDS, BoundingBox

logger = logging.getLogger(__name__)

DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"
DEFAULT_TIMEOUT = 25
DEFAULT_SERVICES_FILE = Path("data") / "services.csv"


@dataclass(frozen=True)
class Settings:
    overpass_url: str = DEFAULT_OVERPASS_URL
    overpass_timeout: int = DEFAULT_TIMEOUT
    bounds: BoundingBox = DHAKA_BOUNDS
    services_file: Path = DEFAULT_SERVICES_FILE
    log_level: str = "INFO"


def _parse_timeout(raw: str | None) -> int:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = int(raw)
    except ValueError:
        logger.warning("OVERPASS_TIMEOUT=%r is not an integer; using %d", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning("OVERPASS_TIMEOUT must be positive; using %d", DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return value


def _parse_bounds(raw: str | None) -> BoundingBox:
    if not raw:
        return DHAKA_BOUNDS
    try:
        return BoundingBox.from_string(raw)
    except ValueError as exc:
        logger.warning("FIRSTCALLS_BOUNDS=%r is invalid (%s); using Dhaka bounds", raw, exc)
        return DHAKA_BOUNDS


def load_settings() -> Settings:
    """Build settings from environment variables with sensible defaults."""
    load_dotenv()

    return Settings(
        overpass_url=os.getenv("OVERPASS_URL", "").strip() or DEFAULT_OVERPASS_URL,
        overpass_timeout=_parse_timeout(os.getenv("OVERPASS_TIMEOUT")),
        bounds=_parse_bounds(os.getenv("FIRSTCALLS_BOUNDS")),
        services_file=Path(os.getenv("FIRSTCALLS_SERVICES_FILE") or DEFAULT_SERVICES_FILE),
        log_level=(os.getenv("FIRSTCALLS_LOG_LEVEL") or "INFO").strip().upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging for entry points (CLI, web app, scripts)."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
