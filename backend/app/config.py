"""Runtime settings, read from the environment (and .env) once at import."""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env before anything reads the environment
load_dotenv()


def _float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


# Catalog source: "celestrak", "n2yo" or "file"
CATALOG_SOURCE = os.getenv("SATGLOBE_CATALOG_SOURCE", "celestrak")
CELESTRAK_URL = os.getenv("SATGLOBE_CELESTRAK_URL", "https://celestrak.org/NORAD/elements/gp.php")
CELESTRAK_GROUP = os.getenv("SATGLOBE_CELESTRAK_GROUP", "stations")
CATALOG_FILE = os.getenv("SATGLOBE_CATALOG_FILE", "tle.txt")

N2YO_URL = os.getenv("N2YO_URL", "https://api.n2yo.com/rest/v1/satellite")
N2YO_API_KEY = os.getenv("N2YO_API_KEY")
# Where the N2YO "above" query looks from when building a catalog
N2YO_ABOVE_LAT = _float("N2YO_ABOVE_LAT", 41.702)
N2YO_ABOVE_LON = _float("N2YO_ABOVE_LON", -76.014)
N2YO_ABOVE_LIMIT = _int("N2YO_ABOVE_LIMIT", 50)

FETCH_TIMEOUT = _float("SATGLOBE_FETCH_TIMEOUT", 30.0)
FETCH_RETRIES = _int("SATGLOBE_FETCH_RETRIES", 3)
FETCH_BACKOFF = _float("SATGLOBE_FETCH_BACKOFF", 2.0)

GLOBE_RADIUS = _float("SATGLOBE_GLOBE_RADIUS", 1.0)
MIN_ELEVATION = _float("SATGLOBE_MIN_ELEVATION", 0.0)
MAX_PASS_HOURS = _float("SATGLOBE_MAX_PASS_HOURS", 72.0)

AUTOLOAD = os.getenv("SATGLOBE_AUTOLOAD", "1").lower() not in ("0", "false", "no")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "SATGLOBE_CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
