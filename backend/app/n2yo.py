"""N2YO REST client: per-object TLEs and "what is above me" queries."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from app import config
from app.http_client import get_with_retry
from satcore.elements import CatalogEntry
from satcore.errors import CatalogFetchError

logger = logging.getLogger(__name__)


class N2YOClient:
    """Thin async wrapper over api.n2yo.com; needs an API key."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **retry_options,
    ):
        self.api_key = api_key or config.N2YO_API_KEY
        self.base_url = (base_url or config.N2YO_URL).rstrip("/")
        self._transport = transport
        self._retry_options = retry_options

    async def _get(self, path: str) -> Any:
        if not self.api_key:
            raise CatalogFetchError("N2YO API key missing. Set N2YO_API_KEY.")
        resp = await get_with_retry(
            f"{self.base_url}/{path}",
            params={"apiKey": self.api_key},
            transport=self._transport,
            **self._retry_options,
        )
        try:
            data = resp.json()
        except ValueError as exc:
            raise CatalogFetchError(f"N2YO returned invalid JSON for {path}") from exc
        if not isinstance(data, dict):
            raise CatalogFetchError(f"N2YO returned {type(data).__name__} for {path}, expected an object")
        if data.get("error"):
            raise CatalogFetchError(f"N2YO error for {path}: {data['error']}")
        return data

    async def fetch_tle(self, sat_id: int) -> CatalogEntry:
        """Latest element set for one NORAD id."""
        data = await self._get(f"tle/{sat_id}")
        tle = data.get("tle")
        if not isinstance(tle, str):
            raise CatalogFetchError(f"N2YO has no TLE for {sat_id}")
        lines = [line.strip() for line in tle.splitlines() if line.strip()]
        if len(lines) != 2:
            raise CatalogFetchError(f"N2YO has no TLE for {sat_id}")
        info = data.get("info")
        name = (info.get("satname") if isinstance(info, dict) else None) or f"NORAD {sat_id}"
        return CatalogEntry(name=str(name).strip(), line1=lines[0], line2=lines[1])

    async def fetch_above(
        self,
        lat: float,
        lng: float,
        alt: float = 0.0,
        radius: int = 90,
        category: int = 0,
    ) -> list[dict]:
        """Objects currently within `radius` degrees of the observer's zenith."""
        data = await self._get(f"above/{lat}/{lng}/{alt}/{radius}/{category}")
        above = data.get("above") or []
        if not isinstance(above, list):
            raise CatalogFetchError(f"N2YO \"above\" field is {type(above).__name__}, expected a list")
        return [sat for sat in above if isinstance(sat, dict)]

    async def fetch_catalog_above(
        self,
        lat: float | None = None,
        lng: float | None = None,
        alt: float = 0.0,
        radius: int = 90,
        category: int = 0,
        limit: int | None = None,
    ) -> list[CatalogEntry]:
        """
        Build a catalog from the objects above a location.

        Per-object TLE failures are logged and skipped; the rest still load.
        """
        lat = config.N2YO_ABOVE_LAT if lat is None else lat
        lng = config.N2YO_ABOVE_LON if lng is None else lng
        limit = config.N2YO_ABOVE_LIMIT if limit is None else limit

        above = await self.fetch_above(lat, lng, alt, radius, category)
        sat_ids = [sat["satid"] for sat in above[:limit] if isinstance(sat.get("satid"), int)]
        results = await asyncio.gather(
            *(self.fetch_tle(sat_id) for sat_id in sat_ids),
            return_exceptions=True,
        )

        entries: list[CatalogEntry] = []
        for sat_id, result in zip(sat_ids, results):
            if isinstance(result, CatalogFetchError):
                logger.error("Failed to fetch TLE for %s: %s", sat_id, result)
            elif isinstance(result, BaseException):
                raise result
            else:
                entries.append(result)
        logger.info("N2YO: %d of %d TLEs fetched.", len(entries), len(sat_ids))
        return entries
