"""CelesTrak GP client: fetches element sets as plain TLE text."""

from __future__ import annotations

import logging

import httpx

from app import config
from app.http_client import get_with_retry
from satcore.elements import CatalogEntry, split_tle_text

logger = logging.getLogger(__name__)


class CelesTrakClient:
    """Reads CelesTrak's gp.php endpoint in TLE format, one group at a time."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **retry_options,
    ):
        self.base_url = base_url or config.CELESTRAK_URL
        self._transport = transport
        self._retry_options = retry_options

    async def fetch_group(self, group: str | None = None) -> list[CatalogEntry]:
        """Fetch one CelesTrak group ("stations", "weather", "starlink", ...)."""
        group = (group or config.CELESTRAK_GROUP).lower()
        resp = await get_with_retry(
            self.base_url,
            params={"GROUP": group, "FORMAT": "TLE"},
            transport=self._transport,
            **self._retry_options,
        )
        entries = split_tle_text(resp.text)
        logger.info("CelesTrak group '%s': %d element sets.", group, len(entries))
        return entries

    async def fetch_catalog_number(self, norad_id: int) -> list[CatalogEntry]:
        """Fetch the current element set for one NORAD catalog number."""
        resp = await get_with_retry(
            self.base_url,
            params={"CATNR": str(norad_id), "FORMAT": "TLE"},
            transport=self._transport,
            **self._retry_options,
        )
        return split_tle_text(resp.text)
