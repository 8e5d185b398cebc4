"""
Active catalog: the session's list of orbital records.

A reload awaits one fetch coroutine, parses the result and publishes the new
records with a single assignment, so readers see either the old catalog or
the new one and never a partial list. Fetch failures leave the old catalog in
place and come back as a CatalogLoadResult carrying the error text.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from satcore.elements import CatalogEntry, OrbitalRecord, parse_catalog
from satcore.errors import CatalogFetchError
from satcore.propagator import earth_fixed_at
from satcore.timeutil import as_utc
from satcore.transforms import DisplayCoords, GeodeticPosition, to_display_coords, to_geodetic

log = logging.getLogger(__name__)

CatalogFetcher = Callable[[], Awaitable[Iterable[CatalogEntry | Mapping[str, Any] | tuple]]]


@dataclass
class CatalogLoadResult:
    source: str
    records: list[OrbitalRecord] = field(default_factory=list)
    error: str | None = None
    superseded: bool = False  # a newer load started first; nothing was published

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SatellitePosition:
    """Per-frame position of one catalog object."""

    index: int
    name: str
    catalog_number: int | None
    geodetic: GeodeticPosition
    display: DisplayCoords
    degraded: bool


class ActiveCatalog:
    """Holds the current records; index in `records` is the stable identity."""

    def __init__(self, records: Iterable[OrbitalRecord] = ()):
        self._records: tuple[OrbitalRecord, ...] = tuple(records)
        self.source: str | None = None
        self.loaded_at: datetime | None = None
        self.last_error: str | None = None
        self._reload_task: asyncio.Task | None = None
        self._reload_source: str | None = None
        self._generation = 0

    # --- access ---

    @property
    def records(self) -> tuple[OrbitalRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, index: int) -> OrbitalRecord | None:
        records = self._records
        if 0 <= index < len(records):
            return records[index]
        return None

    def replace(self, records: Iterable[OrbitalRecord], source: str = "manual") -> None:
        """Publish a new record list in one step; loads started earlier will not overwrite it."""
        self._generation += 1
        self._records = tuple(records)
        self.source = source
        self.loaded_at = as_utc(None)
        self.last_error = None

    # --- loading ---

    async def reload(self, fetch: CatalogFetcher, source: str) -> CatalogLoadResult:
        """
        Fetch, parse and publish a catalog.

        CatalogFetchError is reported in the result, never raised. Cancellation
        propagates and leaves the current catalog untouched. Only the most
        recently started load may publish: a load that finishes after a newer
        one has begun is discarded and comes back with superseded=True.
        """
        self._generation += 1
        generation = self._generation
        log.info("Loading catalog from %s...", source)
        try:
            entries = await fetch()
        except CatalogFetchError as exc:
            if generation != self._generation:
                return self._superseded(source, str(exc))
            log.error("Catalog load from %s failed: %s", source, exc)
            self.last_error = str(exc)
            return CatalogLoadResult(source=source, error=str(exc))

        records = parse_catalog(entries)
        if generation != self._generation:
            return self._superseded(source, "a newer catalog load has started")
        self.replace(records, source)
        log.info("Catalog from %s loaded: %d objects.", source, len(records))
        return CatalogLoadResult(source=source, records=records)

    def _superseded(self, source: str, reason: str) -> CatalogLoadResult:
        log.info("Discarding catalog load from %s: %s", source, reason)
        return CatalogLoadResult(source=source, error=f"superseded: {reason}", superseded=True)

    def schedule_reload(self, fetch: CatalogFetcher, source: str) -> asyncio.Task:
        """Start a reload in the background, cancelling one still in flight."""
        if self._reload_task is not None and not self._reload_task.done():
            log.info("Cancelling in-flight catalog load from %s.", self._reload_source)
            self._reload_task.cancel()
        self._reload_source = source
        self._reload_task = asyncio.get_running_loop().create_task(self.reload(fetch, source))
        return self._reload_task

    # --- per-frame snapshot ---

    def positions(self, when: datetime | None = None, globe_radius: float = 1.0) -> list[SatellitePosition]:
        """Propagate every record to `when`; objects with no state are left out."""
        when = as_utc(when)
        out: list[SatellitePosition] = []
        for index, record in enumerate(self._records):
            position = earth_fixed_at(record, when)
            if position is None:
                continue
            out.append(
                SatellitePosition(
                    index=index,
                    name=record.name,
                    catalog_number=record.catalog_number,
                    geodetic=to_geodetic(position),
                    display=to_display_coords(position, globe_radius),
                    degraded=position.degraded,
                )
            )
        return out


# Singleton
_catalog: ActiveCatalog | None = None


def get_catalog() -> ActiveCatalog:
    global _catalog
    if _catalog is None:
        _catalog = ActiveCatalog()
    return _catalog
