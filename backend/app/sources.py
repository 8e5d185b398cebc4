"""Catalog sources selectable by configuration."""

from __future__ import annotations

import logging
import pathlib

from app import config
from app.celestrak import CelesTrakClient
from app.n2yo import N2YOClient
from satcore.catalog import CatalogFetcher
from satcore.elements import CatalogEntry, split_tle_text
from satcore.errors import CatalogFetchError

logger = logging.getLogger(__name__)


async def read_tle_file(path: str | pathlib.Path) -> list[CatalogEntry]:
    """Read a local TLE text file (name line + two element lines per object)."""
    path = pathlib.Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogFetchError(f"cannot read {path}: {exc}") from exc
    return split_tle_text(text)


def build_fetcher(source: str | None = None) -> tuple[CatalogFetcher, str]:
    """
    Return (fetch coroutine function, label) for a configured source.

    Raises:
        ValueError: unknown source name.
    """
    source = (source or config.CATALOG_SOURCE).lower()
    if source == "celestrak":
        client = CelesTrakClient()
        group = config.CELESTRAK_GROUP
        return (lambda: client.fetch_group(group)), f"celestrak:{group}"
    if source == "n2yo":
        n2yo = N2YOClient()
        return n2yo.fetch_catalog_above, "n2yo:above"
    if source == "file":
        path = config.CATALOG_FILE
        return (lambda: read_tle_file(path)), f"file:{path}"
    raise ValueError(f"Unknown catalog source '{source}'. Use celestrak, n2yo or file.")
