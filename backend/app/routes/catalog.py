"""Catalog endpoints: GET /api/catalog, POST /api/catalog/reload."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response

from app.models import CatalogStatus, ReloadResponse
from app.sources import build_fetcher
from satcore.catalog import get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("", response_model=CatalogStatus)
async def catalog_status():
    catalog = get_catalog()
    return CatalogStatus(
        size=len(catalog),
        source=catalog.source,
        loaded_at=catalog.loaded_at,
        last_error=catalog.last_error,
    )


@router.post("/reload", response_model=ReloadResponse)
async def reload_catalog(
    response: Response,
    source: str | None = Query(default=None, description="celestrak, n2yo or file"),
):
    """
    Fetch a fresh catalog and swap it in. The old catalog stays on failure
    (502). A load overtaken by a newer one publishes nothing (409).
    """
    try:
        fetch, label = build_fetcher(source)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    result = await get_catalog().reload(fetch, label)
    if result.superseded:
        response.status_code = 409
    elif not result.ok:
        response.status_code = 502
    return ReloadResponse(source=result.source, loaded=len(result.records), error=result.error)
