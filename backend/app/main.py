"""FastAPI application — CORS, route registration, catalog autoload, health check."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import config
from app.models import HealthResponse
from app.routes.catalog import router as catalog_router
from app.routes.satellites import router as satellites_router
from app.routes.sun import router as sun_router
from app.sources import build_fetcher
from satcore.catalog import get_catalog

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    task: asyncio.Task | None = None
    if config.AUTOLOAD:
        fetch, label = build_fetcher()
        task = get_catalog().schedule_reload(fetch, label)
    yield
    if task is not None and not task.done():
        task.cancel()


app = FastAPI(
    title="Satellite Globe Backend",
    description="Live satellite positions, passes, coverage and sun geometry from TLE catalogs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(catalog_router)
app.include_router(satellites_router)
app.include_router(sun_router)


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", catalog_size=len(get_catalog()))
