"""Satellite endpoints: positions, look angles, passes and coverage.

GET /api/satellites                      — every object's position (per frame)
GET /api/satellites/{index}              — one object with its elements
GET /api/satellites/{index}/look         — look angles from an observer
GET /api/satellites/{index}/passes       — pass prediction (explicit request only)
GET /api/satellites/{index}/coverage     — footprint polygon
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query

from app import config
from app.models import (
    CoverageResponse,
    Geodetic,
    LookAnglesResponse,
    PassesResponse,
    PassInfo,
    PositionsResponse,
    SatelliteDetail,
    SatellitePosition,
    SubSatellitePoint,
    Vector3,
)
from satcore.catalog import get_catalog
from satcore.coverage import coverage_circle
from satcore.elements import OrbitalRecord
from satcore.errors import PropagationUnavailable
from satcore.passes import compute_passes
from satcore.propagator import propagate_or_raise, sidereal_angle
from satcore.timeutil import as_utc
from satcore.transforms import look_angles, to_display_coords, to_earth_fixed, to_geodetic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/satellites", tags=["satellites"])


def _record_or_404(index: int) -> OrbitalRecord:
    record = get_catalog().get(index)
    if record is None:
        raise HTTPException(status_code=404, detail=f"No satellite at index {index}")
    return record


def _vector(v) -> Vector3:
    return Vector3(x=v.x, y=v.y, z=v.z)


@router.get("", response_model=PositionsResponse)
async def get_positions(
    at: datetime | None = Query(default=None, description="UTC instant, default now"),
    globe_radius: float | None = Query(default=None, gt=0),
):
    catalog = get_catalog()
    if not len(catalog) and catalog.last_error:
        raise HTTPException(status_code=503, detail=f"Catalog unavailable: {catalog.last_error}")

    when = as_utc(at)
    radius = globe_radius or config.GLOBE_RADIUS
    positions = catalog.positions(when, radius)
    return PositionsResponse(
        timestamp=when,
        globe_radius=radius,
        satellites=[
            SatellitePosition(
                index=p.index,
                name=p.name,
                norad_id=p.catalog_number,
                geodetic=Geodetic(lat=p.geodetic.latitude, lon=p.geodetic.longitude, alt_km=p.geodetic.altitude),
                display=_vector(p.display),
                degraded=p.degraded,
            )
            for p in positions
        ],
    )


@router.get("/{index}", response_model=SatelliteDetail)
async def get_satellite(
    index: int,
    at: datetime | None = Query(default=None),
    globe_radius: float | None = Query(default=None, gt=0),
):
    record = _record_or_404(index)
    when = as_utc(at)
    try:
        state = propagate_or_raise(record, when)
    except PropagationUnavailable as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    position = to_earth_fixed(state, sidereal_angle(when))
    geo = to_geodetic(position)
    return SatelliteDetail(
        index=index,
        name=record.name,
        norad_id=record.catalog_number,
        geodetic=Geodetic(lat=geo.latitude, lon=geo.longitude, alt_km=geo.altitude),
        display=_vector(to_display_coords(position, globe_radius or config.GLOBE_RADIUS)),
        degraded=position.degraded,
        timestamp=when,
        country=record.country,
        line1=record.line1,
        line2=record.line2,
        inclination_deg=record.inclination_deg,
        eccentricity=record.eccentricity,
        period_min=record.period_minutes,
        speed_km_s=state.speed_km_s,
    )


@router.get("/{index}/look", response_model=LookAnglesResponse)
async def get_look_angles(
    index: int,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    alt_km: float = Query(default=0.0),
    at: datetime | None = Query(default=None),
):
    record = _record_or_404(index)
    when = as_utc(at)
    try:
        state = propagate_or_raise(record, when)
    except PropagationUnavailable as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    angles = look_angles(lat, lon, alt_km, to_earth_fixed(state, sidereal_angle(when)))
    return LookAnglesResponse(
        index=index,
        name=record.name,
        timestamp=when,
        azimuth=angles.azimuth,
        elevation=angles.elevation,
        range_km=angles.range_km,
        visible=angles.elevation > config.MIN_ELEVATION,
    )


# Plain def: FastAPI runs it in the threadpool
@router.get("/{index}/passes", response_model=PassesResponse)
def get_passes(
    index: int,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    alt_km: float = Query(default=0.0),
    hours: float = Query(default=24.0, gt=0),
    min_elevation: float | None = Query(default=None, ge=-90, lt=90),
    start: datetime | None = Query(default=None),
):
    record = _record_or_404(index)
    if hours > config.MAX_PASS_HOURS:
        raise HTTPException(status_code=400, detail=f"hours must be <= {config.MAX_PASS_HOURS:g}")

    when = as_utc(start)
    threshold = config.MIN_ELEVATION if min_elevation is None else min_elevation
    passes = compute_passes(
        record, lat, lon, alt_km,
        horizon_hours=hours, start=when, min_elevation=threshold,
    )
    return PassesResponse(
        index=index,
        name=record.name,
        observer=Geodetic(lat=lat, lon=lon, alt_km=alt_km),
        start=when,
        horizon_hours=hours,
        min_elevation=threshold,
        passes=[
            PassInfo(
                start=p.start,
                end=p.end,
                peak_elevation=p.peak_elevation,
                peak_time=p.peak_time,
                duration_minutes=p.duration_minutes,
                start_azimuth=p.start_azimuth,
                end_azimuth=p.end_azimuth,
            )
            for p in passes
        ],
    )


@router.get("/{index}/coverage", response_model=CoverageResponse)
async def get_coverage(
    index: int,
    min_elevation: float | None = Query(default=None, ge=0, lt=90),
    at: datetime | None = Query(default=None),
    globe_radius: float | None = Query(default=None, gt=0),
):
    record = _record_or_404(index)
    when = as_utc(at)
    threshold = config.MIN_ELEVATION if min_elevation is None else min_elevation
    circle = coverage_circle(
        record, when,
        min_elevation=threshold,
        globe_radius=globe_radius or config.GLOBE_RADIUS,
    )
    if circle is None:
        raise HTTPException(status_code=422, detail=f"{record.name}: no position at {when.isoformat()}")

    return CoverageResponse(
        index=index,
        name=record.name,
        timestamp=when,
        center=SubSatellitePoint(lat=circle.center[0], lon=circle.center[1], alt_km=circle.altitude_km),
        angle_deg=circle.angle_deg,
        min_elevation=threshold,
        latlon=circle.latlon,
        points=[_vector(p) for p in circle.points],
    )
