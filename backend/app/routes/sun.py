"""GET /api/sun — sub-solar point and light direction for the globe."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query

from app import config
from app.models import SunResponse, Vector3
from satcore.solar import sub_solar_point, sun_direction
from satcore.timeutil import as_utc

router = APIRouter()


@router.get("/api/sun", response_model=SunResponse)
async def get_sun(
    at: datetime | None = Query(default=None, description="UTC instant, default now"),
    radius: float | None = Query(default=None, gt=0, description="Length of the direction vector"),
):
    when = as_utc(at)
    point = sub_solar_point(when)
    direction = sun_direction(when, radius or config.GLOBE_RADIUS)
    return SunResponse(
        timestamp=when,
        lat=point.latitude,
        lon=point.longitude,
        declination=point.declination,
        right_ascension=point.right_ascension,
        direction=Vector3(x=direction.x, y=direction.y, z=direction.z),
    )
