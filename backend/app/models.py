from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Vector3(BaseModel):
    x: float
    y: float
    z: float


class Geodetic(BaseModel):
    lat: float = Field(description="Latitude (degrees)")
    lon: float = Field(description="Longitude (degrees, east positive)")
    alt_km: float = Field(description="Altitude above the WGS84 ellipsoid (km)")


# --- Catalog ---

class CatalogStatus(BaseModel):
    size: int
    source: str | None = None
    loaded_at: datetime | None = None
    last_error: str | None = None


class ReloadResponse(BaseModel):
    source: str
    loaded: int
    error: str | None = None


# --- Satellites ---

class SatellitePosition(BaseModel):
    index: int = Field(description="Stable position in the active catalog")
    name: str
    norad_id: int | None = None
    geodetic: Geodetic
    display: Vector3
    degraded: bool = Field(default=False, description="Frame rotation failed; position is unrotated")


class PositionsResponse(BaseModel):
    timestamp: datetime
    globe_radius: float
    satellites: list[SatellitePosition] = []


class SatelliteDetail(SatellitePosition):
    timestamp: datetime
    country: str | None = None
    line1: str
    line2: str
    inclination_deg: float
    eccentricity: float
    period_min: float
    speed_km_s: float


class LookAnglesResponse(BaseModel):
    index: int
    name: str
    timestamp: datetime
    azimuth: float = Field(description="Degrees clockwise from north, [0, 360)")
    elevation: float = Field(description="Degrees above the horizon")
    range_km: float
    visible: bool


class PassInfo(BaseModel):
    start: datetime
    end: datetime
    peak_elevation: float
    peak_time: datetime
    duration_minutes: float
    start_azimuth: float
    end_azimuth: float


class PassesResponse(BaseModel):
    index: int
    name: str
    observer: Geodetic
    start: datetime
    horizon_hours: float
    min_elevation: float
    passes: list[PassInfo] = []


class SubSatellitePoint(BaseModel):
    lat: float = Field(description="Geocentric latitude (degrees)")
    lon: float = Field(description="Longitude (degrees, east positive)")
    alt_km: float = Field(description="Altitude above the 6371 km mean Earth sphere (km)")


class CoverageResponse(BaseModel):
    index: int
    name: str
    timestamp: datetime
    center: SubSatellitePoint
    angle_deg: float
    min_elevation: float
    latlon: list[tuple[float, float]] = Field(description="Closed (lat, lon) outline")
    points: list[Vector3] = Field(description="Closed outline on the display sphere")


# --- Sun ---

class SunResponse(BaseModel):
    timestamp: datetime
    lat: float
    lon: float
    declination: float
    right_ascension: float
    direction: Vector3


# --- API responses ---

class HealthResponse(BaseModel):
    status: str = "ok"
    catalog_size: int = 0
