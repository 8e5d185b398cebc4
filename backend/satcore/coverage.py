"""
Ground coverage footprint.

The footprint is the small circle around the sub-satellite point from which
the satellite stands at least `min_elevation` above the horizon. Vertices are
laid out with a flat lat/lon offset scaled by 1/cos(latitude) of the
sub-satellite point, which stretches and eventually breaks down as the
sub-satellite point nears a pole. That is a known limitation of this
approximation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from satcore.elements import OrbitalRecord
from satcore.propagator import earth_fixed_at
from satcore.timeutil import as_utc
from satcore.transforms import EARTH_RADIUS_KM, DisplayCoords

log = logging.getLogger(__name__)

COVERAGE_SEGMENTS = 64
# Draw the outline just above the globe so it is not hidden by the surface
SURFACE_LIFT = 1.01
# Keeps 1/cos(lat) finite when the sub-satellite point sits on a pole
MIN_COS_LAT = 1e-6


@dataclass(frozen=True)
class CoverageCircle:
    """Closed polygon approximating a satellite's footprint at one instant."""

    when: datetime
    center: tuple[float, float]        # geocentric sub-satellite (lat, lon), degrees
    altitude_km: float                 # above the mean Earth sphere
    angle_deg: float                   # Earth central angle of the footprint radius
    min_elevation: float
    latlon: list[tuple[float, float]]  # first vertex repeated at the end
    points: list[DisplayCoords]        # same vertices on the display sphere


def coverage_angle(altitude_km: float, min_elevation: float = 0.0) -> float:
    """
    Angular radius (degrees) of the footprint for a satellite at `altitude_km`.

    Earth central angle to the ground points that see the satellite at exactly
    `min_elevation`: acos((R / (R + h)) * cos(el)) - el. With the default 0
    mask this is the horizon footprint acos(R / (R + h)). Zero for altitude <= 0.
    """
    if altitude_km <= 0.0:
        return 0.0
    ratio = EARTH_RADIUS_KM / (EARTH_RADIUS_KM + altitude_km)
    cos_angle = ratio * math.cos(math.radians(min_elevation))
    angle = math.degrees(math.acos(max(-1.0, min(1.0, cos_angle)))) - min_elevation
    return max(angle, 0.0)


def footprint_latlon(
    center_lat: float,
    center_lon: float,
    angle_deg: float,
    segments: int = COVERAGE_SEGMENTS,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Footprint vertices around (center_lat, center_lon), open (not closed).

    Returns:
        lats, lons: float64 arrays shape (segments,), longitudes in [-180, 180)
    """
    theta = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    cos_lat = max(math.cos(math.radians(center_lat)), MIN_COS_LAT)
    lats = center_lat + angle_deg * np.cos(theta)
    lons = center_lon + angle_deg * np.sin(theta) / cos_lat
    lons = (lons + 180.0) % 360.0 - 180.0
    return lats, lons


def coverage_circle(
    record: OrbitalRecord,
    when: datetime | None = None,
    min_elevation: float = 0.0,
    segments: int = COVERAGE_SEGMENTS,
    globe_radius: float = 1.0,
    lift: float = SURFACE_LIFT,
) -> CoverageCircle | None:
    """Footprint polygon of `record` at `when`; None if propagation is unavailable."""
    when = as_utc(when)
    position = earth_fixed_at(record, when)
    if position is None:
        log.debug("No coverage for %s at %s: propagation unavailable.", record.name, when.isoformat())
        return None

    r = position.radius_km
    altitude = r - EARTH_RADIUS_KM
    center_lat = math.degrees(math.asin(position.z / r))
    center_lon = math.degrees(math.atan2(position.y, position.x))
    angle = coverage_angle(altitude, min_elevation)

    lats, lons = footprint_latlon(center_lat, center_lon, angle, segments)
    phi = np.radians(lats)
    lam = np.radians(lons)
    radius = globe_radius * lift
    xyz = np.column_stack((
        radius * np.cos(phi) * np.cos(lam),
        radius * np.cos(phi) * np.sin(lam),
        radius * np.sin(phi),
    ))

    latlon = [(float(a), float(b)) for a, b in zip(lats, lons)]
    points = [DisplayCoords(float(x), float(y), float(z)) for x, y, z in xyz]
    if latlon:
        latlon.append(latlon[0])
        points.append(points[0])

    return CoverageCircle(
        when=when,
        center=(center_lat, center_lon),
        altitude_km=altitude,
        angle_deg=angle,
        min_elevation=min_elevation,
        latlon=latlon,
        points=points,
    )
