"""
Coordinate transforms between the inertial, Earth-fixed, geodetic,
topocentric and display frames.

Axis convention (Earth-fixed and display alike): +X through the equator at
0° longitude, +Y through the equator at 90°E, +Z through the north pole.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np

log = logging.getLogger(__name__)

# Mean Earth radius used to scale km onto the renderer's sphere
EARTH_RADIUS_KM = 6371.0

# WGS84 ellipsoid
WGS84_A = 6378.137
WGS84_F = 1.0 / 298.257223563
WGS84_E2 = WGS84_F * (2.0 - WGS84_F)

GEODETIC_ITERATIONS = 5


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EarthFixedPosition:
    """Cartesian position in km in the rotating Earth-fixed frame."""

    x: float
    y: float
    z: float
    degraded: bool = False  # True when the frame rotation fell back to inertial

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def radius_km(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class GeodeticPosition:
    latitude: float   # degrees
    longitude: float  # degrees, [-180, 180)
    altitude: float   # km above the WGS84 ellipsoid


@dataclass(frozen=True)
class LookAngles:
    azimuth: float    # degrees clockwise from north, [0, 360)
    elevation: float  # degrees above the horizon, [-90, 90]
    range_km: float


@dataclass(frozen=True)
class DisplayCoords:
    """Position on the renderer's globe, in scene units."""

    x: float
    y: float
    z: float

    ZERO: ClassVar[DisplayCoords]

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


DisplayCoords.ZERO = DisplayCoords(0.0, 0.0, 0.0)


def _normalize_lon(lon: float) -> float:
    """Normalize longitude to [-180, 180)."""
    return (lon + 180.0) % 360.0 - 180.0


def _xyz(value: Any) -> tuple[float, float, float] | None:
    """Pull an (x, y, z) float triple out of a sequence, mapping or object."""
    try:
        if isinstance(value, Mapping):
            triple = (value["x"], value["y"], value["z"])
        elif hasattr(value, "x") and hasattr(value, "y") and hasattr(value, "z"):
            triple = (value.x, value.y, value.z)
        elif isinstance(value, (str, bytes)) or value is None:
            return None
        elif isinstance(value, Sequence) or hasattr(value, "__len__"):
            if len(value) != 3:
                return None
            triple = tuple(value)
        else:
            return None
        return tuple(float(c) for c in triple)  # type: ignore[return-value]
    except (KeyError, TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Inertial <-> Earth-fixed
# ---------------------------------------------------------------------------


def to_earth_fixed(state: Any, sidereal_deg: float) -> EarthFixedPosition:
    """
    Rotate an inertial position into the Earth-fixed frame.

    `state` is a StateVector (its position is used) or an (x, y, z) triple.
    If the rotation produces non-finite values the inertial vector is
    returned unrotated with degraded=True.
    """
    position = getattr(state, "position", state)
    r = _xyz(position)
    if r is None:
        raise TypeError(f"cannot read an inertial position from {type(position).__name__}")

    try:
        theta = math.radians(sidereal_deg)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        x = r[0] * cos_t + r[1] * sin_t
        y = -r[0] * sin_t + r[1] * cos_t
        z = r[2]
        if not all(math.isfinite(c) for c in (x, y, z)):
            raise ValueError(f"non-finite rotation result for angle {sidereal_deg!r}")
    except (ArithmeticError, TypeError, ValueError) as exc:
        log.warning("Earth-fixed rotation failed, using inertial position: %s", exc)
        return EarthFixedPosition(r[0], r[1], r[2], degraded=True)

    return EarthFixedPosition(x, y, z)


def from_earth_fixed(position: Any, sidereal_deg: float) -> tuple[float, float, float]:
    """Inverse of to_earth_fixed: rotate an Earth-fixed vector back to inertial."""
    r = _xyz(position)
    if r is None:
        raise TypeError(f"cannot read an Earth-fixed position from {type(position).__name__}")
    theta = math.radians(sidereal_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return (
        r[0] * cos_t - r[1] * sin_t,
        r[0] * sin_t + r[1] * cos_t,
        r[2],
    )


# ---------------------------------------------------------------------------
# Earth-fixed <-> geodetic
# ---------------------------------------------------------------------------


def to_geodetic(position: Any) -> GeodeticPosition:
    """
    Convert Earth-fixed Cartesian km to WGS84 geodetic coordinates.

    Latitude is refined with Bowring's iteration; five passes reach
    centimetre level for orbital altitudes.
    """
    r = _xyz(position)
    if r is None:
        raise TypeError(f"cannot read an Earth-fixed position from {type(position).__name__}")
    x, y, z = r

    lon = math.atan2(y, x)
    p = math.hypot(x, y)
    lat = math.atan2(z, p * (1.0 - WGS84_E2))
    for _ in range(GEODETIC_ITERATIONS):
        sin_lat = math.sin(lat)
        n = WGS84_A / math.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)
        lat = math.atan2(z + WGS84_E2 * n * sin_lat, p)

    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    n = WGS84_A / math.sqrt(1.0 - WGS84_E2 * sin_lat * sin_lat)
    if abs(cos_lat) > 1e-10:
        alt = p / cos_lat - n
    else:
        # On the polar axis
        alt = abs(z) - WGS84_A * (1.0 - WGS84_F)

    return GeodeticPosition(
        latitude=math.degrees(lat),
        longitude=_normalize_lon(math.degrees(lon)),
        altitude=alt,
    )


def from_geodetic(lat: float, lon: float, alt_km: float = 0.0) -> EarthFixedPosition:
    """WGS84 geodetic coordinates to Earth-fixed Cartesian km."""
    phi = math.radians(lat)
    lam = math.radians(lon)
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    n = WGS84_A / math.sqrt(1.0 - WGS84_E2 * sin_phi * sin_phi)
    return EarthFixedPosition(
        (n + alt_km) * cos_phi * math.cos(lam),
        (n + alt_km) * cos_phi * math.sin(lam),
        (n * (1.0 - WGS84_E2) + alt_km) * sin_phi,
    )


# ---------------------------------------------------------------------------
# Display sphere
# ---------------------------------------------------------------------------


def to_display_coords(position: Any, globe_radius: float = 1.0) -> DisplayCoords:
    """
    Scale an Earth-fixed km position onto a globe of `globe_radius` units.

    Accepts an (x, y, z) sequence or anything with x/y/z fields or keys.
    Other input yields DisplayCoords.ZERO.
    """
    r = _xyz(position)
    if r is None:
        log.warning("Cannot place %r on the globe; using origin.", position)
        return DisplayCoords.ZERO
    scale = globe_radius / EARTH_RADIUS_KM
    return DisplayCoords(r[0] * scale, r[1] * scale, r[2] * scale)


def lat_lon_to_vector(lat: float, lon: float, radius: float = 1.0) -> DisplayCoords:
    """Point on a sphere of `radius` at (lat, lon); +lon is east of Greenwich."""
    phi = math.radians(lat)
    lam = math.radians(lon)
    return DisplayCoords(
        radius * math.cos(phi) * math.cos(lam),
        radius * math.cos(phi) * math.sin(lam),
        radius * math.sin(phi),
    )


# ---------------------------------------------------------------------------
# Topocentric
# ---------------------------------------------------------------------------


def look_angles(
    observer_lat: float,
    observer_lon: float,
    observer_alt_km: float,
    target: Any,
) -> LookAngles:
    """
    Azimuth, elevation and range from a ground observer to an Earth-fixed target.

    The line of sight is projected onto the observer's East-North-Up basis.
    """
    r = _xyz(target)
    if r is None:
        raise TypeError(f"cannot read a target position from {type(target).__name__}")
    obs = from_geodetic(observer_lat, observer_lon, observer_alt_km)

    dx = r[0] - obs.x
    dy = r[1] - obs.y
    dz = r[2] - obs.z

    phi = math.radians(observer_lat)
    lam = math.radians(observer_lon)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)

    east = -sin_lam * dx + cos_lam * dy
    north = -sin_phi * cos_lam * dx - sin_phi * sin_lam * dy + cos_phi * dz
    up = cos_phi * cos_lam * dx + cos_phi * sin_lam * dy + sin_phi * dz

    rng = math.sqrt(dx * dx + dy * dy + dz * dz)
    if rng == 0.0:
        return LookAngles(azimuth=0.0, elevation=90.0, range_km=0.0)

    elevation = math.degrees(math.asin(max(-1.0, min(1.0, up / rng))))
    azimuth = math.degrees(math.atan2(east, north)) % 360.0
    if azimuth >= 360.0:
        azimuth = 0.0
    return LookAngles(azimuth=azimuth, elevation=elevation, range_km=rng)


def look_angles_array(
    observer_lat: float,
    observer_lon: float,
    observer_alt_km: float,
    targets: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Vectorised look_angles for an (n, 3) array of Earth-fixed targets.

    Returns:
        azimuth, elevation (degrees) and range (km), each shape (n,).
        Rows with NaN input come back as NaN.
    """
    obs = np.array(from_geodetic(observer_lat, observer_lon, observer_alt_km).as_tuple())
    diff = np.asarray(targets, dtype=np.float64) - obs

    phi = math.radians(observer_lat)
    lam = math.radians(observer_lon)
    enu = np.array([
        [-math.sin(lam), math.cos(lam), 0.0],
        [-math.sin(phi) * math.cos(lam), -math.sin(phi) * math.sin(lam), math.cos(phi)],
        [math.cos(phi) * math.cos(lam), math.cos(phi) * math.sin(lam), math.sin(phi)],
    ])
    east, north, up = (diff @ enu.T).T

    rng = np.linalg.norm(diff, axis=-1)
    with np.errstate(invalid="ignore", divide="ignore"):
        elevation = np.degrees(np.arcsin(np.clip(up / rng, -1.0, 1.0)))
    azimuth = np.degrees(np.arctan2(east, north)) % 360.0
    return azimuth, elevation, rng
