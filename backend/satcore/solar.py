"""
Sub-solar point and sun direction.

Low-precision solar position (the Astronomical Almanac's short series): good
to a fraction of a degree, which is plenty for lighting the globe and drawing
the terminator. Not meant for precision work.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from satcore.timeutil import J2000_JD, as_utc, gmst_degrees, julian_date
from satcore.transforms import DisplayCoords, lat_lon_to_vector


@dataclass(frozen=True)
class SubSolarPoint:
    latitude: float         # degrees, equals the solar declination
    longitude: float        # degrees, [-180, 180)
    declination: float      # degrees
    right_ascension: float  # degrees, [0, 360)


def sub_solar_point(when: datetime | None = None) -> SubSolarPoint:
    """Point on Earth with the sun at the zenith at `when`."""
    jd, fr = julian_date(as_utc(when))
    jd_ut = jd + fr
    n = jd_ut - J2000_JD

    mean_longitude = (280.460 + 0.9856474 * n) % 360.0
    mean_anomaly = math.radians((357.528 + 0.9856003 * n) % 360.0)
    ecliptic_longitude = math.radians(
        mean_longitude
        + 1.915 * math.sin(mean_anomaly)
        + 0.020 * math.sin(2.0 * mean_anomaly)
    )
    obliquity = math.radians(23.439 - 0.0000004 * n)

    declination = math.degrees(math.asin(math.sin(obliquity) * math.sin(ecliptic_longitude)))
    right_ascension = math.degrees(
        math.atan2(math.cos(obliquity) * math.sin(ecliptic_longitude), math.cos(ecliptic_longitude))
    ) % 360.0

    longitude = (right_ascension - gmst_degrees(jd_ut) + 180.0) % 360.0 - 180.0
    return SubSolarPoint(
        latitude=declination,
        longitude=longitude,
        declination=declination,
        right_ascension=right_ascension,
    )


def sun_direction(when: datetime | None = None, radius: float = 1.0) -> DisplayCoords:
    """Vector from the globe centre toward the sun, for a directional light."""
    point = sub_solar_point(when)
    return lat_lon_to_vector(point.latitude, point.longitude, radius)


def solar_elevation(lat: float, lon: float, when: datetime | None = None) -> float:
    """Sun elevation in degrees seen from (lat, lon); negative at night."""
    point = sub_solar_point(when)
    phi = math.radians(lat)
    dec = math.radians(point.declination)
    hour_angle = math.radians(lon - point.longitude)
    sin_el = math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(hour_angle)
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_el))))
