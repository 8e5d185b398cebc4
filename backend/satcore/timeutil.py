"""Time scale helpers: UTC datetimes, Julian dates and Greenwich sidereal time."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import numpy as np
from sgp4.api import jday

J2000_JD = 2451545.0
DAYS_PER_CENTURY = 36525.0


def as_utc(when: datetime | None = None) -> datetime:
    """Return `when` as an aware UTC datetime (now if None, naive means UTC)."""
    if when is None:
        return datetime.now(timezone.utc)
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def julian_date(when: datetime) -> tuple[float, float]:
    """Split Julian date (whole part, fraction) as sgp4 expects it."""
    when = as_utc(when)
    return jday(
        when.year, when.month, when.day,
        when.hour, when.minute,
        when.second + when.microsecond / 1e6,
    )


def gmst_degrees(jd_ut1: float) -> float:
    """
    Greenwich Mean Sidereal Time in degrees [0, 360).

    IAU-82 polynomial in Julian centuries of UT1 since J2000, the same
    expression sgp4 uses internally (sgp4.propagation.gstime). Every frame
    rotation in the package goes through this function.
    """
    tut1 = (jd_ut1 - J2000_JD) / DAYS_PER_CENTURY
    seconds = (
        -6.2e-6 * tut1 ** 3
        + 0.093104 * tut1 ** 2
        + (876600.0 * 3600.0 + 8640184.812866) * tut1
        + 67310.54841
    )
    # 86400 sidereal seconds per 360 degrees
    return (seconds / 240.0) % 360.0


def time_grid(
    start: datetime,
    minutes: float,
    step_seconds: int = 60,
) -> tuple[list[datetime], np.ndarray, np.ndarray]:
    """
    Build a fixed-step time grid covering [start, start + minutes].

    Returns:
        times: aware UTC datetimes, one per step
        jd_arr: float64 array of Julian Date integer parts
        fr_arr: float64 array of Julian Date fractions
    """
    start = as_utc(start)
    n_steps = int(minutes * 60 // step_seconds) + 1
    times: list[datetime] = []
    jd_list: list[float] = []
    fr_list: list[float] = []
    for i in range(n_steps):
        dt = start + timedelta(seconds=i * step_seconds)
        jd_val, fr_val = julian_date(dt)
        times.append(dt)
        jd_list.append(jd_val)
        fr_list.append(fr_val)
    return times, np.array(jd_list, dtype=np.float64), np.array(fr_list, dtype=np.float64)
