"""
Visibility and pass prediction.

A pass is a contiguous run of grid samples with the satellite above the
observer's horizon. The scan uses a fixed one-minute step, so start, end and
peak are quantised to that step. Only passes that both begin and end inside
the scanned window are reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

import numpy as np

from satcore.elements import OrbitalRecord
from satcore.propagator import earth_fixed_at
from satcore.timeutil import as_utc, gmst_degrees, time_grid
from satcore.transforms import look_angles, look_angles_array

log = logging.getLogger(__name__)

DEFAULT_STEP_SECONDS = 60
DEFAULT_HORIZON_HOURS = 24.0


@dataclass(frozen=True)
class Pass:
    """One horizon-to-horizon pass over an observer."""

    start: datetime
    end: datetime
    peak_elevation: float  # degrees
    peak_time: datetime
    duration_minutes: float
    start_azimuth: float   # degrees, at the first sample above the horizon
    end_azimuth: float     # degrees, at the first sample back below it


def _earth_fixed_grid(
    record: OrbitalRecord,
    jd: np.ndarray,
    fr: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Propagate a record over a Julian date grid and rotate into Earth-fixed.

    Returns:
        positions: float64 array shape (n_times, 3) in km, NaN where sgp4 failed
        valid: bool array shape (n_times,)
    """
    e, r, _ = record.satrec.sgp4_array(jd, fr)
    r = np.asarray(r, dtype=np.float64)
    valid = (np.asarray(e) == 0) & np.all(np.isfinite(r), axis=1)

    theta = np.radians(gmst_degrees(jd + fr))
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    ecf = np.empty_like(r)
    ecf[:, 0] = r[:, 0] * cos_t + r[:, 1] * sin_t
    ecf[:, 1] = -r[:, 0] * sin_t + r[:, 1] * cos_t
    ecf[:, 2] = r[:, 2]
    ecf[~valid] = np.nan

    n_failed = int(np.sum(~valid))
    if n_failed:
        log.debug("%s: %d of %d grid instants unavailable.", record.name, n_failed, len(valid))
    return ecf, valid


def compute_passes(
    record: OrbitalRecord,
    observer_lat: float,
    observer_lon: float,
    observer_alt_km: float = 0.0,
    horizon_hours: float = DEFAULT_HORIZON_HOURS,
    start: datetime | None = None,
    step_seconds: int = DEFAULT_STEP_SECONDS,
    min_elevation: float = 0.0,
) -> list[Pass]:
    """
    Scan forward from `start` (default now) and return the completed passes.

    Instants where propagation is unavailable are skipped without changing
    the in-pass state. A pass already under way at `start`, or still open at
    the end of the window, is not returned.
    """
    start = as_utc(start)
    times, jd, fr = time_grid(start, horizon_hours * 60.0, step_seconds)
    ecf, valid = _earth_fixed_grid(record, jd, fr)
    azimuth, elevation, _ = look_angles_array(observer_lat, observer_lon, observer_alt_km, ecf)

    passes: list[Pass] = []
    above: bool | None = None  # unknown until the first valid sample
    pass_start = peak_time = None
    start_az = 0.0
    peak_el = -90.0

    for i, when in enumerate(times):
        if not valid[i]:
            continue
        el = float(elevation[i])
        high = el > min_elevation

        if above is None:
            above = high
            continue

        if high and not above:
            pass_start = when
            start_az = float(azimuth[i])
            peak_el = el
            peak_time = when
        elif high and above and pass_start is not None:
            if el > peak_el:
                peak_el = el
                peak_time = when
        elif not high and above and pass_start is not None:
            passes.append(
                Pass(
                    start=pass_start,
                    end=when,
                    peak_elevation=peak_el,
                    peak_time=peak_time,
                    duration_minutes=(when - pass_start).total_seconds() / 60.0,
                    start_azimuth=start_az,
                    end_azimuth=float(azimuth[i]),
                )
            )
            pass_start = None
        above = high

    log.info(
        "%s: %d passes over (%.3f, %.3f) in %.1f h from %s.",
        record.name, len(passes), observer_lat, observer_lon, horizon_hours, start.isoformat(),
    )
    return passes


def next_pass(
    record: OrbitalRecord,
    observer_lat: float,
    observer_lon: float,
    observer_alt_km: float = 0.0,
    horizon_hours: float = DEFAULT_HORIZON_HOURS,
    start: datetime | None = None,
    min_elevation: float = 0.0,
) -> Pass | None:
    """First completed pass in the window, or None."""
    passes = compute_passes(
        record, observer_lat, observer_lon, observer_alt_km,
        horizon_hours=horizon_hours, start=start, min_elevation=min_elevation,
    )
    return passes[0] if passes else None


def is_above_horizon(
    record: OrbitalRecord,
    when: datetime | None,
    lat: float,
    lon: float,
    alt_km: float = 0.0,
    min_elevation: float = 0.0,
) -> bool:
    """Whether the satellite is above `min_elevation` as seen from (lat, lon) at `when`."""
    position = earth_fixed_at(record, when)
    if position is None:
        return False
    return look_angles(lat, lon, alt_km, position).elevation > min_elevation
