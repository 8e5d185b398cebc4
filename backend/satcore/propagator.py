"""SGP4 propagation adapter and the companion sidereal angle."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from sgp4.api import SGP4_ERRORS

from satcore.elements import OrbitalRecord
from satcore.errors import PropagationUnavailable
from satcore.timeutil import as_utc, gmst_degrees, julian_date
from satcore.transforms import EarthFixedPosition, to_earth_fixed

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateVector:
    """Position (km) and velocity (km/s) in the TEME inertial frame."""

    when: datetime
    position: tuple[float, float, float]
    velocity: tuple[float, float, float]

    @property
    def radius_km(self) -> float:
        return math.sqrt(sum(c * c for c in self.position))

    @property
    def speed_km_s(self) -> float:
        return math.sqrt(sum(c * c for c in self.velocity))


def _run_sgp4(record: OrbitalRecord, when: datetime) -> tuple[int, tuple, tuple]:
    jd, fr = julian_date(when)
    error, r, v = record.satrec.sgp4(jd, fr)
    if error == 0 and not all(math.isfinite(c) for c in (*r, *v)):
        # Treat NaN output like a decay so callers see one failure mode
        error = 6
    return error, r, v


def propagate(record: OrbitalRecord, when: datetime | None = None) -> StateVector | None:
    """
    Propagate a record to an instant.

    Returns None when sgp4 reports an error for that instant (decayed orbit,
    eccentricity out of range, ...). That is a normal terminal state: skip
    the instant, do not abort the batch.
    """
    when = as_utc(when)
    error, r, v = _run_sgp4(record, when)
    if error != 0:
        log.debug(
            "No state for %s at %s: sgp4 error %d (%s)",
            record.name, when.isoformat(), error, SGP4_ERRORS.get(error, "unknown"),
        )
        return None
    return StateVector(when=when, position=tuple(r), velocity=tuple(v))


def propagate_or_raise(record: OrbitalRecord, when: datetime | None = None) -> StateVector:
    """Like propagate(), but raise PropagationUnavailable instead of returning None."""
    when = as_utc(when)
    error, r, v = _run_sgp4(record, when)
    if error != 0:
        raise PropagationUnavailable(record.name, error, SGP4_ERRORS.get(error, ""))
    return StateVector(when=when, position=tuple(r), velocity=tuple(v))


def sidereal_angle(when: datetime | None = None) -> float:
    """Greenwich Mean Sidereal Time at `when`, in degrees [0, 360)."""
    jd, fr = julian_date(as_utc(when))
    return gmst_degrees(jd + fr)


def earth_fixed_at(record: OrbitalRecord, when: datetime | None = None) -> EarthFixedPosition | None:
    """Propagate and rotate into the Earth-fixed frame; None if unavailable."""
    when = as_utc(when)
    state = propagate(record, when)
    if state is None:
        return None
    return to_earth_fixed(state.position, sidereal_angle(when))
