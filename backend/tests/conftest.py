"""Shared fixtures: a reference ISS element set and a stand-in sgp4 state."""

from __future__ import annotations

from datetime import datetime, timezone

import numpy as np
import pytest

from satcore.catalog import get_catalog
from satcore.elements import OrbitalRecord, parse_element_set

ISS_NAME = "ISS (ZARYA)"
ISS_L1 = "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991"
ISS_L2 = "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482"

# A day after the element set epoch (2019-12-09 16:38 UTC)
T0 = datetime(2019, 12, 10, 0, 0, 0, tzinfo=timezone.utc)


class FailingSatrec:
    """Mimics a Satrec whose orbit has decayed: every instant fails."""

    error = 0
    jdsatepoch = 2458826.5
    jdsatepochF = 0.69339541
    no_kozai = 0.0676
    inclo = 0.9
    ecco = 0.0007

    def sgp4(self, jd, fr):
        nan = float("nan")
        return 6, (nan, nan, nan), (nan, nan, nan)

    def sgp4_array(self, jd, fr):
        n = len(jd)
        return np.full(n, 6, dtype=np.uint8), np.full((n, 3), np.nan), np.full((n, 3), np.nan)


class GappySatrec:
    """Wraps a real Satrec and reports failure on every `every`-th grid instant."""

    def __init__(self, inner, every: int = 7):
        self._inner = inner
        self._every = every

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def sgp4_array(self, jd, fr):
        e, r, v = self._inner.sgp4_array(jd, fr)
        e = np.array(e, copy=True)
        r = np.array(r, copy=True)
        e[:: self._every] = 1
        r[:: self._every] = np.nan
        return e, r, v


@pytest.fixture
def iss() -> OrbitalRecord:
    return parse_element_set(ISS_NAME, ISS_L1, ISS_L2, country="ISS")


@pytest.fixture
def decayed() -> OrbitalRecord:
    return OrbitalRecord(name="DECAYED", line1="", line2="", satrec=FailingSatrec())


@pytest.fixture
def active_catalog():
    """The process-wide catalog, restored after the test."""
    catalog = get_catalog()
    saved = (catalog.records, catalog.source, catalog.loaded_at, catalog.last_error)
    yield catalog
    catalog._records, catalog.source, catalog.loaded_at, catalog.last_error = saved
