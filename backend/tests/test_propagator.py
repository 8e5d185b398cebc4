"""Propagation adapter and sidereal time."""

import math
from datetime import datetime, timedelta, timezone

import pytest
from sgp4.propagation import gstime

from satcore.errors import PropagationUnavailable
from satcore.propagator import earth_fixed_at, propagate, propagate_or_raise, sidereal_angle
from satcore.timeutil import gmst_degrees, julian_date, time_grid

from conftest import T0


def test_gmst_matches_sgp4_internal():
    for jd in (2451545.0, 2458827.5, 2460390.25, 2462000.123):
        assert gmst_degrees(jd) == pytest.approx(math.degrees(gstime(jd)), abs=1e-6)


def test_gmst_at_j2000_noon():
    assert gmst_degrees(2451545.0) == pytest.approx(280.46061837, abs=1e-6)


def test_sidereal_angle_advances_about_a_degree_per_four_minutes():
    a = sidereal_angle(T0)
    b = sidereal_angle(T0 + timedelta(minutes=4))
    assert (b - a) % 360.0 == pytest.approx(1.0027, abs=0.01)


def test_julian_date_naive_is_utc():
    naive = datetime(2019, 12, 10)
    assert julian_date(naive) == julian_date(naive.replace(tzinfo=timezone.utc))


def test_time_grid_inclusive():
    times, jd, fr = time_grid(T0, 10, 60)
    assert len(times) == 11 == len(jd) == len(fr)
    assert times[-1] - times[0] == timedelta(minutes=10)


def test_propagate_iss(iss):
    state = propagate(iss, T0)
    assert state is not None
    assert 6600 < state.radius_km < 6900
    assert 7.4 < state.speed_km_s < 7.9
    assert state.when == T0


def test_propagate_is_deterministic(iss):
    assert propagate(iss, T0) == propagate(iss, T0)


def test_unavailable_returns_none(decayed):
    assert propagate(decayed, T0) is None
    assert earth_fixed_at(decayed, T0) is None


def test_propagate_or_raise(decayed):
    with pytest.raises(PropagationUnavailable) as info:
        propagate_or_raise(decayed, T0)
    assert info.value.code == 6


def test_earth_fixed_keeps_radius(iss):
    state = propagate(iss, T0)
    position = earth_fixed_at(iss, T0)
    assert not position.degraded
    assert position.radius_km == pytest.approx(state.radius_km, rel=1e-12)
    assert position.z == pytest.approx(state.position[2])
