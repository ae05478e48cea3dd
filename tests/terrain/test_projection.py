"""Tests for the lookahead projection and geodesic helpers.

The projector is a flat-earth approximation: one degree of latitude is
111320 m, one degree of longitude shrinks with cos(latitude).
"""

from __future__ import annotations

import math

import pytest
from pyproj import Geod

from domain.terrain.value_objects import GeoPoint, GroundVelocity


# ===========================================================================
# Equator
# ===========================================================================
def test_project_due_north_at_equator():
    """Due north at 0 deg: latitude changes by V*T/111320, longitude not at all."""
    from domain.terrain.services import METERS_PER_DEGREE_LAT, project_position

    start = GeoPoint(latitude=0.0, longitude=10.0)
    velocity = GroundVelocity(east_mps=0.0, north_mps=100.0)

    projected = project_position(start, velocity, 15.0)

    assert projected is not None
    assert projected.latitude == pytest.approx(100.0 * 15.0 / METERS_PER_DEGREE_LAT)
    assert projected.longitude == 10.0


@pytest.mark.parametrize("speed,horizon", [(50.0, 15.0), (120.0, 30.0), (250.0, 5.0)])
def test_project_due_north_scales_linearly(speed, horizon):
    """Latitude offset is linear in speed and horizon."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=0.0, longitude=0.0)
    projected = project_position(
        start, GroundVelocity(east_mps=0.0, north_mps=speed), horizon
    )

    assert projected is not None
    assert projected.latitude == pytest.approx(speed * horizon / 111320.0)
    assert projected.longitude == 0.0


def test_project_due_east_at_equator():
    """At the equator a degree of longitude is the same length as latitude."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=0.0, longitude=0.0)
    projected = project_position(
        start, GroundVelocity(east_mps=111.32, north_mps=0.0), 10.0
    )

    assert projected is not None
    assert projected.latitude == 0.0
    assert projected.longitude == pytest.approx(0.01)


# ===========================================================================
# Latitude-dependent longitude scale
# ===========================================================================
def test_project_due_east_at_60_degrees_doubles_longitude_offset():
    """cos(60 deg) = 0.5, so the same eastward distance spans twice the degrees."""
    from domain.terrain.services import project_position

    velocity = GroundVelocity(east_mps=111.32, north_mps=0.0)
    at_equator = project_position(GeoPoint(latitude=0.0, longitude=0.0), velocity, 10.0)
    at_60 = project_position(GeoPoint(latitude=60.0, longitude=0.0), velocity, 10.0)

    assert at_equator is not None and at_60 is not None
    assert at_60.longitude == pytest.approx(2 * at_equator.longitude)
    assert at_60.latitude == 60.0


@pytest.mark.parametrize("latitude", [-60.0, -30.0, 0.0, 30.0, 45.0, 60.0])
def test_flat_projection_close_to_true_geodesic(latitude):
    """Over a 15 s horizon the flat-earth point stays within a few meters of WGS84."""
    from domain.terrain.services import geodesic_distance, project_position

    east, north, horizon = 60.0, 60.0, 15.0
    start = GeoPoint(latitude=latitude, longitude=20.0)

    flat = project_position(start, GroundVelocity(east_mps=east, north_mps=north), horizon)

    azimuth = math.degrees(math.atan2(east, north))
    distance = math.hypot(east, north) * horizon
    lon, lat, _ = Geod(ellps="WGS84").fwd(start.longitude, start.latitude, azimuth, distance)
    truth = GeoPoint(latitude=lat, longitude=lon)

    assert flat is not None
    assert geodesic_distance(flat, truth) < 10.0


def test_projection_is_deterministic():
    """Same inputs, same point."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=47.3, longitude=8.5)
    velocity = GroundVelocity(east_mps=-35.0, north_mps=72.0)

    assert project_position(start, velocity, 15.0) == project_position(
        start, velocity, 15.0
    )


# ===========================================================================
# Failure modes
# ===========================================================================
def test_project_missing_position_returns_none():
    from domain.terrain.services import project_position

    assert (
        project_position(None, GroundVelocity(east_mps=1.0, north_mps=1.0), 15.0)
        is None
    )


def test_project_missing_velocity_returns_none():
    from domain.terrain.services import project_position

    assert project_position(GeoPoint(latitude=0.0, longitude=0.0), None, 15.0) is None


def test_project_non_finite_velocity_returns_none():
    from domain.terrain.services import project_position

    velocity = GroundVelocity(east_mps=float("nan"), north_mps=10.0)

    assert project_position(GeoPoint(latitude=0.0, longitude=0.0), velocity, 15.0) is None


def test_project_past_the_pole_returns_none():
    """Flying north off the top of the map cannot be projected."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=89.999, longitude=0.0)
    velocity = GroundVelocity(east_mps=0.0, north_mps=250.0)

    assert project_position(start, velocity, 15.0) is None


@pytest.mark.parametrize("latitude,north", [(90.0, -1.0), (-90.0, 1.0)])
def test_project_from_exact_pole_returns_none(latitude, north):
    """Longitude is undefined at a pole, even heading back towards the equator."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=latitude, longitude=0.0)
    velocity = GroundVelocity(east_mps=100.0, north_mps=north)

    assert project_position(start, velocity, 15.0) is None


def test_project_across_antimeridian_wraps_longitude():
    """Crossing 180 deg east lands just west of -180."""
    from domain.terrain.services import project_position

    start = GeoPoint(latitude=0.0, longitude=179.99)
    projected = project_position(
        start, GroundVelocity(east_mps=100.0, north_mps=0.0), 15.0
    )

    assert projected is not None
    assert -180.0 <= projected.longitude < -179.0
    assert projected.longitude == pytest.approx(179.99 + 1500.0 / 111320.0 - 360.0)


# ===========================================================================
# Helpers
# ===========================================================================
@pytest.mark.parametrize(
    "longitude,expected",
    [(0.0, 0.0), (180.0, 180.0), (-180.0, -180.0), (190.0, -170.0), (-190.0, 170.0)],
)
def test_wrap_longitude(longitude, expected):
    from domain.terrain.services import wrap_longitude

    assert wrap_longitude(longitude) == pytest.approx(expected)


def test_geodesic_distance_one_degree_latitude_at_equator():
    """~110.57 km per degree of latitude at the equator on WGS84."""
    from domain.terrain.services import geodesic_distance

    d = geodesic_distance(
        GeoPoint(latitude=0.0, longitude=0.0), GeoPoint(latitude=1.0, longitude=0.0)
    )

    assert d == pytest.approx(110_574.0, abs=5.0)
