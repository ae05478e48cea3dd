"""Shared test doubles for the domain ports.

Fakes instead of mocks: each one records what the core asked of it so tests
can assert on the exact sequence of signals.

These utilities are used by:
- tests/conftest.py (fixtures)
- tests/alerting/*
- tests/infrastructure/*
"""

from __future__ import annotations

from domain.alerting.errors import AudioPlaybackRejectedError
from domain.terrain.value_objects import GeoPoint, VehicleState


def make_vehicle(
    *,
    agl: float = 400.0,
    vz: float = -6.0,
    gear_extended: bool = False,
    on_ground: bool = False,
    ground_speed: float = 80.0,
    ground_elevation: float = 0.0,
    latitude: float = 46.0,
    longitude: float = 7.5,
    north: float = 80.0,
    east: float = 0.0,
) -> VehicleState:
    """Build a VehicleState from AGL and climb-positive vertical speed."""
    return VehicleState(
        latitude=latitude,
        longitude=longitude,
        altitude_msl_m=ground_elevation + agl,
        velocity_east_mps=east,
        velocity_north_mps=north,
        velocity_down_mps=-vz,
        ground_speed_mps=ground_speed,
        gear_extended=gear_extended,
        on_ground=on_ground,
        ground_elevation_m=ground_elevation,
    )


def ground_for_clearance(vehicle: VehicleState, clearance: float, horizon_s: float = 15.0) -> float:
    """Terrain elevation at the lookahead point that yields ``clearance``."""
    projected_alt = vehicle.altitude_msl_m + vehicle.vertical_speed_mps * horizon_s
    return projected_alt - clearance


class FakeVehicleSource:
    def __init__(self, vehicle: VehicleState | None = None) -> None:
        self.vehicle = vehicle
        self.calls = 0
        self.error: Exception | None = None

    def get_vehicle_state(self) -> VehicleState | None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.vehicle


class FakeTerrainOracle:
    def __init__(self, elevation: float | None = 0.0) -> None:
        self.elevation = elevation
        self.queries: list[GeoPoint] = []
        self.error: Exception | None = None

    def get_ground_elevation(self, point: GeoPoint) -> float | None:
        self.queries.append(point)
        if self.error is not None:
            raise self.error
        return self.elevation


class RecordingPresenter:
    def __init__(self) -> None:
        self.calls: list[bool] = []

    @property
    def last(self) -> bool | None:
        return self.calls[-1] if self.calls else None

    def set_visual_alert(self, on: bool) -> None:
        self.calls.append(on)


class RecordingAnnunciator:
    def __init__(self, reject: bool = False) -> None:
        self.requests = 0
        self.reject = reject

    def request_audio_alert(self) -> None:
        self.requests += 1
        if self.reject:
            raise AudioPlaybackRejectedError("user interaction required")


class FakeClock:
    """Epoch-millisecond clock advanced by hand."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms

