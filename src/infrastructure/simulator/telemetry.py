"""VehicleStateSource adapter for raw simulator telemetry.

The host simulation exposes a live, mutable aircraft object. This adapter
reads a plain snapshot of it and maps it into a validated VehicleState.

Snapshot keys:
    lla                  (latitude deg, longitude deg, altitude MSL m)
    velocity             (east m/s, north m/s, up m/s)
    gear_position        0.0 = fully extended ... 1.0 = fully retracted
    ground_elevation_ft  terrain directly below, feet MSL
    ground_contact       bool
    ground_speed         m/s
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import ValidationError

from domain.terrain.errors import MissingInputError
from domain.terrain.value_objects import VehicleState

logger = logging.getLogger(__name__)

FEET_TO_METERS = 0.3048
GEAR_EXTENDED_BELOW = 0.5  # gear_position under this counts as extended

TelemetrySnapshot = Mapping[str, Any]


def _triple(snapshot: TelemetrySnapshot, key: str) -> tuple[float, float, float]:
    value = snapshot.get(key)
    if value is None:
        raise MissingInputError(f"telemetry has no {key}")
    try:
        a, b, c = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise MissingInputError(f"telemetry {key} is not a numeric triple") from e
    return a, b, c


def _number(snapshot: TelemetrySnapshot, key: str) -> float | None:
    value = snapshot.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MissingInputError(f"telemetry {key} is not numeric") from e


def _ground_elevation_m(snapshot: TelemetrySnapshot) -> float:
    feet = _number(snapshot, "ground_elevation_ft")
    if feet is None:
        return 0.0
    meters = feet * FEET_TO_METERS
    # Unloaded ground data reads as NaN; fall back to sea level
    return meters if math.isfinite(meters) else 0.0


def _gear_extended(snapshot: TelemetrySnapshot) -> bool:
    position = _number(snapshot, "gear_position")
    if position is None:
        return False
    return position < GEAR_EXTENDED_BELOW


def vehicle_state_from_telemetry(snapshot: TelemetrySnapshot | None) -> VehicleState:
    """Map one telemetry snapshot to a VehicleState.

    Raises:
        MissingInputError: If position or velocity is absent, or any field
            is malformed.
    """
    if snapshot is None:
        raise MissingInputError("no telemetry snapshot")

    latitude, longitude, altitude_msl_m = _triple(snapshot, "lla")
    east, north, up = _triple(snapshot, "velocity")

    ground_speed_mps = _number(snapshot, "ground_speed")
    if ground_speed_mps is None:
        ground_speed_mps = math.hypot(east, north)

    try:
        return VehicleState(
            latitude=latitude,
            longitude=longitude,
            altitude_msl_m=altitude_msl_m,
            velocity_east_mps=east,
            velocity_north_mps=north,
            velocity_down_mps=-up,
            ground_speed_mps=ground_speed_mps,
            gear_extended=_gear_extended(snapshot),
            on_ground=bool(snapshot.get("ground_contact", False)),
            ground_elevation_m=_ground_elevation_m(snapshot),
        )
    except ValidationError as e:
        raise MissingInputError(f"telemetry out of range: {e.error_count()} error(s)") from e


class TelemetryVehicleStateSource:
    """Reads a snapshot per call; returns None when it is incomplete."""

    def __init__(self, read_snapshot: Callable[[], TelemetrySnapshot | None]) -> None:
        self._read_snapshot = read_snapshot

    def get_vehicle_state(self) -> VehicleState | None:
        try:
            return vehicle_state_from_telemetry(self._read_snapshot())
        except MissingInputError as e:
            logger.debug("Skipping incomplete telemetry: %s", e)
            return None
