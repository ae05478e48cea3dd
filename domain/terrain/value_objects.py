"""Terrain Bounded Context - Value Objects.

Immutable data structures representing geographic and vehicle-state concepts.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator


class BoundingBox(BaseModel):
    """Geographic extent in EPSG:4326 (Value Object).

    Invariants are enforced at construction time - invalid BoundingBox
    cannot be instantiated.
    """

    min_x: float  # Western boundary (longitude)
    min_y: float  # Southern boundary (latitude)
    max_x: float  # Eastern boundary (longitude)
    max_y: float  # Northern boundary (latitude)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BoundingBox":
        if not (-180 <= self.min_x <= 180):
            raise ValueError(f"min_x longitude out of range: {self.min_x}")
        if not (-180 <= self.max_x <= 180):
            raise ValueError(f"max_x longitude out of range: {self.max_x}")
        if not (-90 <= self.min_y <= 90):
            raise ValueError(f"min_y latitude out of range: {self.min_y}")
        if not (-90 <= self.max_y <= 90):
            raise ValueError(f"max_y latitude out of range: {self.max_y}")
        if not (self.min_x < self.max_x):
            raise ValueError(
                f"Invalid x ordering: min_x={self.min_x} >= max_x={self.max_x}"
            )
        if not (self.min_y < self.max_y):
            raise ValueError(
                f"Invalid y ordering: min_y={self.min_y} >= max_y={self.max_y}"
            )
        return self


class TerrainGrid(BaseModel):
    """Immutable elevation grid with geographic metadata (Value Object).

    Backs the offline terrain oracle. NaN marks NoData cells. The data array
    is made read-only at construction time.
    """

    data: NDArray[np.float32]  # 2D float32 array (height x width), read-only
    bounds: BoundingBox  # Geographic extent in EPSG:4326
    resolution: tuple[float, float]  # (x_res, y_res) absolute values in degrees

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "TerrainGrid":
        if self.data.ndim != 2:
            raise ValueError(f"Data must be 2D, got {self.data.ndim}D")
        if self.data.shape[0] == 0 or self.data.shape[1] == 0:
            raise ValueError(f"Data cannot be empty: {self.data.shape}")
        if self.data.dtype != np.float32:
            raise ValueError(f"Data must be float32, got {self.data.dtype}")
        if self.resolution[0] <= 0 or self.resolution[1] <= 0:
            raise ValueError(f"Resolution must be positive: {self.resolution}")
        if np.isnan(self.data).all():
            raise ValueError("Grid contains 100% NoData")

        # Owned, contiguous, frozen copy; never flip flags on the caller's array.
        immutable = np.array(self.data, dtype=np.float32, copy=True, order="C")
        immutable.flags.writeable = False
        object.__setattr__(self, "data", immutable)

        return self


class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Used both for the vehicle's current position and for the projected
    lookahead point.

    Invariants:
        latitude in [-90, 90]
        longitude in [-180, 180]
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


class GroundVelocity(BaseModel):
    """Horizontal velocity in a local east/north frame, meters per second."""

    east_mps: float
    north_mps: float

    model_config = ConfigDict(frozen=True)


class VehicleState(BaseModel):
    """Snapshot of the host vehicle, produced once per tick (Value Object).

    Velocity follows the NED convention: ``velocity_down_mps`` is positive
    when descending. ``vertical_speed_mps`` flips it so that positive means
    climbing, which is what the threat rules reason about.

    ``ground_elevation_m`` is the terrain directly below the vehicle as seen
    by the simulation. When the simulation does not report it, 0 m is used.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    altitude_msl_m: float
    velocity_east_mps: float
    velocity_north_mps: float
    velocity_down_mps: float
    ground_speed_mps: float = Field(ge=0)
    gear_extended: bool = False
    on_ground: bool = False
    ground_elevation_m: float = 0.0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_finite(self) -> "VehicleState":
        for name in (
            "altitude_msl_m",
            "velocity_east_mps",
            "velocity_north_mps",
            "velocity_down_mps",
            "ground_speed_mps",
            "ground_elevation_m",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        return self

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    @property
    def ground_velocity(self) -> GroundVelocity:
        return GroundVelocity(
            east_mps=self.velocity_east_mps, north_mps=self.velocity_north_mps
        )

    @property
    def vertical_speed_mps(self) -> float:
        """Vertical speed, positive when climbing."""
        return -self.velocity_down_mps

    @property
    def altitude_agl_m(self) -> float:
        """Altitude above the terrain directly below."""
        return self.altitude_msl_m - self.ground_elevation_m


class TerrainSample(BaseModel):
    """Result of one terrain elevation query (Value Object).

    Invariants:
        If is_nodata == True, then elevation_m is NaN
        If is_nodata == False, then elevation_m is finite

    Uses math.isnan instead of np.isnan to keep this VO numpy-free.
    """

    elevation_m: float = float("nan")
    is_nodata: bool = True

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_nodata_consistency(self) -> "TerrainSample":
        if self.is_nodata and not math.isnan(self.elevation_m):
            raise ValueError("is_nodata=True requires elevation_m=NaN")
        if not self.is_nodata and not math.isfinite(self.elevation_m):
            raise ValueError("is_nodata=False requires finite elevation_m")
        return self

    @classmethod
    def unavailable(cls) -> "TerrainSample":
        """The single "no terrain data" outcome."""
        return cls(elevation_m=float("nan"), is_nodata=True)

    @classmethod
    def at(cls, elevation_m: float) -> "TerrainSample":
        return cls(elevation_m=float(elevation_m), is_nodata=False)

    @property
    def is_available(self) -> bool:
        return not self.is_nodata
