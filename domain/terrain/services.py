"""Terrain Bounded Context - Domain Services.

Pure domain logic for position projection and terrain lookups.
NO I/O operations - DEM loading is implemented by infrastructure adapters
under `src/infrastructure/terrain/` via domain ports.
"""

from __future__ import annotations

import math

from pyproj import Geod

from domain.terrain.errors import PointOutOfBoundsError
from domain.terrain.value_objects import (
    BoundingBox,
    GeoPoint,
    GroundVelocity,
    TerrainGrid,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
METERS_PER_DEGREE_LAT = 111320.0  # Flat-earth scale, also used for longitude at the equator

# WGS84 ellipsoid for geodesic calculations (same as GPS, EPSG:4326)
_geod = Geod(ellps="WGS84")


# ---------------------------------------------------------------------------
# Helper: Bounds Check
# ---------------------------------------------------------------------------
def is_within_bounds(point: GeoPoint, bounds: BoundingBox) -> bool:
    """Check if point is within bounds (inclusive)."""
    return (
        bounds.min_x <= point.longitude <= bounds.max_x
        and bounds.min_y <= point.latitude <= bounds.max_y
    )


def wrap_longitude(longitude: float) -> float:
    """Wrap a longitude in degrees into [-180, 180]."""
    if -180.0 <= longitude <= 180.0:
        return longitude
    return (longitude + 180.0) % 360.0 - 180.0


# ---------------------------------------------------------------------------
# Geodesic Projector
# ---------------------------------------------------------------------------
def project_position(
    position: GeoPoint | None,
    velocity: GroundVelocity | None,
    horizon_s: float,
) -> GeoPoint | None:
    """Extrapolate a position along a constant ground velocity.

    Flat-earth approximation: one degree of latitude is METERS_PER_DEGREE_LAT
    meters everywhere, one degree of longitude shrinks with cos(latitude).
    Good enough for lookahead horizons of tens of seconds.

    Args:
        position: Current position
        velocity: East/north velocity in m/s
        horizon_s: Lookahead time in seconds

    Returns:
        The projected point, or None when inputs are missing or the
        projection leaves the valid coordinate range (e.g. at a pole).
    """
    if position is None or velocity is None:
        return None
    if not (
        math.isfinite(velocity.east_mps)
        and math.isfinite(velocity.north_mps)
        and math.isfinite(horizon_s)
    ):
        return None

    # cos(90 deg) is ~6e-17 in floating point, so test the pole itself
    if abs(position.latitude) >= 90.0:
        return None
    meters_per_degree_lon = METERS_PER_DEGREE_LAT * math.cos(
        math.radians(position.latitude)
    )

    delta_lat = velocity.north_mps * horizon_s / METERS_PER_DEGREE_LAT
    delta_lon = velocity.east_mps * horizon_s / meters_per_degree_lon

    latitude = position.latitude + delta_lat
    if not (-90.0 <= latitude <= 90.0):
        return None

    return GeoPoint(
        latitude=latitude, longitude=wrap_longitude(position.longitude + delta_lon)
    )


# ---------------------------------------------------------------------------
# Geodesic Distance
# ---------------------------------------------------------------------------
def geodesic_distance(start: GeoPoint, end: GeoPoint) -> float:
    """Calculate geodesic distance between two points in meters.

    Uses WGS84 ellipsoid for millimeter-level precision.
    """
    _, _, distance = _geod.inv(
        start.longitude, start.latitude, end.longitude, end.latitude
    )
    return float(abs(distance))


# ---------------------------------------------------------------------------
# Bilinear Interpolation
# ---------------------------------------------------------------------------
def bilinear_interpolate(grid: TerrainGrid, point: GeoPoint) -> tuple[float, bool]:
    """Interpolate elevation at arbitrary point using 4 nearest pixels.

    Returns (elevation, is_nodata).
    If any of the 4 neighbors is NaN, returns (NaN, True).

    Points exactly on grid boundaries use clamped indices, so bilinear
    degrades to linear on edges and nearest on corners.
    """
    # Row 0 = north edge (max_y), so y is inverted
    px = (point.longitude - grid.bounds.min_x) / grid.resolution[0]
    py = (grid.bounds.max_y - point.latitude) / grid.resolution[1]

    height, width = grid.data.shape

    x0 = int(math.floor(px))
    y0 = int(math.floor(py))
    x1 = x0 + 1
    y1 = y0 + 1

    x0 = max(0, min(x0, width - 1))
    x1 = max(0, min(x1, width - 1))
    y0 = max(0, min(y0, height - 1))
    y1 = max(0, min(y1, height - 1))

    q11 = float(grid.data[y0, x0])  # top-left
    q21 = float(grid.data[y0, x1])  # top-right
    q12 = float(grid.data[y1, x0])  # bottom-left
    q22 = float(grid.data[y1, x1])  # bottom-right

    # No infill across NoData
    if math.isnan(q11) or math.isnan(q21) or math.isnan(q12) or math.isnan(q22):
        return (float("nan"), True)

    fx = px - math.floor(px)
    fy = py - math.floor(py)

    elevation = (
        q11 * (1 - fx) * (1 - fy)
        + q21 * fx * (1 - fy)
        + q12 * (1 - fx) * fy
        + q22 * fx * fy
    )

    return (float(elevation), False)


def elevation_at(grid: TerrainGrid, point: GeoPoint) -> float:
    """Bilinear elevation at ``point``; NaN where a neighbour is NoData.

    Raises:
        PointOutOfBoundsError: If point is outside the grid bounds
    """
    if not is_within_bounds(point, grid.bounds):
        raise PointOutOfBoundsError(point, grid.bounds)
    elevation, _ = bilinear_interpolate(grid, point)
    return elevation
