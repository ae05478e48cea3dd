"""Domain Ports for vehicle and terrain access.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .value_objects import GeoPoint, TerrainGrid, VehicleState


class VehicleStateSource(Protocol):
    """Port for reading the host vehicle's live state.

    Implementations return None when the simulation cannot provide a
    complete snapshot (e.g. before the vehicle is spawned).
    """

    def get_vehicle_state(self) -> VehicleState | None:
        ...


class TerrainOracle(Protocol):
    """Port for the external terrain elevation service.

    Returns elevation MSL in meters, or None/NaN when no data is loaded for
    the point. Must answer without blocking; a slow backend reports no data.
    """

    def get_ground_elevation(self, point: GeoPoint) -> float | None:
        ...


class TerrainRepository(Protocol):
    """Port for obtaining terrain grids from external sources.

    Implementations live in infrastructure (e.g., GeoTIFF adapter).
    """

    def load_dem(self, file_path: Path | str) -> TerrainGrid:
        """Load a DEM and return a TerrainGrid in EPSG:4326."""
        ...
