"""TerrainOracle backed by an in-memory TerrainGrid.

Answers elevation queries by bilinear interpolation. Points outside the grid
report no data (None); NoData cells report NaN. The domain adapter treats
both as unavailable.
"""

from __future__ import annotations

import logging

from domain.terrain.errors import PointOutOfBoundsError
from domain.terrain.services import elevation_at
from domain.terrain.value_objects import GeoPoint, TerrainGrid

logger = logging.getLogger(__name__)


class GridTerrainOracle:
    """Synchronous, non-blocking elevation lookups on a loaded grid."""

    def __init__(self, grid: TerrainGrid) -> None:
        self._grid = grid

    @property
    def grid(self) -> TerrainGrid:
        return self._grid

    def get_ground_elevation(self, point: GeoPoint) -> float | None:
        try:
            return elevation_at(self._grid, point)
        except PointOutOfBoundsError as e:
            logger.debug("No terrain coverage: %s", e)
            return None
