"""Infrastructure adapters for the terrain bounded context.

Provides a grid-backed TerrainOracle and the GeoTIFF loader that builds its
grid from a DEM file.
"""

from .geotiff_adapter import GeoTiffTerrainAdapter
from .grid_oracle import GridTerrainOracle

__all__ = ["GeoTiffTerrainAdapter", "GridTerrainOracle"]
