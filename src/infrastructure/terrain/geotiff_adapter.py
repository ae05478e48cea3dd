"""GeoTIFF adapter for TerrainRepository.

Loads a single-band EPSG:4326 DEM with rasterio and returns a TerrainGrid
suitable for GridTerrainOracle. Rasters in any other CRS are rejected: the
lookahead projection works in WGS84 degrees and this adapter does not warp.

Lifecycle:
1) Open dataset with context manager (rasterio.open) inside rasterio.Env
2) Validate band count, CRS and geotransform
3) Read band 1 as float32, converting NoData to np.nan
4) Build BoundingBox and positive resolution tuple
5) Exit contexts to release GDAL handles
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import numpy as np
import rasterio
from affine import Affine
from rasterio.crs import CRS
from rasterio.errors import RasterioError
from rasterio.transform import array_bounds

from domain.terrain.errors import (
    AllNoDataError,
    InvalidGeotransformError,
    InvalidRasterError,
    MissingCRSError,
)
from domain.terrain.value_objects import BoundingBox, TerrainGrid

logger = logging.getLogger(__name__)

_TARGET_CRS = CRS.from_epsg(4326)


def _is_wgs84(crs: Any) -> bool:
    """Check if CRS is WGS84 (EPSG:4326 or equivalent).

    Tries rasterio CRS equality first, then falls back to the string form
    for datasets whose CRS object is not a rasterio CRS.
    """
    if crs is None:
        return False
    try:
        if crs == _TARGET_CRS:
            return True
    except (TypeError, AttributeError):
        pass
    return str(crs).upper() in ("EPSG:4326", "OGC:CRS84")


def _validate_transform(transform: Any) -> Affine:
    if not isinstance(transform, Affine):
        raise InvalidGeotransformError("Missing affine transform")
    if any(not math.isfinite(v) for v in transform[:6]):
        raise InvalidGeotransformError("Invalid (NaN/Inf) transform values")
    if transform.a == 0 or transform.e == 0:
        raise InvalidGeotransformError("Invalid transform scale (zero)")
    return transform


class GeoTiffTerrainAdapter:
    """Infrastructure adapter for loading DEMs from GeoTIFF files."""

    def load_dem(self, file_path: Path | str) -> TerrainGrid:
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(str(path))
        if path.suffix.lower() not in (".tif", ".tiff"):
            raise InvalidRasterError(f"Unsupported file extension: {path.suffix}")
        if path.stat().st_size == 0:
            raise InvalidRasterError("Empty file")

        try:
            with rasterio.Env():
                with rasterio.open(path) as src:
                    if src.count != 1:
                        raise InvalidRasterError(f"Expected 1 band, got {src.count}")
                    if src.crs is None:
                        raise MissingCRSError("Raster has no CRS defined")
                    if not _is_wgs84(src.crs):
                        raise InvalidRasterError(
                            f"Expected EPSG:4326 raster, got {src.crs}"
                        )

                    transform = _validate_transform(src.transform)
                    data = src.read(1, masked=True, out_dtype="float32")

                    if hasattr(data, "mask") and np.any(data.mask):
                        data = np.where(data.mask, np.float32(np.nan), data.data)
                    elif src.nodata is not None:
                        # GeoTIFF nodata is stored exactly, so compare exactly
                        data = np.where(data == src.nodata, np.float32(np.nan), data)
                    data = np.asarray(data, dtype=np.float32)

                    if np.isnan(data).all():
                        raise AllNoDataError(
                            "Raster contains 100% NoData pixels - unusable"
                        )

                    height, width = data.shape
                    minx, miny, maxx, maxy = array_bounds(height, width, transform)
                    try:
                        bounds = BoundingBox(
                            min_x=minx, min_y=miny, max_x=maxx, max_y=maxy
                        )
                    except ValueError as e:
                        raise InvalidRasterError(f"Invalid raster bounds: {e}") from e

                    nodata_pct = float(np.isnan(data).mean() * 100.0)
                    if nodata_pct > 80.0:
                        logger.warning(
                            "DEM %s: %.1f%% NoData pixels detected",
                            path.name,
                            nodata_pct,
                        )
                    logger.debug("DEM %s: Loaded %dx%d grid", path.name, width, height)

                    return TerrainGrid(
                        data=data,
                        bounds=bounds,
                        resolution=(abs(transform.a), abs(transform.e)),
                    )
        except RasterioError as e:
            raise InvalidRasterError(f"Corrupted or invalid raster: {e}") from e
