"""Terrain Oracle Adapter.

Wraps the external elevation service behind a single normalized outcome:
either a finite elevation or TerrainSample.unavailable(). "No data",
NaN, infinities and oracle failures are indistinguishable to callers.
"""

from __future__ import annotations

import logging
import math

from domain.terrain.repositories import TerrainOracle
from domain.terrain.value_objects import GeoPoint, TerrainSample

logger = logging.getLogger(__name__)


class TerrainOracleAdapter:
    """Normalizes TerrainOracle answers into TerrainSample values.

    Every call issues a fresh query: no retries, no caching.
    """

    def __init__(self, oracle: TerrainOracle) -> None:
        self._oracle = oracle

    def sample_elevation(self, point: GeoPoint) -> TerrainSample:
        try:
            raw = self._oracle.get_ground_elevation(point)
        except Exception:
            logger.warning(
                "Terrain oracle failed at (%.6f, %.6f)",
                point.latitude,
                point.longitude,
                exc_info=True,
            )
            return TerrainSample.unavailable()

        if raw is None:
            return TerrainSample.unavailable()

        try:
            elevation = float(raw)
        except (TypeError, ValueError):
            return TerrainSample.unavailable()

        if not math.isfinite(elevation):
            return TerrainSample.unavailable()

        return TerrainSample.at(elevation)
