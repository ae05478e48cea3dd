#!/usr/bin/env python3
"""Replay a controlled-flight-into-terrain approach against the alert core.

Flies a simulated aircraft north over flat ground towards a synthetic ridge
while the AlertSequencer ticks on the asyncio loop. The "PULL UP" visual and
aural alerts are logged by the console collaborators.

Usage:
    python scripts/replay_approach.py [--duration 20] [--time-scale 1.0]
    python scripts/replay_approach.py --dem alps.tif --start 46.0 7.5 --altitude 2500

Requirements:
    pip install -e .
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import time

import numpy as np

from domain.alerting.sequencer import AlertSequencer
from domain.terrain.repositories import TerrainRepository
from domain.terrain.value_objects import BoundingBox, GeoPoint, TerrainGrid
from infrastructure.simulator.console import (
    LoggingAlertPresenter,
    LoggingAudioAnnunciator,
)
from infrastructure.simulator.telemetry import (
    FEET_TO_METERS,
    TelemetryVehicleStateSource,
)
from infrastructure.terrain.geotiff_adapter import GeoTiffTerrainAdapter
from infrastructure.terrain.grid_oracle import GridTerrainOracle

logger = logging.getLogger("replay_approach")

# Synthetic terrain: flat plain with an east-west ridge to the north
GRID_BOUNDS = BoundingBox(min_x=7.0, max_x=8.0, min_y=45.9, max_y=46.3)
GRID_RESOLUTION = 0.001
PLAIN_ELEVATION_M = 500.0
RIDGE_ELEVATION_M = 1100.0
RIDGE_START_LAT = 46.02

START_LAT, START_LON = 46.0, 7.5
START_ALTITUDE_M = 1100.0
NORTH_SPEED_MPS = 80.0
CLIMB_RATE_MPS = -4.0


def build_ridge_grid() -> TerrainGrid:
    height = round((GRID_BOUNDS.max_y - GRID_BOUNDS.min_y) / GRID_RESOLUTION)
    width = round((GRID_BOUNDS.max_x - GRID_BOUNDS.min_x) / GRID_RESOLUTION)
    # Row 0 is the northern edge
    latitudes = GRID_BOUNDS.max_y - (np.arange(height) + 0.5) * GRID_RESOLUTION
    column = np.where(latitudes >= RIDGE_START_LAT, RIDGE_ELEVATION_M, PLAIN_ELEVATION_M)
    data = np.repeat(column[:, np.newaxis], width, axis=1).astype(np.float32)
    return TerrainGrid(
        data=data, bounds=GRID_BOUNDS, resolution=(GRID_RESOLUTION, GRID_RESOLUTION)
    )


class ApproachSimulator:
    """Straight-line flight, position derived from elapsed wall time."""

    def __init__(
        self,
        oracle: GridTerrainOracle,
        start: GeoPoint,
        altitude_m: float,
        time_scale: float = 1.0,
    ) -> None:
        self._oracle = oracle
        self._start = start
        self._altitude_m = altitude_m
        self._time_scale = time_scale
        self._started_at = time.monotonic()

    def snapshot(self) -> dict[str, object]:
        elapsed_s = (time.monotonic() - self._started_at) * self._time_scale
        latitude = self._start.latitude + NORTH_SPEED_MPS * elapsed_s / 111320.0
        longitude = self._start.longitude
        altitude = self._altitude_m + CLIMB_RATE_MPS * elapsed_s
        ground_m = self._oracle.get_ground_elevation(
            GeoPoint(latitude=latitude, longitude=longitude)
        )
        return {
            "lla": (latitude, longitude, altitude),
            "velocity": (0.0, NORTH_SPEED_MPS, CLIMB_RATE_MPS),
            "gear_position": 1.0,
            "ground_elevation_ft": (
                ground_m / FEET_TO_METERS if ground_m is not None else None
            ),
            "ground_contact": False,
            "ground_speed": NORTH_SPEED_MPS,
        }


def load_grid(dem_path: str | None, repository: TerrainRepository) -> TerrainGrid:
    if dem_path is None:
        return build_ridge_grid()
    grid = repository.load_dem(dem_path)
    logger.info("Loaded DEM %s covering %s", dem_path, grid.bounds)
    return grid


async def run(
    grid: TerrainGrid,
    start: GeoPoint,
    altitude_m: float,
    duration_s: float,
    time_scale: float,
) -> int:
    oracle = GridTerrainOracle(grid)
    sim = ApproachSimulator(oracle, start, altitude_m, time_scale=time_scale)
    presenter = LoggingAlertPresenter()
    annunciator = LoggingAudioAnnunciator()

    sequencer = AlertSequencer(
        vehicle_source=TelemetryVehicleStateSource(sim.snapshot),
        terrain_oracle=oracle,
        presenter=presenter,
        annunciator=annunciator,
    )
    task = sequencer.start()
    try:
        await asyncio.sleep(duration_s)
    finally:
        sequencer.stop()
        await task.wait_cancelled()

    logger.info(
        "Replay finished: %d ticks, %d alert frames, %d aural alerts",
        task.tick_count,
        presenter.frames_shown,
        annunciator.played,
    )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--duration", type=float, default=20.0, help="seconds to run")
    parser.add_argument(
        "--time-scale", type=float, default=1.0, help="simulated seconds per second"
    )
    parser.add_argument("--dem", help="EPSG:4326 GeoTIFF to fly over instead of the ridge")
    parser.add_argument(
        "--start",
        nargs=2,
        type=float,
        metavar=("LAT", "LON"),
        default=(START_LAT, START_LON),
    )
    parser.add_argument("--altitude", type=float, default=START_ALTITUDE_M, help="m MSL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    grid = load_grid(args.dem, GeoTiffTerrainAdapter())
    start = GeoPoint(latitude=args.start[0], longitude=args.start[1])
    return asyncio.run(
        run(grid, start, args.altitude, args.duration, args.time_scale)
    )


if __name__ == "__main__":
    raise SystemExit(main())
