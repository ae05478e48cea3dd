"""End to end: telemetry and a DEM through the sequencer to the console outputs."""

import numpy as np
import pytest

from domain.alerting.sequencer import AlertSequencer
from domain.alerting.value_objects import ThreatDecision
from domain.terrain.value_objects import BoundingBox, TerrainGrid
from infrastructure.simulator.console import (
    LoggingAlertPresenter,
    LoggingAudioAnnunciator,
)
from infrastructure.simulator.telemetry import TelemetryVehicleStateSource
from infrastructure.terrain.grid_oracle import GridTerrainOracle
from tests.conftest_utils import FakeClock

PLAIN_M = 500.0
RIDGE_M = 1100.0
RIDGE_LAT = 46.005


@pytest.fixture
def ridge_oracle() -> GridTerrainOracle:
    bounds = BoundingBox(min_x=7.4, max_x=7.6, min_y=45.9, max_y=46.1)
    res = 0.001
    latitudes = bounds.max_y - (np.arange(200) + 0.5) * res
    column = np.where(latitudes >= RIDGE_LAT, RIDGE_M, PLAIN_M)
    data = np.repeat(column[:, np.newaxis], 200, axis=1).astype(np.float32)
    return GridTerrainOracle(TerrainGrid(data=data, bounds=bounds, resolution=(res, res)))


def _snapshot(altitude_m, up_mps, gear_position=1.0):
    return {
        "lla": (46.0, 7.5, altitude_m),
        "velocity": (0.0, 80.0, up_mps),
        "gear_position": gear_position,
        "ground_elevation_ft": PLAIN_M / 0.3048,
        "ground_contact": False,
        "ground_speed": 80.0,
    }


def _sequencer(oracle, snapshot, clock):
    presenter = LoggingAlertPresenter()
    annunciator = LoggingAudioAnnunciator()
    sequencer = AlertSequencer(
        vehicle_source=TelemetryVehicleStateSource(lambda: snapshot),
        terrain_oracle=oracle,
        presenter=presenter,
        annunciator=annunciator,
        clock_ms=clock,
    )
    return sequencer, presenter, annunciator


def test_descent_towards_ridge_pulls_up(ridge_oracle):
    # 1.2 km ahead the ridge stands at 1100 m; 1100 - 4*15 = 1040 m projected
    clock = FakeClock()
    sequencer, presenter, annunciator = _sequencer(
        ridge_oracle, _snapshot(1100.0, -4.0), clock
    )

    decisions = []
    for _ in range(20):
        decisions.append(sequencer.tick())
        clock.advance(250.0)

    assert decisions == [ThreatDecision.WARN] * 20
    assert presenter.frames_shown == 10
    assert annunciator.played == 2  # 0 ms and 4750 ms
    assert sequencer.last_assessment.projected_clearance_m == pytest.approx(-60.0)


def test_level_flight_well_above_ridge_is_clear(ridge_oracle):
    sequencer, presenter, annunciator = _sequencer(
        ridge_oracle, _snapshot(1250.0, 0.0), FakeClock()
    )

    assert sequencer.tick() is ThreatDecision.CLEAR
    assert presenter.frames_shown == 0
    assert annunciator.played == 0


def test_off_map_lookahead_is_clear(ridge_oracle):
    snapshot = _snapshot(900.0, -8.0)
    snapshot["lla"] = (46.099, 7.5, 900.0)
    sequencer, _, annunciator = _sequencer(ridge_oracle, snapshot, FakeClock())

    assert sequencer.tick() is ThreatDecision.CLEAR
    assert annunciator.played == 0
    assert sequencer.last_assessment.rule == "no-clearance"


def test_gear_down_approach_is_suppressed(ridge_oracle):
    # 300 m AGL over the plain, gear down, gentle descent
    sequencer, presenter, _ = _sequencer(
        ridge_oracle, _snapshot(800.0, -4.0, gear_position=0.0), FakeClock()
    )

    assert sequencer.tick() is ThreatDecision.SUPPRESSED
    assert presenter.visible is False


def test_malformed_telemetry_is_clear_without_error_log(ridge_oracle, caplog):
    snapshot = _snapshot(1100.0, -4.0, gear_position="down")
    sequencer, presenter, _ = _sequencer(ridge_oracle, snapshot, FakeClock())

    with caplog.at_level("DEBUG"):
        assert sequencer.tick() is ThreatDecision.CLEAR

    assert sequencer.last_assessment.rule == "missing-input"
    assert presenter.visible is False
    assert not [r for r in caplog.records if r.levelname == "ERROR"]
