"""Root pytest configuration for all tests.

Provides fresh fakes for every domain port so each test builds the
AlertSequencer it needs without shared state.
"""

from __future__ import annotations

import pytest

from tests.conftest_utils import (
    FakeClock,
    FakeTerrainOracle,
    FakeVehicleSource,
    RecordingAnnunciator,
    RecordingPresenter,
)


@pytest.fixture
def vehicle_source() -> FakeVehicleSource:
    return FakeVehicleSource()


@pytest.fixture
def terrain_oracle() -> FakeTerrainOracle:
    return FakeTerrainOracle()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def annunciator() -> RecordingAnnunciator:
    return RecordingAnnunciator()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
