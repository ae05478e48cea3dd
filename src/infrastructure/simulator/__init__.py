"""Simulator-side adapters: telemetry source and logging output ports."""

from .console import LoggingAlertPresenter, LoggingAudioAnnunciator
from .telemetry import TelemetryVehicleStateSource, vehicle_state_from_telemetry

__all__ = [
    "LoggingAlertPresenter",
    "LoggingAudioAnnunciator",
    "TelemetryVehicleStateSource",
    "vehicle_state_from_telemetry",
]
