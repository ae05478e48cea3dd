"""Alert Sequencer.

Polls the vehicle on a fixed cadence, runs projection, terrain lookup and
threat evaluation, and drives two outputs:

- a blinking visual flag, toggled every tick while the decision is WARN
- an audio request, issued at most once per cooldown while WARN persists

Two effective states: Alerting (WARN) and Quiet (anything else). Entering
Quiet forces the visual flag and blink off and never touches the audio timer.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from domain.alerting.errors import AudioPlaybackRejectedError
from domain.alerting.evaluator import assess, lookahead_distance_m
from domain.alerting.ports import AlertPresenter, AudioAnnunciator
from domain.alerting.scheduling import PeriodicTask
from domain.alerting.thresholds import DEFAULT_THRESHOLDS, AlertThresholds
from domain.alerting.value_objects import (
    AlertOutputState,
    ThreatAssessment,
    ThreatDecision,
)
from domain.terrain.errors import MissingInputError
from domain.terrain.oracle import TerrainOracleAdapter
from domain.terrain.repositories import TerrainOracle, VehicleStateSource
from domain.terrain.value_objects import VehicleState

logger = logging.getLogger(__name__)

TASK_NAME = "terrain-alert-sequencer"


def epoch_ms() -> float:
    return time.time() * 1000.0


class AlertSequencer:
    """Owns the alert output state and the periodic evaluation task.

    All collaborators are injected so tests can drive ``tick()`` directly
    with fakes and a fake clock.
    """

    def __init__(
        self,
        vehicle_source: VehicleStateSource,
        terrain_oracle: TerrainOracle,
        presenter: AlertPresenter,
        annunciator: AudioAnnunciator,
        thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
        state: AlertOutputState | None = None,
        clock_ms: Callable[[], float] = epoch_ms,
    ) -> None:
        self._vehicle_source = vehicle_source
        self._terrain = TerrainOracleAdapter(terrain_oracle)
        self._presenter = presenter
        self._annunciator = annunciator
        self._thresholds = thresholds
        self._state = state if state is not None else AlertOutputState()
        self._clock_ms = clock_ms

        self._task: PeriodicTask | None = None
        self._alerting = False
        self._last_assessment: ThreatAssessment | None = None

    # -------------------------
    # Properties
    # -------------------------

    @property
    def state(self) -> AlertOutputState:
        return self._state

    @property
    def thresholds(self) -> AlertThresholds:
        return self._thresholds

    @property
    def alerting(self) -> bool:
        return self._alerting

    @property
    def last_assessment(self) -> ThreatAssessment | None:
        return self._last_assessment

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.running

    # -------------------------
    # Lifecycle
    # -------------------------

    def start(self) -> PeriodicTask:
        """Start ticking on the running asyncio loop.

        Any task from an earlier start() is cancelled first, so repeated
        starts leave exactly one active task.
        """
        if self._task is not None:
            logger.info("Terrain alerting restarting; cancelling previous task")
            self._task.cancel()
        self._task = PeriodicTask.spawn(
            self.tick, self._thresholds.tick_period_s, name=TASK_NAME
        )
        logger.info(
            "Terrain alerting started (%s, tick=%.0fms)",
            self._task.name,
            self._task.period_s * 1000.0,
        )
        return self._task

    def stop(self) -> None:
        """Cancel the periodic task and force Quiet outputs."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
        self._enter_quiet()
        self._state.last_audio_played_at_ms = None
        logger.info("Terrain alerting stopped")

    # -------------------------
    # Core tick
    # -------------------------

    def tick(self) -> ThreatDecision:
        """Run one evaluation cycle. Never raises."""
        try:
            return self._run_tick()
        except Exception:
            logger.exception("Terrain alert tick failed; treating as CLEAR")
            self._last_assessment = ThreatAssessment(
                decision=ThreatDecision.CLEAR, rule="tick-error"
            )
            try:
                self._enter_quiet()
            except Exception:
                logger.exception("Could not clear visual alert")
            return ThreatDecision.CLEAR

    def _run_tick(self) -> ThreatDecision:
        vehicle = self._read_vehicle()
        assessment = assess(vehicle, self._terrain, self._thresholds)
        self._last_assessment = assessment
        logger.debug(
            "Assessment: %s (rule=%s, agl=%s, clearance=%s)",
            assessment.decision.value,
            assessment.rule,
            assessment.altitude_agl_m,
            assessment.projected_clearance_m,
        )

        # WARN is only reachable with a vehicle snapshot
        if assessment.decision.is_alerting and vehicle is not None:
            self._enter_alerting(vehicle, assessment)
        else:
            self._enter_quiet()
        return assessment.decision

    def _read_vehicle(self) -> VehicleState | None:
        try:
            return self._vehicle_source.get_vehicle_state()
        except MissingInputError as e:
            logger.debug("Vehicle state incomplete: %s", e)
            return None

    # -------------------------
    # Outputs
    # -------------------------

    def _enter_alerting(self, vehicle: VehicleState, assessment: ThreatAssessment) -> None:
        if not self._alerting:
            self._alerting = True
            distance_m = lookahead_distance_m(vehicle, assessment)
            logger.info(
                "PULL UP: projected clearance %.0fm at %.0fm ahead (vz=%.1fm/s)",
                assessment.projected_clearance_m,
                distance_m if distance_m is not None else float("nan"),
                vehicle.vertical_speed_mps,
            )

        now_ms = self._clock_ms()
        if self._state.audio_due(now_ms, self._thresholds.audio_cooldown_ms):
            self._state.last_audio_played_at_ms = now_ms
            self._emit_audio()

        self._presenter.set_visual_alert(self._state.toggle_blink())

    def _enter_quiet(self) -> None:
        if self._alerting:
            self._alerting = False
            logger.info("Terrain alert cleared")
        self._state.reset_visual()
        self._presenter.set_visual_alert(False)

    def _emit_audio(self) -> None:
        try:
            self._annunciator.request_audio_alert()
        except AudioPlaybackRejectedError as e:
            logger.info("Audio playback rejected: %s", e)
        except Exception:
            logger.warning("Audio playback failed", exc_info=True)
