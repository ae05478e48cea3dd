"""Threat Evaluator.

Fuses altitude above ground, vertical speed, gear state, ground contact and
the projected terrain clearance into a ThreatDecision.

The decision is an ordered cascade, first match wins:

    1. ceiling          INACTIVE    AGL above the radio-altimeter ceiling
    2. ground-contact   INACTIVE    vehicle on the ground
    3. flare            SUPPRESSED  low, gear down, climbing
    4. landing          SUPPRESSED  gear down, below mute AGL, gentle sink, slow
    5. no-clearance     CLEAR       projection or terrain data unavailable
    6. terrain-threat   WARN        clearance too low, or low while sinking fast
    7. clear            CLEAR       everything else

Mute rules (1-4) always win over threat evaluation, and missing data never
escalates to a warning.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, NamedTuple

from domain.alerting.thresholds import DEFAULT_THRESHOLDS, AlertThresholds
from domain.alerting.value_objects import ThreatAssessment, ThreatDecision
from domain.terrain.oracle import TerrainOracleAdapter
from domain.terrain.services import geodesic_distance, project_position
from domain.terrain.value_objects import VehicleState

logger = logging.getLogger(__name__)

Predicate = Callable[[VehicleState, float | None, float, AlertThresholds], bool]


class Rule(NamedTuple):
    name: str
    decision: ThreatDecision
    applies: Predicate


# ---------------------------------------------------------------------------
# Rule predicates
# ---------------------------------------------------------------------------
def _above_ceiling(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return vehicle.altitude_agl_m > t.ceiling_agl_m


def _on_ground(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return vehicle.on_ground


def _flare(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return vehicle.altitude_agl_m < t.flare_agl_m and vehicle.gear_extended and vz > 0


def _landing_approach(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return (
        vehicle.gear_extended
        and vehicle.altitude_agl_m < t.landing_mute_agl_m
        and t.landing_mute_min_vz_mps < vz < t.landing_mute_max_vz_mps
        and vehicle.ground_speed_mps < t.landing_mute_max_ground_speed_mps
    )


def _clearance_unavailable(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return clearance is None or math.isnan(clearance)


def _terrain_threat(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    if clearance is None:
        return False
    return clearance < t.warn_clearance_m or (
        clearance < t.sink_warn_clearance_m and vz < t.warn_sink_rate_mps
    )


def _always(
    vehicle: VehicleState, clearance: float | None, vz: float, t: AlertThresholds
) -> bool:
    return True


# ---------------------------------------------------------------------------
# Rule table (order is precedence)
# ---------------------------------------------------------------------------
MUTE_RULES: tuple[Rule, ...] = (
    Rule("ceiling", ThreatDecision.INACTIVE, _above_ceiling),
    Rule("ground-contact", ThreatDecision.INACTIVE, _on_ground),
    Rule("flare", ThreatDecision.SUPPRESSED, _flare),
    Rule("landing", ThreatDecision.SUPPRESSED, _landing_approach),
)

TERRAIN_RULES: tuple[Rule, ...] = (
    Rule("no-clearance", ThreatDecision.CLEAR, _clearance_unavailable),
    Rule("terrain-threat", ThreatDecision.WARN, _terrain_threat),
    Rule("clear", ThreatDecision.CLEAR, _always),
)

RULES: tuple[Rule, ...] = MUTE_RULES + TERRAIN_RULES


def _first_match(
    rules: tuple[Rule, ...],
    vehicle: VehicleState,
    clearance: float | None,
    vz: float,
    thresholds: AlertThresholds,
) -> Rule | None:
    for rule in rules:
        if rule.applies(vehicle, clearance, vz, thresholds):
            return rule
    return None


def projected_clearance(
    altitude_msl_m: float,
    vertical_speed_mps: float,
    future_ground_elevation_m: float,
    horizon_s: float,
) -> float:
    """Projected MSL altitude minus terrain elevation at the lookahead point."""
    return (altitude_msl_m + vertical_speed_mps * horizon_s) - future_ground_elevation_m


def evaluate_rule(
    vehicle: VehicleState,
    projected_clearance_m: float | None,
    vertical_speed_mps: float,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> Rule:
    """Return the first rule of the cascade that matches."""
    rule = _first_match(
        RULES, vehicle, projected_clearance_m, vertical_speed_mps, thresholds
    )
    if rule is None:
        raise RuntimeError("rule cascade has no fallback rule")
    return rule


def evaluate(
    vehicle: VehicleState,
    projected_clearance_m: float | None,
    vertical_speed_mps: float,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> ThreatDecision:
    """Decide INACTIVE / SUPPRESSED / CLEAR / WARN for one vehicle snapshot.

    Args:
        vehicle: Current vehicle snapshot (AGL, gear, ground contact, speed)
        projected_clearance_m: Clearance at the lookahead point, or None when
            it could not be computed
        vertical_speed_mps: Vertical speed, positive when climbing
        thresholds: Rule thresholds

    Returns:
        The decision of the first matching rule.
    """
    return evaluate_rule(
        vehicle, projected_clearance_m, vertical_speed_mps, thresholds
    ).decision


def assess(
    vehicle: VehicleState | None,
    terrain: TerrainOracleAdapter,
    thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
) -> ThreatAssessment:
    """Run projection, terrain lookup and evaluation for one snapshot.

    Projection and the terrain query are skipped when a mute rule already
    decides. A missing vehicle snapshot resolves to CLEAR.
    """
    if vehicle is None:
        return ThreatAssessment(decision=ThreatDecision.CLEAR, rule="missing-input")

    vz = vehicle.vertical_speed_mps
    agl = vehicle.altitude_agl_m

    mute = _first_match(MUTE_RULES, vehicle, None, vz, thresholds)
    if mute is not None:
        return ThreatAssessment(
            decision=mute.decision,
            rule=mute.name,
            altitude_agl_m=agl,
            vertical_speed_mps=vz,
        )

    horizon_s = thresholds.lookahead_horizon_s
    lookahead = project_position(vehicle.position, vehicle.ground_velocity, horizon_s)

    clearance: float | None = None
    if lookahead is None:
        logger.debug("Lookahead projection failed; skipping terrain check")
    else:
        sample = terrain.sample_elevation(lookahead)
        if sample.is_available:
            clearance = projected_clearance(
                vehicle.altitude_msl_m, vz, sample.elevation_m, horizon_s
            )
        else:
            logger.warning(
                "Future terrain data unavailable at (%.6f, %.6f); skipping terrain check",
                lookahead.latitude,
                lookahead.longitude,
            )

    rule = evaluate_rule(vehicle, clearance, vz, thresholds)

    return ThreatAssessment(
        decision=rule.decision,
        rule=rule.name,
        altitude_agl_m=agl,
        vertical_speed_mps=vz,
        projected_clearance_m=clearance,
        lookahead_point=lookahead,
    )


def lookahead_distance_m(
    vehicle: VehicleState, assessment: ThreatAssessment
) -> float | None:
    """Ground distance from the vehicle to the assessed lookahead point."""
    if assessment.lookahead_point is None:
        return None
    return geodesic_distance(vehicle.position, assessment.lookahead_point)
