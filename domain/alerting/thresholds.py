"""Alerting Bounded Context - Thresholds.

Every numeric limit used by the threat rules and the sequencer is a named
module constant and the default of an overridable AlertThresholds field.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Altitudes are meters above ground, speeds meters/second (positive vz = climb)
CEILING_AGL_M = 762.0  # 2500 ft radio-altimeter ceiling
FLARE_AGL_M = 50.0
LANDING_MUTE_AGL_M = 500.0
LANDING_MUTE_MIN_VZ_MPS = -10.0  # exclusive; faster sink is never muted
LANDING_MUTE_MAX_VZ_MPS = 0.0  # exclusive
LANDING_MUTE_MAX_GROUND_SPEED_MPS = 103.0  # ~200 kt
LOOKAHEAD_HORIZON_S = 15.0
WARN_CLEARANCE_M = 100.0
SINK_WARN_CLEARANCE_M = 200.0
WARN_SINK_RATE_MPS = -5.0

# Sequencer timing
TICK_PERIOD_MS = 250.0  # 4 Hz
AUDIO_COOLDOWN_MS = 4500.0


class AlertThresholds(BaseModel):
    """Threat-rule and timing configuration (Value Object).

    Override any field per instance, e.g.
    ``AlertThresholds(warn_clearance_m=150.0)`` or
    ``DEFAULT_THRESHOLDS.model_copy(update={"audio_cooldown_ms": 1000.0})``.
    """

    ceiling_agl_m: float = CEILING_AGL_M
    flare_agl_m: float = FLARE_AGL_M
    landing_mute_agl_m: float = LANDING_MUTE_AGL_M
    landing_mute_min_vz_mps: float = LANDING_MUTE_MIN_VZ_MPS
    landing_mute_max_vz_mps: float = LANDING_MUTE_MAX_VZ_MPS
    landing_mute_max_ground_speed_mps: float = LANDING_MUTE_MAX_GROUND_SPEED_MPS
    lookahead_horizon_s: float = Field(default=LOOKAHEAD_HORIZON_S, gt=0)
    warn_clearance_m: float = WARN_CLEARANCE_M
    sink_warn_clearance_m: float = SINK_WARN_CLEARANCE_M
    warn_sink_rate_mps: float = WARN_SINK_RATE_MPS
    tick_period_ms: float = Field(default=TICK_PERIOD_MS, gt=0)
    audio_cooldown_ms: float = Field(default=AUDIO_COOLDOWN_MS, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_ordering(self) -> "AlertThresholds":
        if not (self.landing_mute_min_vz_mps < self.landing_mute_max_vz_mps):
            raise ValueError(
                "landing mute vz band is empty: "
                f"({self.landing_mute_min_vz_mps}, {self.landing_mute_max_vz_mps})"
            )
        if self.sink_warn_clearance_m < self.warn_clearance_m:
            raise ValueError(
                f"sink_warn_clearance_m ({self.sink_warn_clearance_m}) must be >= "
                f"warn_clearance_m ({self.warn_clearance_m})"
            )
        return self

    @property
    def tick_period_s(self) -> float:
        return self.tick_period_ms / 1000.0


DEFAULT_THRESHOLDS = AlertThresholds()
