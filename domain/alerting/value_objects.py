"""Alerting Bounded Context - Value Objects and owned state."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from domain.terrain.value_objects import GeoPoint


class ThreatDecision(str, Enum):
    """Outcome of one threat evaluation. A tag only, no payload."""

    INACTIVE = "inactive"
    SUPPRESSED = "suppressed"
    CLEAR = "clear"
    WARN = "warn"

    @property
    def is_alerting(self) -> bool:
        return self is ThreatDecision.WARN


class ThreatAssessment(BaseModel):
    """Diagnostic record of one pipeline run.

    ``rule`` names the cascade rule that produced the decision.
    ``projected_clearance_m`` and ``lookahead_point`` are None when the
    pipeline stopped before projecting, or when projection/terrain failed.
    """

    decision: ThreatDecision
    rule: str
    altitude_agl_m: float | None = None
    vertical_speed_mps: float | None = None
    projected_clearance_m: float | None = None
    lookahead_point: GeoPoint | None = None

    model_config = ConfigDict(frozen=True)


class AlertOutputState(BaseModel):
    """Mutable alert outputs owned by exactly one AlertSequencer.

    Invariant: visual_on is True only while the latest decision is WARN.
    Quiet decisions force visual_on and blink_on off and never touch
    last_audio_played_at_ms.
    """

    visual_on: bool = False
    blink_on: bool = False
    last_audio_played_at_ms: float | None = None

    model_config = ConfigDict(validate_assignment=True)

    def reset_visual(self) -> None:
        self.blink_on = False
        self.visual_on = False

    def toggle_blink(self) -> bool:
        self.blink_on = not self.blink_on
        self.visual_on = self.blink_on
        return self.blink_on

    def audio_due(self, now_ms: float, cooldown_ms: float) -> bool:
        if self.last_audio_played_at_ms is None:
            return True
        return now_ms - self.last_audio_played_at_ms > cooldown_ms
