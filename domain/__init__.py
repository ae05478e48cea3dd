"""Terrain Alerting Domain Layer.

This package contains the core logic organized by bounded contexts:
- terrain: positions, vehicle state, lookahead projection, terrain sampling
- alerting: threat evaluation, alert sequencing and outputs
"""

# Imports alphabetized per project style (isort)
from domain import alerting, terrain

__all__ = ["alerting", "terrain"]
