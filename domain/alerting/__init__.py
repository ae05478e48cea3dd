"""Alerting Bounded Context.

Responsible for the terrain "PULL UP" decision and its outputs:
- Value Objects: ThreatDecision, ThreatAssessment, AlertThresholds
- Owned state: AlertOutputState
- Ports: AlertPresenter, AudioAnnunciator
- Services: evaluate / assess (Threat Evaluator), AlertSequencer, PeriodicTask
"""
