"""Orchestration layer for fraud assessments."""

from .assessor import FraudAssessmentOrchestrator, compose_risk_factors, validate_claim

__all__ = [
    "FraudAssessmentOrchestrator",
    "compose_risk_factors",
    "validate_claim",
]
