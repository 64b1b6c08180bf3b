"""Deterministic scoring: aggregation, classification and history risk."""

from .aggregator import ScoringWeights, DEFAULT_WEIGHTS, aggregate, score_breakdown
from .classifier import ASSESSMENT_CONFIDENCE, classify, recommendation, risk_level
from .history import assess_history

__all__ = [
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "aggregate",
    "score_breakdown",
    "ASSESSMENT_CONFIDENCE",
    "classify",
    "recommendation",
    "risk_level",
    "assess_history",
]
