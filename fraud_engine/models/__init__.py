"""Data models for claims, judgments and assessment results."""

from .claim import ClaimContext, DocumentRef, UserHistory
from .judgment import DocumentJudgment, TextJudgment, PatternFindings
from .assessment import (
    FraudAnalysisResult,
    HistoryRiskAssessment,
    Recommendation,
    RiskLevel,
)

__all__ = [
    "ClaimContext",
    "DocumentRef",
    "UserHistory",
    "DocumentJudgment",
    "TextJudgment",
    "PatternFindings",
    "FraudAnalysisResult",
    "HistoryRiskAssessment",
    "Recommendation",
    "RiskLevel",
]
