"""Fraud risk assessment engine for insurance claims."""

from .models import (
    ClaimContext,
    DocumentRef,
    UserHistory,
    FraudAnalysisResult,
    Recommendation,
    RiskLevel,
)
from .orchestration import FraudAssessmentOrchestrator
from .utils.errors import InvalidInputError

__all__ = [
    "ClaimContext",
    "DocumentRef",
    "UserHistory",
    "FraudAnalysisResult",
    "Recommendation",
    "RiskLevel",
    "FraudAssessmentOrchestrator",
    "InvalidInputError",
]
