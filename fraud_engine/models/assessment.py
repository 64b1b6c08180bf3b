"""Assessment result data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from .judgment import DocumentJudgment, TextJudgment


class RiskLevel(str, Enum):
    """Coarse risk bucket derived from the score."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Recommendation(str, Enum):
    """Suggested adjuster action."""
    APPROVE = "APPROVE"
    REVIEW = "REVIEW"
    REJECT = "REJECT"


@dataclass(frozen=True)
class FraudAnalysisResult:
    """
    Complete fraud assessment of one claim.

    Attributes:
        risk_score: Integer score in [0, 100]
        risk_level: Bucket derived from the score
        recommendation: Suggested action
        confidence: Confidence in the assessment (0.0 to 1.0)
        risk_factors: Deduplicated, ordered contributing factors
        document_judgments: One judgment per submitted document
        text_judgment: Narrative consistency judgment
        narrative: Human-readable explanation
        score_breakdown: Points contributed by each scoring term
    """
    risk_score: int
    risk_level: RiskLevel
    recommendation: Recommendation
    confidence: float
    risk_factors: Tuple[str, ...]
    document_judgments: Tuple[DocumentJudgment, ...]
    text_judgment: TextJudgment
    narrative: str
    score_breakdown: Tuple[Tuple[str, int], ...] = field(default=())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire format used by the claims API."""
        return {
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "riskFactors": list(self.risk_factors),
            "documentAnalysis": [
                {
                    "documentId": doc.document_id,
                    "isAuthentic": doc.is_authentic,
                    "tamperingDetected": doc.tampering_detected,
                    "confidence": doc.confidence,
                    "issues": list(doc.issues),
                }
                for doc in self.document_judgments
            ],
            "textAnalysis": {
                "sentiment": self.text_judgment.suspicion_score,
                "inconsistencies": list(self.text_judgment.inconsistencies),
                "suspiciousPatterns": list(self.text_judgment.suspicious_patterns),
            },
            "aiRecommendation": self.narrative,
            "scoreBreakdown": dict(self.score_breakdown),
        }


@dataclass(frozen=True)
class HistoryRiskAssessment:
    """
    Risk estimate for a claimant based only on their claim history.

    Attributes:
        risk_score: Integer score in [0, 100]
        risk_level: Bucket derived from the score
        factors: (counter name, value) pairs the score was derived from
    """
    risk_score: int
    risk_level: RiskLevel
    factors: Tuple[Tuple[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "factors": dict(self.factors),
        }
