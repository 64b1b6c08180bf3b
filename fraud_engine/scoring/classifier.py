"""Map a risk score to a risk level and an adjuster recommendation."""

from typing import Sequence, Tuple

from ..models.assessment import Recommendation, RiskLevel
from ..models.judgment import DocumentJudgment

CRITICAL_THRESHOLD = 80
HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 40

REJECT_THRESHOLD = 80
REVIEW_THRESHOLD = 50

# Reported until an analyzer supplies its own confidence signal
ASSESSMENT_CONFIDENCE = 0.9


def risk_level(score: int) -> RiskLevel:
    if score >= CRITICAL_THRESHOLD:
        return RiskLevel.CRITICAL
    if score >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def recommendation(score: int, docs: Sequence[DocumentJudgment]) -> Recommendation:
    """
    Recommend an action.

    Any document judged not authentic forces REJECT, whatever the score.
    """
    if score >= REJECT_THRESHOLD or any(not doc.is_authentic for doc in docs):
        return Recommendation.REJECT
    if score >= REVIEW_THRESHOLD:
        return Recommendation.REVIEW
    return Recommendation.APPROVE


def classify(score: int, docs: Sequence[DocumentJudgment]) -> Tuple[RiskLevel, Recommendation]:
    return risk_level(score), recommendation(score, docs)
