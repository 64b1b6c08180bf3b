"""Claimant risk estimated from claim history alone."""

import logging

from .aggregator import clamp_score
from .classifier import risk_level
from ..models.assessment import HistoryRiskAssessment
from ..models.claim import UserHistory

logger = logging.getLogger(__name__)

BASE_SCORE = 20
REJECTED_POINTS = 30
RECENT_POINTS = 25
RECENT_CLAIMS_THRESHOLD = 3
AVERAGE_AMOUNT_POINTS = 15
AVERAGE_AMOUNT_THRESHOLD = 50_000


def assess_history(history: UserHistory) -> HistoryRiskAssessment:
    """
    Score a claimant from their history, independent of any single claim.

    Starts from a base of 20 and adds points for rejected claims, a burst
    of recent claims and a high average claim amount.

    Args:
        history: Claimant's claim history

    Returns:
        HistoryRiskAssessment with score, level and the counters used
    """
    score = BASE_SCORE
    if history.rejected_claims > 0:
        score += REJECTED_POINTS
    if history.recent_claims > RECENT_CLAIMS_THRESHOLD:
        score += RECENT_POINTS
    if history.average_claim_amount > AVERAGE_AMOUNT_THRESHOLD:
        score += AVERAGE_AMOUNT_POINTS

    score = clamp_score(score)
    logger.debug(f"History risk score: {score}")

    return HistoryRiskAssessment(
        risk_score=score,
        risk_level=risk_level(score),
        factors=(
            ("totalClaims", history.total_claims),
            ("rejectedClaims", history.rejected_claims),
            ("recentClaims", history.recent_claims),
            ("averageAmount", history.average_claim_amount),
        ),
    )
