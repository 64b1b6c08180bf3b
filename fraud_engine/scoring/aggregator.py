"""Combine pattern, document and text signals into one bounded risk score."""

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models.claim import ClaimContext
from ..models.judgment import DocumentJudgment, PatternFindings, TextJudgment
from ..utils.errors import AggregationError

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass(frozen=True)
class ScoringWeights:
    """
    Points table for the risk score.

    The defaults are hand-tuned and carry no documented derivation; swap in
    a different table per orchestrator rather than editing them in place.

    Attributes:
        amount_tiers: (exclusive threshold, points) pairs, highest threshold first
        inauthentic_document: Points per document judged not authentic
        text_suspicion: Points at a suspicion score of 1.0
        pattern_factor: Points per heuristic risk factor
        rejected_claim: Points per previously rejected claim
        recent_claim: Points per recent claim
        recent_claims_cap: Maximum points from recent claims
    """
    amount_tiers: Tuple[Tuple[float, int], ...] = ((100_000, 25), (50_000, 15), (20_000, 10))
    inauthentic_document: int = 20
    text_suspicion: int = 30
    pattern_factor: int = 10
    rejected_claim: int = 15
    recent_claim: int = 5
    recent_claims_cap: int = 20


DEFAULT_WEIGHTS = ScoringWeights()


def score_breakdown(
    ctx: ClaimContext,
    docs: Sequence[DocumentJudgment],
    text: TextJudgment,
    patterns: PatternFindings,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> List[Tuple[str, int]]:
    """
    Points contributed by each scoring term, in summation order.

    Every term is clamped to be non-negative on its own.

    Returns:
        [("amount", n), ("documents", n), ("text", n), ("patterns", n), ("history", n)]

    Raises:
        AggregationError: If a judgment carries a non-finite suspicion score
    """
    if not math.isfinite(text.suspicion_score):
        raise AggregationError.defect(
            "Text suspicion score is not finite",
            suspicion_score=text.suspicion_score,
        )

    amount_points = 0
    for threshold, points in weights.amount_tiers:
        if ctx.amount > threshold:
            amount_points = points
            break

    inauthentic = sum(1 for doc in docs if not doc.is_authentic)
    document_points = weights.inauthentic_document * inauthentic

    suspicion = min(max(text.suspicion_score, 0.0), 1.0)
    # Half-up rounding keeps x.5 results stable across platforms
    text_points = math.floor(weights.text_suspicion * suspicion + 0.5)

    pattern_points = weights.pattern_factor * len(patterns.risk_factors)

    history = ctx.history
    history_points = (
        weights.rejected_claim * history.rejected_claims
        + min(weights.recent_claim * history.recent_claims, weights.recent_claims_cap)
    )

    terms = [
        ("amount", amount_points),
        ("documents", document_points),
        ("text", text_points),
        ("patterns", pattern_points),
        ("history", history_points),
    ]
    return [(name, max(int(points), 0)) for name, points in terms]


def aggregate(
    ctx: ClaimContext,
    docs: Sequence[DocumentJudgment],
    text: TextJudgment,
    patterns: PatternFindings,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> int:
    """
    Compute the risk score for a claim.

    Args:
        ctx: Assessed claim
        docs: Document judgments
        text: Narrative judgment
        patterns: Heuristic findings
        weights: Points table (defaults to DEFAULT_WEIGHTS)

    Returns:
        Integer score clamped to [0, 100]
    """
    breakdown = score_breakdown(ctx, docs, text, patterns, weights)
    return clamp_score(sum(points for _, points in breakdown))


def clamp_score(total: int) -> int:
    return min(max(int(total), MIN_SCORE), MAX_SCORE)
