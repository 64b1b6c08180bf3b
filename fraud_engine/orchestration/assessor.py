"""Fraud assessment orchestrator: fan out analyzers, join, score, explain."""

import asyncio
import logging
import math
import numbers
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from ..analyzers.document_analyzer import DocumentAuthenticityAnalyzer
from ..analyzers.narrative import NarrativeGenerator
from ..analyzers.pattern_analyzer import analyze_patterns
from ..analyzers.text_analyzer import TEXT_UNAVAILABLE_FACTOR, TextConsistencyAnalyzer
from ..models.assessment import FraudAnalysisResult, HistoryRiskAssessment
from ..models.claim import ClaimContext, DocumentRef, UserHistory
from ..models.judgment import DocumentJudgment, PatternFindings, TextJudgment
from ..scoring.aggregator import DEFAULT_WEIGHTS, ScoringWeights, clamp_score, score_breakdown
from ..scoring.classifier import ASSESSMENT_CONFIDENCE, classify
from ..scoring.history import assess_history
from ..utils.errors import InvalidInputError
from ..utils.logging import clear_context, get_context, set_context

logger = logging.getLogger(__name__)


class FraudAssessmentOrchestrator:
    """
    Runs one fraud assessment end to end.

    Document and text analyzers run concurrently (documents also run
    concurrently with each other); pattern analysis runs inline. Once every
    signal has resolved, by verdict or by fallback, the score, classification
    and narrative are computed in sequence. Only invalid input is raised to
    the caller.

    Attributes:
        document_analyzer: Per-document authenticity analyzer
        text_analyzer: Narrative consistency analyzer
        narrative_generator: Explanation writer
        weights: Points table used for scoring
    """

    def __init__(
        self,
        document_analyzer: DocumentAuthenticityAnalyzer,
        text_analyzer: TextConsistencyAnalyzer,
        narrative_generator: Optional[NarrativeGenerator] = None,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            document_analyzer: Analyzer for submitted documents
            text_analyzer: Analyzer for the claim description
            narrative_generator: Optional explanation writer (template-only if omitted)
            weights: Points table for the aggregator
            clock: Optional source of "now" for reporting-delay checks
        """
        self.document_analyzer = document_analyzer
        self.text_analyzer = text_analyzer
        self.narrative_generator = narrative_generator or NarrativeGenerator()
        self.weights = weights
        self._clock = clock

        logger.info("Initialized FraudAssessmentOrchestrator")

    async def assess(self, ctx: ClaimContext) -> FraudAnalysisResult:
        """
        Assess a claim for fraud risk.

        Args:
            ctx: Claim to assess

        Returns:
            Complete FraudAnalysisResult

        Raises:
            InvalidInputError: If the claim fails validation; no analyzer is invoked
        """
        validate_claim(ctx)

        previous_context = get_context()
        set_context(claim_id=ctx.claim_id)
        try:
            logger.info(
                f"Starting fraud assessment: type={ctx.claim_type or 'unknown'}, "
                f"amount={ctx.amount:,.2f}, documents={len(ctx.documents)}"
            )

            patterns = analyze_patterns(ctx, now=self._clock() if self._clock else None)

            documents, text = await asyncio.gather(
                self.document_analyzer.analyze_documents(ctx.documents),
                self.text_analyzer.analyze_text(ctx.description, ctx.metadata()),
            )

            breakdown = score_breakdown(ctx, documents, text, patterns, self.weights)
            score = clamp_score(sum(points for _, points in breakdown))
            level, recommendation = classify(score, documents)

            narrative = await self.narrative_generator.narrate(
                ctx, score, level, recommendation, documents, text
            )

            result = FraudAnalysisResult(
                risk_score=score,
                risk_level=level,
                recommendation=recommendation,
                confidence=ASSESSMENT_CONFIDENCE,
                risk_factors=compose_risk_factors(patterns, text, documents),
                document_judgments=tuple(documents),
                text_judgment=text,
                narrative=narrative,
                score_breakdown=tuple(breakdown),
            )

            logger.info(
                f"Assessment complete: score={score}, level={level.value}, "
                f"recommendation={recommendation.value}, factors={len(result.risk_factors)}"
            )
            return result
        finally:
            clear_context()
            set_context(**previous_context)

    async def check_document(self, doc: DocumentRef) -> DocumentJudgment:
        """Judge a single document outside of a full assessment."""
        if not isinstance(doc, DocumentRef):
            raise InvalidInputError.for_field("document", "expected a DocumentRef")
        return await self.document_analyzer.analyze_document(doc)

    async def check_text(self, description: str, claim_type: str = "") -> TextJudgment:
        """Judge a claim narrative outside of a full assessment."""
        if not isinstance(description, str) or not description.strip():
            raise InvalidInputError.for_field("description", "must be a non-empty string")
        return await self.text_analyzer.analyze_text(description, {"claim_type": claim_type})

    def assess_history(self, history: UserHistory) -> HistoryRiskAssessment:
        """Score a claimant from their history alone."""
        _validate_history(history)
        return assess_history(history)


def validate_claim(ctx: ClaimContext) -> None:
    """
    Reject claims the engine cannot assess.

    Raises:
        InvalidInputError: On an empty claim id, a negative or non-numeric
            amount, a non-string description or an invalid history
    """
    if not isinstance(ctx, ClaimContext):
        raise InvalidInputError.for_field("claim", "expected a ClaimContext")

    if not isinstance(ctx.claim_id, str) or not ctx.claim_id.strip():
        raise InvalidInputError.for_field("claim_id", "must be a non-empty string")

    amount = ctx.amount
    if isinstance(amount, bool) or not isinstance(amount, (numbers.Real, Decimal)):
        raise InvalidInputError.for_field("amount", "must be a number")
    finite = amount.is_finite() if isinstance(amount, Decimal) else math.isfinite(amount)
    if not finite or amount < 0:
        raise InvalidInputError.for_field("amount", f"must be a finite non-negative number, got {amount!r}")

    if not isinstance(ctx.description, str):
        raise InvalidInputError.for_field("description", "must be a string")

    for index, doc in enumerate(ctx.documents):
        if not isinstance(doc, DocumentRef) or not doc.id:
            raise InvalidInputError.for_field(f"documents[{index}]", "must be a DocumentRef with an id")

    _validate_history(ctx.history)


def _validate_history(history: UserHistory) -> None:
    if not isinstance(history, UserHistory):
        raise InvalidInputError.for_field("history", "expected a UserHistory")
    for name in ("total_claims", "recent_claims", "rejected_claims"):
        value = getattr(history, name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidInputError.for_field(f"history.{name}", "must be a non-negative integer")
    average = history.average_claim_amount
    if isinstance(average, bool) or not isinstance(average, (int, float)) or not math.isfinite(average) or average < 0:
        raise InvalidInputError.for_field("history.average_claim_amount", "must be a finite non-negative number")


def compose_risk_factors(
    patterns: PatternFindings,
    text: TextJudgment,
    documents: Sequence[DocumentJudgment]
) -> tuple:
    """
    Ordered, deduplicated union of every contributing factor.

    Order: pattern factors, text suspicious patterns, inauthentic documents,
    document issues, then the degraded-text notice. First occurrence wins.
    """
    factors: List[str] = list(patterns.risk_factors)
    factors.extend(text.suspicious_patterns)
    factors.extend(
        f"Document {doc.document_id} authenticity issues"
        for doc in documents if not doc.is_authentic
    )
    for doc in documents:
        factors.extend(doc.issues)
    if text.degraded:
        factors.append(TEXT_UNAVAILABLE_FACTOR)

    return tuple(dict.fromkeys(factors))
