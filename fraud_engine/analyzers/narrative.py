"""Adjuster-facing explanation of an assessment."""

import asyncio
import logging
from typing import Optional, Sequence

from .base import NarrativeBackend
from ..models.assessment import Recommendation, RiskLevel
from ..models.claim import ClaimContext
from ..models.judgment import DocumentJudgment, TextJudgment
from ..utils.errors import AnalyzerUnavailableError, log_degraded
from ..utils.logging import with_context

logger = logging.getLogger(__name__)


def fallback_narrative(score: int, level: RiskLevel, recommendation: Recommendation) -> str:
    """Deterministic explanation built from the already-computed classification."""
    return (
        f"Risk score of {score}/100 indicates {level.value} risk. "
        f"{recommendation.value} is recommended."
    )


def build_narrative_prompt(
    ctx: ClaimContext,
    score: int,
    level: RiskLevel,
    recommendation: Recommendation,
    docs: Sequence[DocumentJudgment],
    text: TextJudgment
) -> str:
    document_issues = sum(1 for doc in docs if not doc.is_authentic)
    return f"""Based on the following fraud analysis results, write a short professional
recommendation for the insurance adjuster handling this claim.

Claim ID: {ctx.claim_id}
Claim Type: {ctx.claim_type or 'Unknown'}
Claim Amount: {ctx.amount:,.2f}
Risk Score: {score}/100
Risk Level: {level.value}
Recommended Action: {recommendation.value}
Document Issues: {document_issues}
Text Suspicion: {text.suspicion_score:.2f}
Inconsistencies: {len(text.inconsistencies)}

Explain the main drivers of the score in two to four sentences. Do not change the
risk level or the recommended action."""


class NarrativeGenerator:
    """
    Produces the explanation attached to each assessment.

    Uses the backend when one is configured and enabled; otherwise, or
    on failure, timeout or an empty reply, returns the template sentence.
    """

    def __init__(
        self,
        backend: Optional[NarrativeBackend] = None,
        timeout: float = 15.0,
        enabled: bool = True
    ):
        self.backend = backend
        self.timeout = timeout
        self.enabled = enabled and backend is not None
        logger.info(f"Initialized NarrativeGenerator (enabled={self.enabled})")

    @with_context(component="narrative")
    async def narrate(
        self,
        ctx: ClaimContext,
        score: int,
        level: RiskLevel,
        recommendation: Recommendation,
        docs: Sequence[DocumentJudgment],
        text: TextJudgment
    ) -> str:
        """
        Explain an assessment.

        Args:
            ctx: Assessed claim
            score: Final risk score
            level: Risk level derived from the score
            recommendation: Recommendation derived from score and documents
            docs: Document judgments
            text: Text judgment

        Returns:
            Generated narrative, or the deterministic template
        """
        if not self.enabled:
            return fallback_narrative(score, level, recommendation)

        prompt = build_narrative_prompt(ctx, score, level, recommendation, docs, text)
        try:
            narrative = await asyncio.wait_for(self.backend.generate(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            log_degraded(AnalyzerUnavailableError.timed_out("narrative", self.timeout, ctx.claim_id), logger)
            return fallback_narrative(score, level, recommendation)
        except Exception as e:
            log_degraded(AnalyzerUnavailableError.from_exception("narrative", e, ctx.claim_id), logger)
            return fallback_narrative(score, level, recommendation)

        if not isinstance(narrative, str) or not narrative.strip():
            logger.warning("Narrative backend returned no text, using template")
            return fallback_narrative(score, level, recommendation)
        return narrative.strip()
