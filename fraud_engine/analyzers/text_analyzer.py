"""Claim narrative consistency analyzer with timeout and fallback policy."""

import asyncio
import logging
from typing import Any, Dict, Optional

from .base import TextAnalysisBackend
from ..models.judgment import TextJudgment
from ..utils.errors import AnalyzerUnavailableError, log_degraded
from ..utils.logging import with_context
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

NEUTRAL_SUSPICION = 0.3
TEXT_UNAVAILABLE_FACTOR = "text analysis unavailable"

FALLBACK_TEXT_JUDGMENT = TextJudgment(
    suspicion_score=NEUTRAL_SUSPICION,
    inconsistencies=(),
    suspicious_patterns=(),
    degraded=True,
)


def build_text_prompt(description: str, claim_metadata: Optional[Dict[str, Any]] = None) -> str:
    """
    Build the fraud-indicator prompt for a claim narrative.

    Args:
        description: Free-text description of the loss
        claim_metadata: Optional claim_type, amount, date_of_loss, location

    Returns:
        Prompt string asking for a JSON verdict
    """
    meta = claim_metadata or {}
    return f"""Analyze the following insurance claim description for potential fraud indicators.

Claim Type: {meta.get('claim_type') or 'Unknown'}
Amount: {meta.get('amount', 'Unknown')}
Date of Loss: {meta.get('date_of_loss') or 'Unknown'}
Location: {meta.get('location') or 'Unknown'}
Description: {description}

Look for internal contradictions, details that conflict with the claim metadata,
vague or rehearsed wording, urgency pressure and other common fraud indicators.

Return your analysis as a JSON object with this structure:
{{
    "suspicionScore": 0.0,
    "inconsistencies": ["inconsistency found in the narrative"],
    "suspiciousPatterns": ["suspicious pattern found"]
}}

suspicionScore is between 0.0 and 1.0, where 1.0 is most suspicious.
Return ONLY the JSON object, no additional text."""


class TextConsistencyAnalyzer:
    """
    Judges the claim narrative for suspicion and inconsistencies.

    One backend attempt per call, bounded by ``timeout``; on any failure
    the fixed neutral judgment is returned.
    """

    def __init__(self, backend: TextAnalysisBackend, timeout: float = 20.0):
        self.backend = backend
        self.timeout = timeout
        logger.info(f"Initialized TextConsistencyAnalyzer (timeout={timeout}s)")

    @with_context(component="text-analyzer")
    async def analyze_text(
        self,
        description: str,
        claim_metadata: Optional[Dict[str, Any]] = None
    ) -> TextJudgment:
        """
        Judge a claim narrative.

        Args:
            description: Free-text description of the loss
            claim_metadata: Claim attributes included in the prompt

        Returns:
            TextJudgment from the backend, or the fallback judgment
        """
        prompt = build_text_prompt(description, claim_metadata)

        try:
            payload = await asyncio.wait_for(self.backend.analyze(prompt), timeout=self.timeout)
            if not isinstance(payload, dict):
                raise TypeError(f"expected a mapping, got {type(payload).__name__}")
        except asyncio.TimeoutError:
            log_degraded(AnalyzerUnavailableError.timed_out("text", self.timeout), logger)
            return FALLBACK_TEXT_JUDGMENT
        except Exception as e:
            log_degraded(AnalyzerUnavailableError.from_exception("text", e), logger)
            return FALLBACK_TEXT_JUDGMENT

        judgment = interpret_text_payload(payload)
        logger.info(
            f"Text analysis: suspicion={judgment.suspicion_score:.2f}, "
            f"{len(judgment.inconsistencies)} inconsistencies, "
            f"{len(judgment.suspicious_patterns)} suspicious patterns"
        )
        return judgment


def interpret_text_payload(payload: Dict[str, Any]) -> TextJudgment:
    """Use the backend verdict as-is, defaulting missing fields to neutral values."""
    score = payload.get("suspicionScore", payload.get("sentiment"))
    return TextJudgment(
        suspicion_score=ResponseFormatter.as_float(score, NEUTRAL_SUSPICION),
        inconsistencies=tuple(ResponseFormatter.as_str_list(payload.get("inconsistencies"))),
        suspicious_patterns=tuple(ResponseFormatter.as_str_list(payload.get("suspiciousPatterns"))),
    )
