"""Document authenticity analyzer with timeout and fallback policy."""

import asyncio
import logging
from typing import Any, Dict, List

from .base import DocumentAnalysisBackend
from ..models.claim import DocumentRef
from ..models.judgment import DocumentJudgment
from ..utils.errors import AnalyzerUnavailableError, log_degraded
from ..utils.logging import with_context
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

DOCUMENT_UNAVAILABLE_ISSUE = "document analysis unavailable"
TAMPERING_ISSUE = "Potential digital manipulation detected"
TAMPERING_TAG_INDICATORS = ("edited", "modified", "photoshopped", "manipulated", "fake")

FALLBACK_CONFIDENCE = 0.5
DEFAULT_CONFIDENCE = 0.5
AUTHENTICITY_CONFIDENCE_THRESHOLD = 0.7


def fallback_document_judgment(doc: DocumentRef) -> DocumentJudgment:
    """Neutral, low-confidence judgment used when the backend is unavailable."""
    return DocumentJudgment(
        document_id=doc.id,
        is_authentic=True,
        tampering_detected=False,
        confidence=FALLBACK_CONFIDENCE,
        issues=(DOCUMENT_UNAVAILABLE_ISSUE,),
        degraded=True,
    )


class DocumentAuthenticityAnalyzer:
    """
    Judges whether submitted documents look authentic.

    Each call makes one backend attempt bounded by ``timeout``. Failures
    and timeouts never propagate: the fixed fallback judgment is returned
    instead.
    """

    def __init__(self, backend: DocumentAnalysisBackend, timeout: float = 20.0):
        self.backend = backend
        self.timeout = timeout
        logger.info(f"Initialized DocumentAuthenticityAnalyzer (timeout={timeout}s)")

    @with_context(component="document-analyzer")
    async def analyze_document(self, doc: DocumentRef) -> DocumentJudgment:
        """
        Judge a single document.

        Args:
            doc: Document to analyze

        Returns:
            DocumentJudgment from the backend, or the fallback judgment
        """
        try:
            payload = await self._call_backend(doc)
            judgment = interpret_document_payload(doc.id, payload)
        except AnalyzerUnavailableError as e:
            log_degraded(e, logger)
            return fallback_document_judgment(doc)

        logger.info(
            f"Document {doc.id}: authentic={judgment.is_authentic}, "
            f"tampering={judgment.tampering_detected}, confidence={judgment.confidence:.2f}"
        )
        return judgment

    async def analyze_documents(self, docs) -> List[DocumentJudgment]:
        """Judge all documents concurrently, preserving input order."""
        if not docs:
            return []
        return list(await asyncio.gather(*(self.analyze_document(doc) for doc in docs)))

    async def _call_backend(self, doc: DocumentRef) -> Dict[str, Any]:
        try:
            payload = await asyncio.wait_for(self.backend.analyze(doc.locator), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise AnalyzerUnavailableError.timed_out("document", self.timeout, subject=doc.id)
        except Exception as e:
            raise AnalyzerUnavailableError.from_exception("document", e, subject=doc.id)

        if not isinstance(payload, dict):
            raise AnalyzerUnavailableError.from_exception(
                "document",
                TypeError(f"expected a mapping, got {type(payload).__name__}"),
                subject=doc.id,
            )
        return payload


def interpret_document_payload(document_id: str, payload: Dict[str, Any]) -> DocumentJudgment:
    """
    Turn a backend payload into a DocumentJudgment.

    Tampering is flagged when the payload says so or any tag names a tamper
    indicator. Without an explicit ``isAuthentic`` the verdict falls back to
    the confidence threshold. A tampered document is never authentic.
    """
    tags = [tag.lower() for tag in _tag_names(payload.get("tags"))]
    tag_tampering = any(indicator in tag for tag in tags for indicator in TAMPERING_TAG_INDICATORS)
    tampering = payload.get("tamperingDetected") is True or tag_tampering

    confidence = ResponseFormatter.as_float(payload.get("confidence"), DEFAULT_CONFIDENCE)

    explicit = payload.get("isAuthentic")
    if isinstance(explicit, bool):
        authentic = explicit
    else:
        # No stated verdict and no confidence leaves 0.5, below the threshold: inauthentic
        authentic = confidence > AUTHENTICITY_CONFIDENCE_THRESHOLD
    authentic = authentic and not tampering

    issues: List[str] = [TAMPERING_ISSUE] if tampering else []
    for issue in ResponseFormatter.as_str_list(payload.get("issues")):
        if issue not in issues:
            issues.append(issue)

    return DocumentJudgment(
        document_id=document_id,
        is_authentic=authentic,
        tampering_detected=tampering,
        confidence=confidence,
        issues=tuple(issues),
    )


def _tag_names(tags: Any) -> List[str]:
    # Vision services report tags either as plain strings or {"name": ..., "confidence": ...}
    if isinstance(tags, (list, tuple)):
        tags = [tag.get("name") if isinstance(tag, dict) else tag for tag in tags]
    return ResponseFormatter.as_str_list(tags)
