"""Per-signal judgment data models."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DocumentJudgment:
    """
    Authenticity verdict for a single document.

    Attributes:
        document_id: Identifier of the judged document
        is_authentic: Whether the document appears genuine
        tampering_detected: Whether explicit tamper indicators were found
        confidence: Confidence of the verdict (0.0 to 1.0)
        issues: Issues found, in detection order
        degraded: True when this is the fallback value, not a backend verdict
    """
    document_id: str
    is_authentic: bool
    tampering_detected: bool
    confidence: float
    issues: Tuple[str, ...] = ()
    degraded: bool = False


@dataclass(frozen=True)
class TextJudgment:
    """
    Consistency verdict for the claim narrative.

    Attributes:
        suspicion_score: 0.0 (benign) to 1.0 (most suspicious)
        inconsistencies: Inconsistencies named by the analyzer
        suspicious_patterns: Suspicious patterns named by the analyzer
        degraded: True when this is the fallback value, not a backend verdict
    """
    suspicion_score: float
    inconsistencies: Tuple[str, ...] = ()
    suspicious_patterns: Tuple[str, ...] = ()
    degraded: bool = False


@dataclass(frozen=True)
class PatternFindings:
    """Heuristic risk factors in detection order (not severity order)."""
    risk_factors: Tuple[str, ...] = ()
