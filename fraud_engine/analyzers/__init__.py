"""Signal analyzers: heuristic patterns, documents, narrative text and explanations."""

from .base import DocumentAnalysisBackend, TextAnalysisBackend, NarrativeBackend
from .pattern_analyzer import analyze_patterns
from .document_analyzer import DocumentAuthenticityAnalyzer
from .text_analyzer import TextConsistencyAnalyzer
from .narrative import NarrativeGenerator

__all__ = [
    "DocumentAnalysisBackend",
    "TextAnalysisBackend",
    "NarrativeBackend",
    "analyze_patterns",
    "DocumentAuthenticityAnalyzer",
    "TextConsistencyAnalyzer",
    "NarrativeGenerator",
]
