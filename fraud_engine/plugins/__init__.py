"""Bedrock-backed analyzer backends exposed as Semantic Kernel functions."""

from .document_inspector import BedrockDocumentInspector
from .claim_text_reviewer import BedrockClaimTextReviewer
from .narrative_writer import BedrockNarrativeWriter

__all__ = [
    'BedrockDocumentInspector',
    'BedrockClaimTextReviewer',
    'BedrockNarrativeWriter'
]
