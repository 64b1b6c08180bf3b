"""Backend interfaces the analyzers depend on."""

from abc import ABC, abstractmethod
from typing import Dict, Any


class DocumentAnalysisBackend(ABC):
    """
    Service that inspects one document for authenticity.

    ``analyze`` returns a payload with any of the keys ``isAuthentic``,
    ``tamperingDetected``, ``confidence``, ``tags`` and ``issues``. Any
    exception it raises is treated as the analyzer being unavailable.
    """

    @abstractmethod
    async def analyze(self, document_locator: str) -> Dict[str, Any]:
        pass


class TextAnalysisBackend(ABC):
    """
    Service that judges a claim narrative.

    ``analyze`` returns a payload with ``suspicionScore``,
    ``inconsistencies`` and ``suspiciousPatterns``.
    """

    @abstractmethod
    async def analyze(self, prompt: str) -> Dict[str, Any]:
        pass


class NarrativeBackend(ABC):
    """Service that writes the adjuster-facing explanation."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        pass
