"""Shared fakes and fixtures for the fraud engine tests."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from fraud_engine.analyzers.base import DocumentAnalysisBackend, NarrativeBackend, TextAnalysisBackend
from fraud_engine.analyzers.document_analyzer import DocumentAuthenticityAnalyzer
from fraud_engine.analyzers.narrative import NarrativeGenerator
from fraud_engine.analyzers.text_analyzer import TextConsistencyAnalyzer
from fraud_engine.models.claim import ClaimContext, DocumentRef, UserHistory
from fraud_engine.orchestration.assessor import FraudAssessmentOrchestrator

FIXED_NOW = datetime(2025, 6, 30, 12, 0, tzinfo=timezone.utc)


class FakeDocumentBackend(DocumentAnalysisBackend):
    """Returns canned payloads per locator; an Exception value is raised instead."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None, delay: float = 0.0):
        self.responses = responses or {}
        self.default = default if default is not None else {
            "isAuthentic": True, "tamperingDetected": False, "confidence": 0.9, "tags": []
        }
        self.delay = delay
        self.calls: List[str] = []

    async def analyze(self, document_locator: str) -> Dict[str, Any]:
        self.calls.append(document_locator)
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self.responses.get(document_locator, self.default)
        if isinstance(response, Exception):
            raise response
        return response


class FakeTextBackend(TextAnalysisBackend):
    def __init__(self, response: Any = None, delay: float = 0.0):
        self.response = response if response is not None else {
            "suspicionScore": 0.1, "inconsistencies": [], "suspiciousPatterns": []
        }
        self.delay = delay
        self.prompts: List[str] = []

    async def analyze(self, prompt: str) -> Dict[str, Any]:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeNarrativeBackend(NarrativeBackend):
    def __init__(self, response: Any = "Generated narrative.", delay: float = 0.0):
        self.response = response
        self.delay = delay
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def make_claim(
    amount: float = 10_000,
    documents=(),
    history: Optional[UserHistory] = None,
    date_of_loss: Any = "2025-06-20",
    description: str = "Rear-ended at a traffic light, bumper and tail light damaged.",
    claim_id: str = "CLM-001",
) -> ClaimContext:
    return ClaimContext(
        claim_id=claim_id,
        claim_type="motor",
        amount=amount,
        date_of_loss=date_of_loss,
        description=description,
        location="Cape Town",
        documents=tuple(documents),
        history=history or UserHistory(),
    )


def make_docs(count: int):
    return [DocumentRef(id=f"doc-{i}", type="photo", locator=f"/claims/doc-{i}.jpg") for i in range(1, count + 1)]


def make_orchestrator(
    document_backend=None,
    text_backend=None,
    narrative_backend=None,
    timeout: float = 1.0,
) -> FraudAssessmentOrchestrator:
    return FraudAssessmentOrchestrator(
        document_analyzer=DocumentAuthenticityAnalyzer(document_backend or FakeDocumentBackend(), timeout=timeout),
        text_analyzer=TextConsistencyAnalyzer(text_backend or FakeTextBackend(), timeout=timeout),
        narrative_generator=NarrativeGenerator(narrative_backend, timeout=timeout),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def claim():
    return make_claim()
