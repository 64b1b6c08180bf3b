"""End-to-end tests for the fraud assessment orchestrator."""

import asyncio
import json
import math
from decimal import Decimal

import pytest

from conftest import (
    FakeDocumentBackend,
    FakeNarrativeBackend,
    FakeTextBackend,
    make_claim,
    make_docs,
    make_orchestrator,
)
from fraud_engine.models.assessment import Recommendation, RiskLevel
from fraud_engine.models.claim import ClaimContext, DocumentRef, UserHistory
from fraud_engine.models.judgment import DocumentJudgment, PatternFindings, TextJudgment
from fraud_engine.orchestration.assessor import compose_risk_factors, validate_claim
from fraud_engine.utils.errors import ErrorType, InvalidInputError
from fraud_engine.utils.logging import get_context


@pytest.mark.asyncio
async def test_clean_claim_is_approved():
    orchestrator = make_orchestrator()
    result = await orchestrator.assess(make_claim(amount=15_000, documents=make_docs(2)))

    # text 0.1 -> 3 points
    assert result.risk_score == 3
    assert result.risk_level == RiskLevel.LOW
    assert result.recommendation == Recommendation.APPROVE
    assert result.confidence == 0.9
    assert result.risk_factors == ()
    assert [d.document_id for d in result.document_judgments] == ["doc-1", "doc-2"]
    assert result.narrative == "Risk score of 3/100 indicates LOW risk. APPROVE is recommended."


@pytest.mark.asyncio
async def test_all_analyzers_time_out():
    orchestrator = make_orchestrator(
        document_backend=FakeDocumentBackend(delay=0.5),
        text_backend=FakeTextBackend(delay=0.5),
        narrative_backend=FakeNarrativeBackend(delay=0.5),
        timeout=0.01,
    )
    result = await orchestrator.assess(make_claim(amount=10_000, documents=make_docs(2)))

    assert result.risk_score == 9
    assert result.risk_level == RiskLevel.LOW
    assert result.recommendation == Recommendation.APPROVE
    assert all(d.is_authentic and d.confidence == 0.5 and d.degraded for d in result.document_judgments)
    assert result.text_judgment.suspicion_score == 0.3
    assert result.risk_factors == ("document analysis unavailable", "text analysis unavailable")
    assert result.narrative == "Risk score of 9/100 indicates LOW risk. APPROVE is recommended."


@pytest.mark.asyncio
async def test_forged_document_forces_reject_at_low_score():
    docs = make_docs(2)
    backend = FakeDocumentBackend({
        docs[1].locator: {"isAuthentic": True, "confidence": 0.9, "tags": ["manipulated"]},
    })
    result = await make_orchestrator(document_backend=backend).assess(make_claim(amount=5_000, documents=docs))

    assert result.risk_score == 23
    assert result.risk_level == RiskLevel.LOW
    assert result.recommendation == Recommendation.REJECT
    assert result.risk_factors == (
        "Document doc-2 authenticity issues",
        "Potential digital manipulation detected",
    )


@pytest.mark.asyncio
async def test_high_risk_claim_combines_every_signal():
    text = FakeTextBackend({
        "suspicionScore": 0.5,
        "inconsistencies": ["Reported time conflicts with police report"],
        "suspiciousPatterns": ["Urgent payout request", "Multiple recent claims"],
    })
    ctx = make_claim(
        amount=30_000,
        documents=make_docs(1),
        history=UserHistory(total_claims=8, recent_claims=4, rejected_claims=1),
        date_of_loss="2025-04-01",
    )
    result = await make_orchestrator(text_backend=text, narrative_backend=FakeNarrativeBackend("Escalate.")).assess(ctx)

    # 10 amount + 15 text + 30 patterns + 35 history
    assert dict(result.score_breakdown) == {
        "amount": 10, "documents": 0, "text": 15, "patterns": 30, "history": 35,
    }
    assert result.risk_score == 90
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.recommendation == Recommendation.REJECT
    assert result.narrative == "Escalate."
    assert result.risk_factors == (
        "Multiple recent claims",
        "Previous rejected claims",
        "Late claim reporting (>30 days)",
        "Urgent payout request",
    )


@pytest.mark.asyncio
async def test_assessment_is_deterministic():
    orchestrator = make_orchestrator(
        document_backend=FakeDocumentBackend(default=RuntimeError("down")),
        text_backend=FakeTextBackend(RuntimeError("down")),
    )
    ctx = make_claim(amount=60_000, documents=make_docs(3), history=UserHistory(recent_claims=2))
    results = [await orchestrator.assess(ctx) for _ in range(3)]
    assert all(r == results[0] for r in results)


@pytest.mark.asyncio
async def test_documents_and_text_run_concurrently():
    started = set()
    everyone = asyncio.Event()
    docs = make_docs(3)

    async def arrive(name):
        started.add(name)
        if len(started) == len(docs) + 1:
            everyone.set()
        await everyone.wait()

    class Docs(FakeDocumentBackend):
        async def analyze(self, document_locator):
            await arrive(document_locator)
            return {"isAuthentic": True, "confidence": 0.9}

    class Text(FakeTextBackend):
        async def analyze(self, prompt):
            await arrive("text")
            return {"suspicionScore": 0.2}

    result = await make_orchestrator(document_backend=Docs(), text_backend=Text()).assess(
        make_claim(documents=docs)
    )
    assert not result.text_judgment.degraded
    assert not any(d.degraded for d in result.document_judgments)


@pytest.mark.asyncio
async def test_analyzer_calls_log_with_claim_and_component():
    seen = {}

    class Docs(FakeDocumentBackend):
        async def analyze(self, document_locator):
            seen["document"] = get_context()
            return await super().analyze(document_locator)

    class Text(FakeTextBackend):
        async def analyze(self, prompt):
            seen["text"] = get_context()
            return await super().analyze(prompt)

    class Narrative(FakeNarrativeBackend):
        async def generate(self, prompt):
            seen["narrative"] = get_context()
            return await super().generate(prompt)

    orchestrator = make_orchestrator(document_backend=Docs(), text_backend=Text(), narrative_backend=Narrative())
    await orchestrator.assess(make_claim(documents=make_docs(1), claim_id="CLM-77"))

    assert seen == {
        "document": {"claim_id": "CLM-77", "component": "document-analyzer"},
        "text": {"claim_id": "CLM-77", "component": "text-analyzer"},
        "narrative": {"claim_id": "CLM-77", "component": "narrative"},
    }
    assert get_context() == {}


@pytest.mark.asyncio
async def test_cancellation_abandons_assessment():
    orchestrator = make_orchestrator(document_backend=FakeDocumentBackend(delay=5), timeout=10)
    task = asyncio.ensure_future(orchestrator.assess(make_claim(documents=make_docs(2))))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
@pytest.mark.parametrize("changes,field", [
    ({"claim_id": ""}, "claim_id"),
    ({"claim_id": "   "}, "claim_id"),
    ({"amount": -1}, "amount"),
    ({"amount": math.inf}, "amount"),
    ({"amount": "100"}, "amount"),
    ({"amount": Decimal("NaN")}, "amount"),
    ({"amount": Decimal("-0.01")}, "amount"),
    ({"description": None}, "description"),
    ({"history": UserHistory(recent_claims=-2)}, "history.recent_claims"),
    ({"documents": (DocumentRef(id="", type="photo", locator="x"),)}, "documents[0]"),
])
async def test_invalid_input_fails_before_any_analyzer(changes, field):
    documents = FakeDocumentBackend()
    text = FakeTextBackend()
    orchestrator = make_orchestrator(document_backend=documents, text_backend=text)
    fields = dict(
        claim_id="CLM-9", claim_type="home", amount=1_000, date_of_loss="2025-06-01",
        description="Pipe burst.", documents=tuple(make_docs(1)), history=UserHistory(),
    )
    fields.update(changes)

    with pytest.raises(InvalidInputError) as excinfo:
        await orchestrator.assess(ClaimContext(**fields))

    assert excinfo.value.context.error_type == ErrorType.INVALID_INPUT
    assert excinfo.value.context.details == {"field": field}
    assert documents.calls == []
    assert text.prompts == []


@pytest.mark.asyncio
async def test_verdict_without_authenticity_or_confidence_forces_reject():
    docs = make_docs(1)
    backend = FakeDocumentBackend({docs[0].locator: {"tags": []}})
    result = await make_orchestrator(document_backend=backend).assess(make_claim(amount=5_000, documents=docs))

    # 20 documents + 3 text
    assert result.risk_score == 23
    assert result.recommendation == Recommendation.REJECT
    assert result.risk_factors == ("Document doc-1 authenticity issues",)


def test_empty_description_is_valid():
    validate_claim(make_claim(description=""))


@pytest.mark.asyncio
async def test_decimal_amount_is_scored_like_a_float():
    result = await make_orchestrator().assess(make_claim(amount=Decimal("30000.00")))
    # 10 amount + 3 text
    assert result.risk_score == 13
    assert dict(result.score_breakdown)["amount"] == 10

    high = await make_orchestrator().assess(make_claim(amount=Decimal("100000.01")))
    assert "High claim amount (>100,000)" in high.risk_factors


def test_decimal_amount_from_payload():
    payload = json.loads(
        '{"claimId": "CLM-7", "claimType": "motor", "amountClaimed": 1250.50, "description": "Dent."}',
        parse_float=Decimal,
    )
    ctx = ClaimContext.from_dict(payload)
    assert ctx.amount == Decimal("1250.50")
    validate_claim(ctx)


@pytest.mark.asyncio
async def test_check_document_and_text():
    orchestrator = make_orchestrator(text_backend=FakeTextBackend({"suspicionScore": 0.65}))
    judgment = await orchestrator.check_document(DocumentRef(id="tmp", type="id", locator="/x.jpg"))
    assert judgment.document_id == "tmp"
    assert judgment.is_authentic

    text = await orchestrator.check_text("Car stolen from locked garage.", "motor")
    assert text.suspicion_score == 0.65

    with pytest.raises(InvalidInputError):
        await orchestrator.check_text("   ")


def test_assess_history_validates():
    orchestrator = make_orchestrator()
    assert orchestrator.assess_history(UserHistory(recent_claims=5)).risk_score == 45
    with pytest.raises(InvalidInputError):
        orchestrator.assess_history(UserHistory(rejected_claims=-1))


def test_compose_risk_factors_deduplicates_in_order():
    docs = [
        DocumentJudgment("a", False, True, 0.9, ("Potential digital manipulation detected",)),
        DocumentJudgment("b", True, False, 0.5, ("document analysis unavailable",), degraded=True),
        DocumentJudgment("c", False, True, 0.9, ("Potential digital manipulation detected",)),
    ]
    factors = compose_risk_factors(
        PatternFindings(("Previous rejected claims",)),
        TextJudgment(0.3, (), ("Previous rejected claims", "Rehearsed wording")),
        docs,
    )
    assert factors == (
        "Previous rejected claims",
        "Rehearsed wording",
        "Document a authenticity issues",
        "Document c authenticity issues",
        "Potential digital manipulation detected",
        "document analysis unavailable",
    )


@pytest.mark.asyncio
async def test_result_wire_format():
    result = await make_orchestrator().assess(make_claim(documents=make_docs(1)))
    data = result.to_dict()
    assert data["riskLevel"] == "LOW"
    assert data["recommendation"] == "APPROVE"
    assert data["documentAnalysis"] == [{
        "documentId": "doc-1", "isAuthentic": True, "tamperingDetected": False,
        "confidence": 0.9, "issues": [],
    }]
    assert data["textAnalysis"] == {"sentiment": 0.1, "inconsistencies": [], "suspiciousPatterns": []}
    assert data["aiRecommendation"] == result.narrative
    assert data["scoreBreakdown"]["text"] == 3
