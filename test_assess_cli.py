"""Tests for the command-line runner and orchestrator wiring."""

import json

import pytest

import fraud_engine.assess as assess
from conftest import FakeTextBackend, make_orchestrator
from fraud_engine.utils.config import Config
from fraud_engine.utils.errors import InvalidInputError

CONFIG_YAML = """
aws:
  region: us-east-1
  bedrock:
    model_id: amazon.nova-pro-v1:0
analyzers:
  timeout: 1
logging:
  level: WARNING
  file: ""
"""

CLAIM = {
    "claimId": "CLM-42",
    "claimType": "property",
    "amountClaimed": 150000,
    "dateOfLoss": "2025-06-25",
    "description": "Kitchen fire after a pan was left on the stove.",
    "location": "Durban",
    "documents": [{"id": "photo-1", "type": "photo", "url": "/claims/photo-1.jpg"}],
    "userHistory": {"totalClaims": 1, "recentClaims": 0, "rejectedClaims": 0, "averageClaimAmount": 5000},
}


class FakeBedrock:
    region = "us-east-1"

    async def converse(self, messages, temperature=0.0, max_tokens=1024, system_prompts=None):
        return {"text": '{"suspicionScore": 0.2}'}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def cli(monkeypatch):
    built = []

    def fake_build(config, bedrock_client=None):
        built.append(config)
        return make_orchestrator()

    monkeypatch.setattr(assess, "build_orchestrator", fake_build)
    monkeypatch.setattr(assess, "setup_logging", lambda **kwargs: None)
    for name in ("AWS_REGION", "BEDROCK_MODEL_ID", "FRAUD_ANALYZER_TIMEOUT", "FRAUD_NARRATIVE_ENABLED", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return built


def write_claim(tmp_path, claim):
    path = tmp_path / "claim.json"
    path.write_text(json.dumps(claim))
    return str(path)


def test_prints_assessment(tmp_path, config_file, cli, capsys):
    code = assess.main([write_claim(tmp_path, CLAIM), "--config", str(config_file)])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    # 25 amount + 3 text + 10 high-amount pattern
    assert output["riskScore"] == 38
    assert output["riskLevel"] == "LOW"
    assert output["recommendation"] == "APPROVE"
    assert output["riskFactors"] == ["High claim amount (>100,000)"]
    assert output["documentAnalysis"][0]["documentId"] == "photo-1"


def test_no_narrative_flag_disables_generator(tmp_path, config_file, cli):
    assess.main([write_claim(tmp_path, CLAIM), "--config", str(config_file), "--no-narrative"])
    assert cli[0].analyzers.narrative_enabled is False


def test_invalid_claim_exits_2(tmp_path, config_file, cli, capsys):
    claim = dict(CLAIM, amountClaimed=-10)
    assert assess.main([write_claim(tmp_path, claim), "--config", str(config_file)]) == 2
    assert capsys.readouterr().out == ""


def test_unreadable_claim_exits_2(tmp_path, config_file, cli):
    path = tmp_path / "claim.json"
    path.write_text("{not json")
    assert assess.main([str(path), "--config", str(config_file)]) == 2
    assert assess.main([str(tmp_path / "missing.json"), "--config", str(config_file)]) == 2


def test_missing_config_exits_1(tmp_path, cli):
    assert assess.main([write_claim(tmp_path, CLAIM), "--config", str(tmp_path / "nope.yaml")]) == 1


def test_malformed_config_exits_1(tmp_path, cli):
    path = tmp_path / "config.yaml"
    path.write_text("aws: [unclosed\n")
    assert assess.main([write_claim(tmp_path, CLAIM), "--config", str(path)]) == 1


def test_run_assessment_parses_payload():
    orchestrator = make_orchestrator(text_backend=FakeTextBackend({"suspicionScore": 0.0}))
    result = assess.run_assessment(dict(CLAIM, amountClaimed=1000, documents=[]), orchestrator)
    assert result.risk_score == 0
    with pytest.raises(InvalidInputError):
        assess.run_assessment(dict(CLAIM, amountClaimed="lots"), orchestrator)


def test_build_orchestrator_wires_bedrock_backends(config_file, monkeypatch):
    monkeypatch.delenv("FRAUD_NARRATIVE_ENABLED", raising=False)
    monkeypatch.delenv("FRAUD_ANALYZER_TIMEOUT", raising=False)
    config = Config.load(str(config_file))
    orchestrator = assess.build_orchestrator(config, bedrock_client=FakeBedrock())

    assert orchestrator.text_analyzer.timeout == 1.0
    assert orchestrator.narrative_generator.enabled is True
    assert orchestrator.document_analyzer.backend.bedrock is orchestrator.text_analyzer.backend.bedrock


def test_claim_payload_parsing_errors():
    from fraud_engine.models.claim import ClaimContext

    with pytest.raises(InvalidInputError):
        ClaimContext.from_dict(["not", "a", "dict"])
    with pytest.raises(InvalidInputError) as excinfo:
        ClaimContext.from_dict(dict(CLAIM, userHistory={"recentClaims": "many"}))
    assert excinfo.value.context.details == {"field": "userHistory"}

    ctx = ClaimContext.from_dict(dict(CLAIM, documents=[{"id": "d", "type": "invoice", "locator": "s3://b/k.pdf"}]))
    assert ctx.documents[0].locator == "s3://b/k.pdf"
    assert ctx.history.average_claim_amount == 5000.0
    assert ctx.metadata() == {
        "claim_type": "property", "amount": 150000.0, "date_of_loss": "2025-06-25", "location": "Durban",
    }
