"""
Entry points for running fraud assessments.

``build_orchestrator`` wires Bedrock-backed analyzers from a Config;
``run_assessment`` is the synchronous convenience wrapper for callers
outside an event loop; ``main`` is the command-line runner.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from .analyzers.document_analyzer import DocumentAuthenticityAnalyzer
from .analyzers.narrative import NarrativeGenerator
from .analyzers.text_analyzer import TextConsistencyAnalyzer
from .models.assessment import FraudAnalysisResult
from .models.claim import ClaimContext
from .orchestration.assessor import FraudAssessmentOrchestrator
from .plugins.claim_text_reviewer import BedrockClaimTextReviewer
from .plugins.document_inspector import BedrockDocumentInspector
from .plugins.narrative_writer import BedrockNarrativeWriter
from .utils.bedrock_client import BedrockClient
from .utils.config import Config
from .utils.errors import ConfigurationError, InvalidInputError
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_orchestrator(
    config: Config,
    bedrock_client: Optional[BedrockClient] = None
) -> FraudAssessmentOrchestrator:
    """
    Construct an orchestrator with Bedrock-backed analyzers.

    Args:
        config: Loaded configuration
        bedrock_client: Optional shared client (built from config if omitted)

    Returns:
        Ready-to-use FraudAssessmentOrchestrator
    """
    bedrock = bedrock_client or BedrockClient(
        region=config.aws_region,
        model_id=config.bedrock.model_id,
        timeout=config.bedrock.timeout,
        max_retries=config.bedrock.max_retries,
    )

    analyzers = config.analyzers
    return FraudAssessmentOrchestrator(
        document_analyzer=DocumentAuthenticityAnalyzer(
            BedrockDocumentInspector(bedrock), timeout=analyzers.timeout
        ),
        text_analyzer=TextConsistencyAnalyzer(
            BedrockClaimTextReviewer(bedrock), timeout=analyzers.timeout
        ),
        narrative_generator=NarrativeGenerator(
            BedrockNarrativeWriter(bedrock),
            timeout=analyzers.narrative_timeout,
            enabled=analyzers.narrative_enabled,
        ),
    )


def run_assessment(
    claim: Dict[str, Any],
    orchestrator: FraudAssessmentOrchestrator
) -> FraudAnalysisResult:
    """
    Assess a claim payload synchronously.

    Args:
        claim: Claim in the camelCase request format
        orchestrator: Orchestrator to run the assessment with

    Returns:
        FraudAnalysisResult

    Raises:
        InvalidInputError: If the payload is malformed
    """
    ctx = ClaimContext.from_dict(claim)
    return asyncio.run(orchestrator.assess(ctx))


def main(argv: Optional[list] = None) -> int:
    """Command-line runner: assess one claim JSON file and print the result."""
    parser = argparse.ArgumentParser(description="Assess an insurance claim for fraud risk.")
    parser.add_argument("claim_file", help="Path to a claim JSON file")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--no-narrative", action="store_true", help="Use the template narrative only")
    args = parser.parse_args(argv)

    try:
        config = Config.load(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.no_narrative:
        config.analyzers.narrative_enabled = False

    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file or None,
    )

    try:
        with open(args.claim_file, "r") as f:
            claim = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read claim file {args.claim_file}: {e}")
        return 2

    try:
        result = run_assessment(claim, build_orchestrator(config))
    except InvalidInputError as e:
        logger.error(f"Claim rejected: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Assessment interrupted by user")
        return 130

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
