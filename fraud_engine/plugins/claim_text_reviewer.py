"""Claim narrative backend using AWS Bedrock."""

import logging
from typing import Any, Dict

from semantic_kernel.functions import kernel_function

from ..analyzers.base import TextAnalysisBackend
from ..utils.bedrock_client import BedrockClient
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an insurance fraud analyst. You judge claim narratives for "
    "suspicious wording and internal inconsistencies, and you answer only "
    "with the JSON object requested."
)


class BedrockClaimTextReviewer(TextAnalysisBackend):
    """Sends the narrative prompt to the model and returns its JSON verdict."""

    def __init__(self, bedrock_client: BedrockClient):
        self.bedrock = bedrock_client
        logger.info("Initialized BedrockClaimTextReviewer")

    @kernel_function(
        name="review_claim_text",
        description=(
            "Review an insurance claim description for fraud indicators. "
            "Returns suspicionScore, inconsistencies and suspiciousPatterns."
        )
    )
    async def analyze(self, prompt: str) -> Dict[str, Any]:
        """
        Review a claim narrative.

        Args:
            prompt: Fully built analysis prompt

        Returns:
            Verdict payload with suspicionScore, inconsistencies, suspiciousPatterns

        Raises:
            ValueError: If the model reply has no JSON verdict
            BedrockAPIError: If the Bedrock call fails
        """
        response = await self.bedrock.converse(
            messages=[{"role": "user", "content": [{"text": prompt}]}],
            system_prompts=[{"text": SYSTEM_PROMPT}],
            temperature=0.0,
            max_tokens=500,
        )

        verdict = ResponseFormatter.extract_json_from_response(response.get("text", ""))
        if verdict is None:
            raise ValueError("No JSON verdict in model reply for claim text")
        return verdict
