"""Adjuster narrative backend using AWS Bedrock."""

import logging

from semantic_kernel.functions import kernel_function

from ..analyzers.base import NarrativeBackend
from ..utils.bedrock_client import BedrockClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write concise, neutral recommendations for insurance adjusters. "
    "Never accuse the claimant; describe risk drivers and next steps."
)


class BedrockNarrativeWriter(NarrativeBackend):
    """Generates the free-text recommendation attached to an assessment."""

    def __init__(self, bedrock_client: BedrockClient, temperature: float = 0.5):
        self.bedrock = bedrock_client
        self.temperature = temperature
        logger.info("Initialized BedrockNarrativeWriter")

    @kernel_function(
        name="write_fraud_narrative",
        description="Write a short adjuster-facing explanation of a fraud risk assessment."
    )
    async def generate(self, prompt: str) -> str:
        response = await self.bedrock.converse(
            messages=[{"role": "user", "content": [{"text": prompt}]}],
            system_prompts=[{"text": SYSTEM_PROMPT}],
            temperature=self.temperature,
            max_tokens=200,
        )
        return response.get("text", "")
