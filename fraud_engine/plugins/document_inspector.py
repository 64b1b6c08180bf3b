"""Document authenticity backend using AWS Bedrock Nova Pro vision."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import boto3
from semantic_kernel.functions import kernel_function

from ..analyzers.base import DocumentAnalysisBackend
from ..utils.bedrock_client import BedrockClient
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)

INSPECTION_PROMPT = """You are a document forensics assistant for an insurance fraud team.

Inspect this claim document (photo, scan or PDF) for signs that it is not genuine:
edited or pasted text regions, inconsistent fonts or alignment, cloned areas,
mismatched lighting or shadows, altered dates or amounts, screenshots of other
documents, and generic stock imagery.

Return your analysis as a JSON object with this structure:
{
    "isAuthentic": true,
    "tamperingDetected": false,
    "confidence": 0.85,
    "tags": ["short visual tags describing the document, e.g. invoice, edited, handwritten"],
    "issues": ["specific problem found, if any"]
}

confidence is between 0.0 and 1.0 and reflects how sure you are of the verdict.
Return ONLY the JSON object, no additional text."""


class BedrockDocumentInspector(DocumentAnalysisBackend):
    """
    Asks Nova Pro whether a claim document looks tampered with.

    Documents are referenced by locator: a local path or ``s3://bucket/key``.
    """

    def __init__(self, bedrock_client: BedrockClient, s3_client: Optional[Any] = None):
        """
        Initialize document inspector.

        Args:
            bedrock_client: Configured BedrockClient instance
            s3_client: Optional boto3 S3 client for s3:// locators
        """
        self.bedrock = bedrock_client
        self._s3 = s3_client
        logger.info("Initialized BedrockDocumentInspector")

    @kernel_function(
        name="inspect_document",
        description=(
            "Inspect a claim document for signs of digital manipulation. "
            "Returns authenticity, tampering flag, confidence, visual tags and issues."
        )
    )
    async def analyze(self, document_locator: str) -> Dict[str, Any]:
        """
        Inspect one document.

        Args:
            document_locator: Local path or s3://bucket/key of the document

        Returns:
            Verdict payload with isAuthentic, tamperingDetected, confidence, tags, issues

        Raises:
            ValueError: If the locator is empty or the model reply has no JSON verdict
            BedrockAPIError: If the Bedrock call fails
        """
        start_time = time.time()
        content = await self._load(document_locator)
        name = document_locator.rsplit("/", 1)[-1] or "document"

        messages = [
            {
                "role": "user",
                "content": [
                    self._content_block(content, name),
                    {"text": INSPECTION_PROMPT},
                ]
            }
        ]

        response = await self.bedrock.converse(messages=messages, temperature=0.0, max_tokens=1024)
        verdict = ResponseFormatter.extract_json_from_response(response.get("text", ""))
        if verdict is None:
            raise ValueError(f"No JSON verdict in model reply for {name}")

        logger.debug(f"Inspected {name} ({len(content)} bytes) in {time.time() - start_time:.3f}s")
        return verdict

    async def _load(self, locator: str) -> bytes:
        if not locator:
            raise ValueError("Document locator is empty")

        if locator.startswith("s3://"):
            bucket, key = parse_s3_locator(locator)
            if self._s3 is None:
                self._s3 = boto3.client("s3", region_name=self.bedrock.region)
            response = await asyncio.to_thread(self._s3.get_object, Bucket=bucket, Key=key)
            return await asyncio.to_thread(response["Body"].read)

        return await asyncio.to_thread(Path(locator).read_bytes)

    def _content_block(self, content: bytes, name: str) -> Dict[str, Any]:
        # boto3's converse API expects raw bytes, not base64-encoded strings
        if content.startswith(b"%PDF"):
            return {"document": {"format": "pdf", "name": _document_name(name), "source": {"bytes": content}}}
        return {"image": {"format": detect_image_format(content), "source": {"bytes": content}}}


def parse_s3_locator(locator: str) -> Tuple[str, str]:
    """Split ``s3://bucket/key`` into bucket and key."""
    bucket, _, key = locator[len("s3://"):].partition("/")
    if not bucket or not key:
        raise ValueError(f"Malformed S3 locator: {locator!r}")
    return bucket, key


def detect_image_format(image_bytes: bytes) -> str:
    """
    Detect image format from magic bytes.

    Returns:
        Format string ("jpeg", "png", "gif", "webp")
    """
    if image_bytes.startswith(b'\xff\xd8\xff'):
        return "jpeg"
    if image_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "png"
    if image_bytes.startswith(b'GIF87a') or image_bytes.startswith(b'GIF89a'):
        return "gif"
    if image_bytes.startswith(b'RIFF') and b'WEBP' in image_bytes[:12]:
        return "webp"
    logger.warning("Unknown image format, defaulting to JPEG")
    return "jpeg"


def _document_name(name: str) -> str:
    # Converse document names allow only alphanumerics, spaces, hyphens, parentheses and brackets
    stem = name.rsplit(".", 1)[0]
    cleaned = "".join(ch if ch.isalnum() or ch in " -()[]" else "-" for ch in stem)
    return cleaned or "document"
