"""AWS Bedrock client wrapper for the Converse API."""

import asyncio
import logging
import os
from typing import Dict, List, Optional, Any

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .errors import BedrockAPIError, ErrorType, ErrorContext

logger = logging.getLogger(__name__)


class BedrockClient:
    """
    Wrapper for the AWS Bedrock Runtime client.

    The boto3 call is blocking, so it runs in a worker thread; several
    analyzer calls can then be in flight at once on one event loop.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        model_id: str = "amazon.nova-pro-v1:0",
        timeout: int = 60,
        max_retries: int = 1,
        runtime: Optional[Any] = None
    ):
        """
        Initialize Bedrock client.

        Args:
            region: AWS region for Bedrock service
            model_id: Model ID used for Converse calls
            timeout: Connect/read timeout in seconds
            max_retries: Maximum number of attempts per call
            runtime: Optional pre-built bedrock-runtime client
        """
        self.region = region
        self.model_id = model_id
        self.max_retries = max_retries

        # botocore loads the key from AWS_BEARER_TOKEN_BEDROCK; only the signer is set here
        bearer_token = os.getenv("AWS_BEARER_TOKEN_BEDROCK")

        if runtime is not None:
            self.runtime = runtime
        else:
            config_kwargs: Dict[str, Any] = {
                "region_name": region,
                "connect_timeout": timeout,
                "read_timeout": timeout,
                "retries": {"max_attempts": 0},  # We handle retries manually
            }
            if bearer_token:
                config_kwargs["signature_version"] = "bearer"
            self.runtime = boto3.client("bedrock-runtime", config=Config(**config_kwargs))

        logger.info(
            f"Initialized BedrockClient: region={region}, "
            f"model={model_id}, max_retries={max_retries}, "
            f"auth={'api-key' if bearer_token else 'iam'}"
        )

    async def converse(
        self,
        messages: List[Dict[str, Any]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
        system_prompts: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Invoke the configured model via the Converse API.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0.0 = deterministic)
            max_tokens: Maximum tokens to generate
            system_prompts: Optional system prompts

        Returns:
            Dict containing 'text', 'content', 'stop_reason' and 'usage'

        Raises:
            BedrockAPIError: If every attempt fails
        """
        params: Dict[str, Any] = {
            "modelId": self.model_id,
            "messages": messages,
            "inferenceConfig": {
                "temperature": temperature,
                "maxTokens": max_tokens
            }
        }
        if system_prompts:
            params["system"] = system_prompts

        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Invoking {self.model_id} (attempt {attempt + 1}/{self.max_retries})")

                response = await asyncio.to_thread(self.runtime.converse, **params)

                logger.debug(
                    f"Converse call successful: "
                    f"stop_reason={response.get('stopReason')}, "
                    f"usage={response.get('usage')}"
                )
                return self._parse_converse_response(response)

            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "Unknown")
                error_message = e.response.get("Error", {}).get("Message", str(e))

                logger.warning(
                    f"Bedrock API error (attempt {attempt + 1}/{self.max_retries}): "
                    f"code={error_code}, message={error_message}"
                )

                if self._is_retryable_error(error_code) and attempt < self.max_retries - 1:
                    # Exponential backoff: 1s, 2s, 4s, ...
                    wait_time = 2 ** attempt
                    logger.info(f"Retrying in {wait_time} seconds...")
                    await asyncio.sleep(wait_time)
                    continue

                raise BedrockAPIError.from_client_error(
                    error=e,
                    operation="converse",
                    fallback_action="Use fallback judgment"
                )

            except Exception as e:
                logger.error(f"Unexpected error invoking {self.model_id}: {str(e)}")
                raise BedrockAPIError(ErrorContext(
                    error_type=ErrorType.BEDROCK_SERVICE_ERROR,
                    message=f"Unexpected error invoking {self.model_id}: {str(e)}",
                    recoverable=True,
                    fallback_action="Use fallback judgment",
                    original_exception=e
                ))

        raise BedrockAPIError(ErrorContext(
            error_type=ErrorType.BEDROCK_SERVICE_ERROR,
            message=f"Failed to invoke {self.model_id} after {self.max_retries} attempts",
            recoverable=True
        ))

    def _parse_converse_response(self, response: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten a Converse API response into text plus metadata."""
        message = response.get("output", {}).get("message", {})
        content = message.get("content", [])

        text_parts = [block["text"] for block in content if isinstance(block, dict) and "text" in block]

        return {
            "content": content,
            "text": "\n".join(text_parts),
            "stop_reason": response.get("stopReason", "unknown"),
            "usage": response.get("usage", {}),
        }

    def _is_retryable_error(self, error_code: str) -> bool:
        retryable_errors = {
            "ThrottlingException",
            "TooManyRequestsException",
            "ServiceUnavailableException",
            "InternalServerException",
            "RequestTimeout",
            "RequestTimeoutException"
        }
        return error_code in retryable_errors
