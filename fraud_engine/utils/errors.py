"""Error handling utilities for the fraud assessment engine."""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


class ErrorType(Enum):
    """Enumeration of error types in the fraud assessment engine."""

    # Input Errors
    INVALID_INPUT = "INVALID_INPUT"

    # Bedrock API Errors
    BEDROCK_RATE_LIMIT = "BEDROCK_RATE_LIMIT"
    BEDROCK_TIMEOUT = "BEDROCK_TIMEOUT"
    BEDROCK_AUTH_ERROR = "BEDROCK_AUTH_ERROR"
    BEDROCK_MODEL_ERROR = "BEDROCK_MODEL_ERROR"
    BEDROCK_INVALID_REQUEST = "BEDROCK_INVALID_REQUEST"
    BEDROCK_SERVICE_ERROR = "BEDROCK_SERVICE_ERROR"

    # Analyzer Errors
    DOCUMENT_ANALYSIS_FAILED = "DOCUMENT_ANALYSIS_FAILED"
    TEXT_ANALYSIS_FAILED = "TEXT_ANALYSIS_FAILED"
    NARRATIVE_GENERATION_FAILED = "NARRATIVE_GENERATION_FAILED"
    ANALYZER_TIMEOUT = "ANALYZER_TIMEOUT"

    # Scoring Errors
    AGGREGATION_FAILED = "AGGREGATION_FAILED"

    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # General Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass
class ErrorContext:
    """
    Context information for errors in the fraud assessment engine.

    Attributes:
        error_type: Type of error from ErrorType enum
        message: Human-readable error message
        recoverable: Whether the assessment can continue past the error
        fallback_action: Optional description of fallback action taken
        details: Optional additional error details
        original_exception: Optional original exception that caused this error
    """

    error_type: ErrorType
    message: str
    recoverable: bool
    fallback_action: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    original_exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary for logging/serialization.

        Returns:
            Dictionary representation of error context
        """
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "recoverable": self.recoverable,
            "fallback_action": self.fallback_action,
            "details": self.details or {},
            "original_exception": str(self.original_exception) if self.original_exception else None
        }


class FraudEngineError(Exception):
    """
    Base exception for all fraud assessment errors.

    Wraps errors with an ErrorContext so callers and logs see the
    error type, whether it is recoverable and what fallback was applied.

    Attributes:
        context: ErrorContext with detailed error information
    """

    def __init__(self, context: ErrorContext):
        self.context = context
        super().__init__(context.message)

    def __str__(self) -> str:
        base = f"{self.context.error_type.value}: {self.context.message}"
        if self.context.fallback_action:
            base += f" (Fallback: {self.context.fallback_action})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        return self.context.to_dict()


class InvalidInputError(FraudEngineError):
    """Raised when a claim is missing or has malformed required fields."""

    @classmethod
    def for_field(cls, field_name: str, reason: str) -> "InvalidInputError":
        """
        Create error for a single invalid claim field.

        Args:
            field_name: Name of the offending field
            reason: Why the value was rejected

        Returns:
            InvalidInputError instance
        """
        context = ErrorContext(
            error_type=ErrorType.INVALID_INPUT,
            message=f"Invalid claim field '{field_name}': {reason}",
            recoverable=False,
            details={"field": field_name}
        )
        return cls(context)


class AnalyzerUnavailableError(FraudEngineError):
    """
    Raised when an analyzer backend fails or times out.

    Never surfaced to callers of the engine: analyzer adapters catch it
    and substitute their fixed fallback value.
    """

    @classmethod
    def timed_out(
        cls,
        analyzer: str,
        timeout: float,
        subject: Optional[str] = None
    ) -> "AnalyzerUnavailableError":
        """
        Create error for an analyzer call that exceeded its timeout.

        Args:
            analyzer: Analyzer name (e.g. "document", "text")
            timeout: Timeout in seconds that expired
            subject: Optional identifier of the analyzed item

        Returns:
            AnalyzerUnavailableError instance
        """
        context = ErrorContext(
            error_type=ErrorType.ANALYZER_TIMEOUT,
            message=f"{analyzer} analysis timed out after {timeout:.1f}s",
            recoverable=True,
            fallback_action="Use fallback judgment",
            details={"analyzer": analyzer, "timeout": timeout, "subject": subject}
        )
        return cls(context)

    @classmethod
    def from_exception(
        cls,
        analyzer: str,
        error: Exception,
        subject: Optional[str] = None
    ) -> "AnalyzerUnavailableError":
        """
        Wrap an arbitrary backend failure.

        Args:
            analyzer: Analyzer name ("document", "text", "narrative")
            error: Original exception
            subject: Optional identifier of the analyzed item

        Returns:
            AnalyzerUnavailableError instance
        """
        if isinstance(error, FraudEngineError):
            error_type = error.context.error_type
        else:
            error_type = {
                "document": ErrorType.DOCUMENT_ANALYSIS_FAILED,
                "text": ErrorType.TEXT_ANALYSIS_FAILED,
                "narrative": ErrorType.NARRATIVE_GENERATION_FAILED,
            }.get(analyzer, ErrorType.UNKNOWN_ERROR)

        context = ErrorContext(
            error_type=error_type,
            message=f"{analyzer} analysis failed: {str(error)}",
            recoverable=True,
            fallback_action="Use fallback judgment",
            details={"analyzer": analyzer, "subject": subject},
            original_exception=error
        )
        return cls(context)


class BedrockAPIError(AnalyzerUnavailableError):
    """Exception for AWS Bedrock API errors."""

    @classmethod
    def from_client_error(
        cls,
        error: Exception,
        operation: str,
        fallback_action: Optional[str] = None
    ) -> "BedrockAPIError":
        """
        Create BedrockAPIError from boto3 ClientError.

        Args:
            error: Original boto3 ClientError
            operation: Description of operation that failed
            fallback_action: Optional fallback action description

        Returns:
            BedrockAPIError instance
        """
        error_code = "Unknown"
        error_message = str(error)

        if hasattr(error, 'response'):
            error_info = error.response.get("Error", {})
            error_code = error_info.get("Code", "Unknown")
            error_message = error_info.get("Message", str(error))

        error_type_map = {
            "ThrottlingException": ErrorType.BEDROCK_RATE_LIMIT,
            "TooManyRequestsException": ErrorType.BEDROCK_RATE_LIMIT,
            "RequestTimeout": ErrorType.BEDROCK_TIMEOUT,
            "RequestTimeoutException": ErrorType.BEDROCK_TIMEOUT,
            "ModelTimeoutException": ErrorType.BEDROCK_TIMEOUT,
            "UnauthorizedException": ErrorType.BEDROCK_AUTH_ERROR,
            "AccessDeniedException": ErrorType.BEDROCK_AUTH_ERROR,
            "ValidationException": ErrorType.BEDROCK_INVALID_REQUEST,
            "ModelNotReadyException": ErrorType.BEDROCK_MODEL_ERROR,
            "ServiceUnavailableException": ErrorType.BEDROCK_SERVICE_ERROR,
            "InternalServerException": ErrorType.BEDROCK_SERVICE_ERROR,
        }

        context = ErrorContext(
            error_type=error_type_map.get(error_code, ErrorType.BEDROCK_SERVICE_ERROR),
            message=f"Bedrock API error during {operation}: {error_message}",
            recoverable=True,
            fallback_action=fallback_action,
            details={
                "error_code": error_code,
                "operation": operation
            },
            original_exception=error
        )
        return cls(context)


class AggregationError(FraudEngineError):
    """
    Raised when scoring receives values it cannot combine.

    Scoring runs over validated inputs, so this always indicates a
    programming defect rather than a recoverable condition.
    """

    @classmethod
    def defect(cls, message: str, **details: Any) -> "AggregationError":
        context = ErrorContext(
            error_type=ErrorType.AGGREGATION_FAILED,
            message=message,
            recoverable=False,
            details=details
        )
        return cls(context)


class ConfigurationError(FraudEngineError):
    """Exception for missing or invalid configuration."""

    @classmethod
    def missing(cls, what: str) -> "ConfigurationError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_MISSING,
            message=f"Configuration missing: {what}",
            recoverable=False,
            details={"missing": what}
        )
        return cls(context)

    @classmethod
    def invalid(cls, key: str, reason: str) -> "ConfigurationError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_INVALID,
            message=f"Invalid configuration value for '{key}': {reason}",
            recoverable=False,
            details={"key": key}
        )
        return cls(context)


def log_degraded(
    error: FraudEngineError,
    logger
) -> None:
    """
    Log a recoverable analyzer error with its full context.

    Args:
        error: The error being absorbed by a fallback
        logger: Logger instance for error logging
    """
    if error.context.recoverable:
        logger.warning(f"Analyzer degraded: {error}", extra={"error": error.to_dict()})
    else:
        logger.error(f"Non-recoverable error: {error}", extra={"error": error.to_dict()})
