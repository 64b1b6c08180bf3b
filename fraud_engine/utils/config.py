"""Configuration management for the fraud assessment engine."""

import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict

from dotenv import load_dotenv

from .errors import ConfigurationError


@dataclass
class BedrockConfig:
    """AWS Bedrock configuration."""
    model_id: str
    timeout: int = 60
    max_retries: int = 1


@dataclass
class AnalyzerConfig:
    """Per-call timeouts and narrative switch for the analyzers."""
    timeout: float = 20.0
    narrative_enabled: bool = True
    narrative_timeout: float = 15.0


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - [%(claim_id)s] %(message)s"
    file: str = ""


@dataclass
class Config:
    """Main configuration class."""
    aws_region: str
    bedrock: BedrockConfig
    analyzers: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        """
        Load configuration from file and environment variables.

        Environment variables (a ``.env`` file is honoured) override config
        file values:
        - AWS_REGION
        - BEDROCK_MODEL_ID
        - FRAUD_ANALYZER_TIMEOUT
        - FRAUD_NARRATIVE_ENABLED
        - LOG_LEVEL

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                or a required key is absent
        """
        load_dotenv()

        if not os.path.exists(config_path):
            raise ConfigurationError.missing(f"config file '{config_path}'")

        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError.invalid(config_path, str(e))

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Config":
        """Build a Config from already-parsed YAML data, applying env overrides."""
        if not isinstance(config_data, dict):
            raise ConfigurationError.invalid("config", "top level must be a mapping")

        try:
            aws = config_data["aws"]
            bedrock_data = aws["bedrock"]
            bedrock_config = BedrockConfig(
                model_id=os.getenv("BEDROCK_MODEL_ID", bedrock_data["model_id"]),
                timeout=int(bedrock_data.get("timeout", 60)),
                max_retries=int(bedrock_data.get("max_retries", 1))
            )
            aws_region = os.getenv("AWS_REGION", aws["region"])
        except KeyError as e:
            raise ConfigurationError.missing(f"key {e}")
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigurationError.invalid("aws.bedrock", str(e))

        if bedrock_config.max_retries < 1:
            raise ConfigurationError.invalid("aws.bedrock.max_retries", "must be at least 1")

        an = _section(config_data, "analyzers")
        try:
            analyzer_config = AnalyzerConfig(
                timeout=float(os.getenv("FRAUD_ANALYZER_TIMEOUT", an.get("timeout", 20.0))),
                narrative_enabled=_as_bool(
                    os.getenv("FRAUD_NARRATIVE_ENABLED", an.get("narrative_enabled", True))
                ),
                narrative_timeout=float(an.get("narrative_timeout", 15.0))
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError.invalid("analyzers", str(e))

        if analyzer_config.timeout <= 0 or analyzer_config.narrative_timeout <= 0:
            raise ConfigurationError.invalid("analyzers.timeout", "timeouts must be positive")

        lg = _section(config_data, "logging")
        defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=os.getenv("LOG_LEVEL", lg.get("level", defaults.level)),
            format=lg.get("format", defaults.format),
            file=lg.get("file", defaults.file) or ""
        )

        return cls(
            aws_region=aws_region,
            bedrock=bedrock_config,
            analyzers=analyzer_config,
            logging=logging_config,
        )


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError.invalid(name, "must be a mapping")
    return section


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")
