"""Configuration Management for gangsched

This module provides centralized configuration using Pydantic settings. The
scoring mode and score range are validated once, when the configuration is
built, and are immutable afterwards.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError, raise_configuration_error
from .types import MAX_NODE_SCORE, MIN_NODE_SCORE, ScoringMode


class ScoringSettings(BaseSettings):
    """Immutable scoring configuration, read from GANGSCHED_* variables."""

    mode: ScoringMode = Field(default=ScoringMode.LEAST, description="Resource ranking mode")
    min_score: int = Field(default=MIN_NODE_SCORE, description="Lowest normalized score")
    max_score: int = Field(default=MAX_NODE_SCORE, description="Highest normalized score")

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v):
        try:
            return ScoringMode.parse(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from e

    @model_validator(mode="after")
    def validate_range(self):
        if self.min_score > self.max_score:
            raise ValueError("min_score cannot be larger than max_score")
        return self

    model_config = SettingsConfigDict(env_prefix="GANGSCHED_", frozen=True)


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    log_level: str = "INFO"
    log_format: str = "console"

    def __post_init__(self):
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_levels:
            raise_configuration_error("log_level", self.log_level, "|".join(valid_levels))

        valid_formats = ["console", "json"]
        if self.log_format not in valid_formats:
            raise_configuration_error("log_format", self.log_format, "|".join(valid_formats))

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "console").lower(),
        )


@dataclass
class GangSchedConfig:
    """Main configuration class for gangsched."""

    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "GangSchedConfig":
        """Load configuration from environment variables.

        Raises:
            ConfigurationError: if any value is not acceptable.
        """
        if env_file:
            cls._load_env_file(env_file)

        try:
            scoring = ScoringSettings()
        except ValidationError as e:
            error = e.errors()[0]
            loc = ".".join(str(part) for part in error.get("loc", ())) or "score_range"
            raise_configuration_error(loc, error.get("input"), error.get("msg", str(e)))

        return cls(scoring=scoring, logging=LoggingConfig.from_env())

    @staticmethod
    def _load_env_file(env_file: str):
        """Load environment variables from file."""
        env_path = Path(env_file)
        if not env_path.exists():
            return

        with open(env_path, "r") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    os.environ[key.strip()] = value.strip()

    def validate(self) -> List[str]:
        """Validate the entire configuration and return any errors."""
        errors = []

        try:
            ScoringSettings(
                mode=self.scoring.mode,
                min_score=self.scoring.min_score,
                max_score=self.scoring.max_score,
            )
        except ValidationError as e:
            errors.append(f"Scoring configuration error: {e}")

        try:
            LoggingConfig(log_level=self.logging.log_level, log_format=self.logging.log_format)
        except ConfigurationError as e:
            errors.append(f"Logging configuration error: {e}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "scoring": {
                "mode": self.scoring.mode.value,
                "min_score": self.scoring.min_score,
                "max_score": self.scoring.max_score,
            },
            "logging": {
                "log_level": self.logging.log_level,
                "log_format": self.logging.log_format,
            },
        }

    def __str__(self) -> str:
        return (
            f"GangSchedConfig(mode={self.scoring.mode.value}, "
            f"range=[{self.scoring.min_score}, {self.scoring.max_score}])"
        )


# Global configuration instance
_global_config: Optional[GangSchedConfig] = None


def get_config() -> GangSchedConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = GangSchedConfig.from_env()
    return _global_config


def set_config(config: GangSchedConfig):
    """Set the global configuration instance."""
    global _global_config

    errors = config.validate()
    if errors:
        raise ValueError(f"Configuration validation failed: {errors}")

    _global_config = config


def reset_config():
    """Reset the global configuration to default."""
    global _global_config
    _global_config = None
