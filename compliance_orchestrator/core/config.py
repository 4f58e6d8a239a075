"""
Configuration management using Pydantic settings.
Loads environment variables from .env file and provides type-safe access.
"""
from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmptyResultPolicy(str, Enum):
    """What to do when no checker produced a risk score."""
    SILENT_PASS = "silent_pass"
    FAIL_SAFE = "fail_safe"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console
    enable_metrics: bool = True

    # Required-check selection
    high_value_threshold: float = Field(default=50000.0, ge=0)
    security_asset_types: List[str] = ["security"]

    # Routing thresholds (risk scores are normalised to 0-1)
    supervisor_review_threshold: float = Field(default=0.3, ge=0, le=1)
    escalation_threshold: float = Field(default=0.7, ge=0, le=1)
    empty_result_policy: EmptyResultPolicy = EmptyResultPolicy.SILENT_PASS

    # Performance Configuration
    workflow_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    batch_concurrency: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @model_validator(mode="after")
    def check_threshold_order(self) -> "Settings":
        if self.supervisor_review_threshold > self.escalation_threshold:
            raise ValueError(
                "supervisor_review_threshold must not exceed escalation_threshold"
            )
        return self

    @property
    def security_asset_types_set(self) -> set[str]:
        """Asset-type tags treated as security instruments (lowercased)."""
        return {tag.strip().lower() for tag in self.security_asset_types if tag.strip()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
