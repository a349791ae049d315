"""
Configuration management for TalentBridge.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).resolve().parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "talentbridge"
DATA_DIR = ROOT_DIR / "data"


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "talentbridge"
    username: str | None = None
    password: str | None = None

    applications_collection: str = "resumes"
    jobs_collection: str = "jobs"


class CommissionSettings(BaseSettings):
    """
    Commission rules shared by every commission calculation.

    One typed source for the bounds and defaults that job forms, the
    engine and recruiter views must agree on.
    """

    model_config = SettingsConfigDict(env_prefix="COMMISSION_")

    default_reduction_percentage: float = Field(default=40, ge=0, le=100)
    min_reduction_percentage: float = Field(default=0, ge=0, le=100)
    max_reduction_percentage: float = Field(default=100, ge=0, le=100)

    # Also used as the floor for the recruiter's share on the percentage path
    min_commission_percentage: float = Field(default=1, ge=0)
    max_commission_percentage: float = Field(default=50, gt=0)

    default_currency: str = "USD"

    @model_validator(mode="after")
    def validate_bounds(self) -> "CommissionSettings":
        """Ensure every min/max pair is ordered."""
        if self.min_reduction_percentage > self.max_reduction_percentage:
            raise ValueError("min_reduction_percentage exceeds max_reduction_percentage")
        if self.min_commission_percentage > self.max_commission_percentage:
            raise ValueError("min_commission_percentage exceeds max_commission_percentage")
        return self


class WorkflowSettings(BaseSettings):
    """Application workflow configuration."""

    model_config = SettingsConfigDict(env_prefix="WORKFLOW_")

    # Retries after a stale-version conflict on a status change
    transition_retry_attempts: int = Field(default=1, ge=0)

    # E.164 allows at most 15 digits including the country code
    min_phone_digits: int = 8
    max_phone_digits: int = 15


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "talentbridge.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "TalentBridge"
    version: str = "0.1.0"
    description: str = "Recruitment marketplace core"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    commission: CommissionSettings = Field(default_factory=CommissionSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
