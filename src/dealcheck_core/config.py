"""Configuration system for DealCheck Core.

Pydantic Settings-based configuration with environment variable support and
defaults that reproduce the published grading and discrepancy rules.

Usage:
    from dealcheck_core.config import DealCheckConfig

    # Load from environment variables and .env file
    config = DealCheckConfig()

    # Access analysis settings
    print(config.analysis.payment_discrepancy_tolerance)

    if config.is_debug:
        print("Debug logging enabled")
"""

from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalysisSettings(BaseSettings):
    """Lease analysis settings.

    Environment Variables:
        DEALCHECK_ANALYSIS_PAYMENT_DISCREPANCY_TOLERANCE: Dollars per period the
            dealer quote may differ from the reconstructed payment before it is
            flagged
    """

    model_config = SettingsConfigDict(
        env_prefix="DEALCHECK_ANALYSIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    payment_discrepancy_tolerance: Decimal = Field(
        default=Decimal("2"),
        ge=0,
        description="Allowed gap between quoted and calculated payment, per period",
    )


class DealCheckConfig(BaseSettings):
    """Root configuration for DealCheck Core.

    Environment Variables:
        DEALCHECK_ENV: Environment name (development, staging, production, test)
        DEALCHECK_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        DEALCHECK_LOG_JSON: Render log events as JSON lines

    Example:
        config = DealCheckConfig(
            log_level="debug",
            analysis=AnalysisSettings(payment_discrepancy_tolerance=Decimal("5")),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="DEALCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON instead of console output",
    )

    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"

    @property
    def use_json_logs(self) -> bool:
        """JSON logs when asked for explicitly or when running in production."""
        return self.log_json or self.is_production
