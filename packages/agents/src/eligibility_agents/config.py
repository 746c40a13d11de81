"""Configuration system for the eligibility services.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the radar and the hybrid
reconciler.

Usage:
    from eligibility_agents.config import EngineSettings

    # Load from environment variables and .env file
    settings = EngineSettings()

    # Access reconciliation settings
    print(settings.reconciliation.timeout)
    print(settings.reconciliation.tolerance_for("SNAP"))

    # Build an engine from settings
    engine = settings.build_engine()
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from eligibility_core.catalog.rules import ProgramKind
from eligibility_core.engine import EligibilityEngine


class RadarConfig(BaseSettings):
    """Eligibility radar settings.

    Environment Variables:
        ELIGIBILITY_RADAR_ALERT_MARGIN: Fraction of a limit that triggers an alert
        ELIGIBILITY_RADAR_MAX_WORKERS: Thread pool size for program scans
    """

    model_config = SettingsConfigDict(
        env_prefix="ELIGIBILITY_RADAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    alert_margin: Decimal = Field(
        default=Decimal("0.10"),
        ge=0,
        le=1,
        description="Alert when income is within this fraction of a limit",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum threads used by a radar scan",
    )


class ReconciliationConfig(BaseSettings):
    """External calculator and reconciliation settings.

    Environment Variables:
        ELIGIBILITY_RECONCILE_ENABLED: Call the external calculator at all
        ELIGIBILITY_RECONCILE_BASE_URL: Base URL of the external calculator
        ELIGIBILITY_RECONCILE_API_KEY: Bearer token for the external calculator
        ELIGIBILITY_RECONCILE_TIMEOUT: Request timeout in seconds (5-10)
        ELIGIBILITY_RECONCILE_MAX_RETRIES: Retries after the first attempt
        ELIGIBILITY_RECONCILE_RETRY_BACKOFF: Base delay between retries in seconds
        ELIGIBILITY_RECONCILE_DEFAULT_TOLERANCE: Relative tolerance for benefits
        ELIGIBILITY_RECONCILE_TAX_CREDIT_TOLERANCE: Relative tolerance for tax credits
        ELIGIBILITY_RECONCILE_PROGRAM_TOLERANCES: JSON map of program -> tolerance
    """

    model_config = SettingsConfigDict(
        env_prefix="ELIGIBILITY_RECONCILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(
        default=True,
        description="Verify local results against the external calculator",
    )
    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the external calculation service",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for the external calculation service",
    )
    timeout: float = Field(
        default=8.0,
        ge=5.0,
        le=10.0,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retry attempts after a failed request",
    )
    retry_backoff: float = Field(
        default=0.5,
        ge=0,
        description="Linear backoff step between retries in seconds",
    )
    default_tolerance: Decimal = Field(
        default=Decimal("0.02"),
        ge=0,
        le=1,
        description="Relative variance accepted for general benefits",
    )
    tax_credit_tolerance: Decimal = Field(
        default=Decimal("0.005"),
        ge=0,
        le=1,
        description="Relative variance accepted for tax-credit programs",
    )
    program_tolerances: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Per-program overrides keyed by program code",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the URL is not empty and has no trailing slash."""
        if not v or not v.strip():
            raise ValueError("Base URL cannot be empty")
        return v.strip().rstrip("/")

    @field_validator("program_tolerances")
    @classmethod
    def validate_program_tolerances(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """Normalize program codes and bound each tolerance to [0, 1]."""
        normalized = {}
        for program, tolerance in v.items():
            if not 0 <= tolerance <= 1:
                raise ValueError(f"Tolerance for {program} must be between 0 and 1")
            normalized[program.upper().strip()] = tolerance
        return normalized

    def tolerance_for(self, program: str, kind: Optional[ProgramKind] = None) -> Decimal:
        """Resolve tolerance: program override, then kind default, then general default."""
        override = self.program_tolerances.get(program.upper())
        if override is not None:
            return override
        if kind == ProgramKind.TAX_CREDIT:
            return self.tax_credit_tolerance
        return self.default_tolerance


class EngineSettings(BaseSettings):
    """Root configuration for the eligibility services.

    Environment Variables:
        ELIGIBILITY_ENV: Environment name (development, staging, production, test)
        ELIGIBILITY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        ELIGIBILITY_DEFAULT_JURISDICTION: Jurisdiction used when none is given

    Example:
        # Load all configuration from environment
        settings = EngineSettings()

        # Override specific settings
        settings = EngineSettings(
            radar=RadarConfig(alert_margin=Decimal("0.05")),
            reconciliation=ReconciliationConfig(enabled=False),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="ELIGIBILITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    default_jurisdiction: str = Field(
        default="MD",
        description="Two-letter jurisdiction code used when a request names none",
    )

    # Nested configuration
    radar: RadarConfig = Field(default_factory=RadarConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)

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

    @field_validator("default_jurisdiction")
    @classmethod
    def validate_default_jurisdiction(cls, v: str) -> str:
        """Normalize the jurisdiction code to upper case."""
        v_upper = v.upper().strip()
        if not v_upper:
            raise ValueError("Default jurisdiction cannot be empty")
        return v_upper

    @model_validator(mode="after")
    def require_api_key_in_production(self) -> "EngineSettings":
        """Production reconciliation must authenticate to the external service."""
        if self.is_production and self.reconciliation.enabled and not self.reconciliation.api_key:
            raise ValueError("ELIGIBILITY_RECONCILE_API_KEY is required in production")
        return self

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

    def build_engine(self) -> EligibilityEngine:
        """Engine over the default catalog, configured from these settings."""
        return EligibilityEngine(
            default_jurisdiction=self.default_jurisdiction,
            alert_margin=self.radar.alert_margin,
            max_workers=self.radar.max_workers,
        )
