"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (balancer strategy, step weights, carrier pool)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Literal

from app.core.exceptions import ConfigurationError
from app.flow.steps import StepWeightTable
from utils.constants import BALANCER_ALIASES, DEFAULT_HOST, DEFAULT_PORT


class CarrierConfig(BaseModel):
    """
    One simulated telecom carrier in the pool.
    Chances are integer percentages of a single SMS/voice challenge succeeding.
    """
    name: str = Field(..., min_length=1, description="Carrier identifier")
    chance_sms: int = Field(..., ge=0, le=100, description="SMS success chance (%)")
    chance_voice: int = Field(..., ge=0, le=100, description="Voice call success chance (%)")


DEFAULT_CARRIERS = [
    CarrierConfig(name="carrier_1", chance_sms=80, chance_voice=60),
    CarrierConfig(name="carrier_2", chance_sms=65, chance_voice=75),
    CarrierConfig(name="carrier_3", chance_sms=50, chance_voice=50),
]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Server
    HOST: str = Field(
        default=DEFAULT_HOST,
        description="Interface the verification service binds to"
    )
    PORT: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="Port the verification service listens on"
    )

    # Dispatch
    BALANCER: str = Field(
        default="round-robin",
        description="Carrier selection strategy (rr/round-robin, b/best)"
    )
    CARRIERS: List[CarrierConfig] = Field(
        default_factory=lambda: list(DEFAULT_CARRIERS),
        description="Carrier pool, JSON encoded when set from the environment"
    )

    # Ranking
    STEP_WEIGHTS: List[float] = Field(
        default_factory=lambda: [1, 2, 3, 4, 5],
        description="Weights for FirstSMS, SecondSMS, FirstVoiceCall, SecondVoiceCall, Unreachable"
    )

    # Tokens
    TOKEN_PREFIX: str = Field(
        default="Bearer ey",
        description="Prefix prepended to issued verification tokens"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("BALANCER")
    @classmethod
    def validate_balancer(cls, v):
        """Accept only known strategy names; 'best' is rejected later, at dispatcher build."""
        key = v.strip().lower()
        if key not in BALANCER_ALIASES:
            raise ValueError(f"Invalid balancer: {v}")
        return key

    @field_validator("STEP_WEIGHTS")
    @classmethod
    def validate_step_weights(cls, v):
        """Step weights must form a valid (five, ascending) table."""
        try:
            StepWeightTable(v)
        except ConfigurationError as e:
            raise ValueError(e.message)
        return v

    @model_validator(mode="after")
    def validate_carrier_names(self):
        names = [c.name for c in self.CARRIERS]
        if len(names) != len(set(names)):
            raise ValueError("Carrier names must be unique")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Settings loaded from the environment, built on first use and cached.
    """
    return Settings()


def validate_settings(app_settings: Settings = None):
    """
    Validates critical settings on application startup.
    Raises ConfigurationError if any required setting is missing or invalid.
    """
    app_settings = app_settings or get_settings()
    errors = []

    if not app_settings.TOKEN_PREFIX:
        errors.append("TOKEN_PREFIX is required")

    if app_settings.is_production and app_settings.DEBUG:
        errors.append("DEBUG must be disabled in production")

    if errors:
        raise ConfigurationError(
            f"Configuration validation failed: {', '.join(errors)}",
            details=errors
        )

    return True
