"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Insights Provider Configuration
    insights_api_base_url: str = Field(
        default="https://insights.example.com",
        description="Base URL for the environmental insights provider"
    )
    insights_api_key: str = Field(
        default="",
        description="API key for authentication"
    )
    insights_config_id: str = Field(
        default="",
        description="Provider-side configuration identifier sent with every query"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout in seconds for a single provider request"
    )

    # Retry Configuration
    max_retry_attempts: int = Field(
        default=1,
        description="Attempts per fetch strategy for 5xx responses (1 = no transport retry)"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=1,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=5,
        description="Maximum wait time in seconds between retries"
    )

    # Map Defaults
    default_latitude: float = Field(
        default=34.1,
        description="Initial marker latitude before the user clicks the map"
    )
    default_longitude: float = Field(
        default=74.8,
        description="Initial marker longitude before the user clicks the map"
    )
    default_date_range_months: int = Field(
        default=1,
        description="Length of the default query window ending today, in months"
    )
    live_debounce_seconds: float = Field(
        default=0.7,
        description="Delay before a live refresh fires after the last map move"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="AOI Insights Service",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
