"""Application settings loaded from .env file"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, Literal

LOG_LEVEL = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables (.env)
    """
    # Logging configuration
    log_level: LOG_LEVEL = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)"
    )
    log_format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d - %(message)s",
        description="Default log format (can be customized if needed)"
    )
    log_date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date/time format for logs"
    )
    log_to_file: bool = Field(
        default=False,
        description="If true, enable logging to a file"
    )
    log_file_path: str = Field(
        default="logs/reviewbot.log",
        description="Path to log file"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation interval"
    )
    log_file_retention: int = Field(
        default=7,
        ge=1,
        description="Number of days to retain log files"
    )

    # Language model provider
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for the OpenAI-compatible provider"
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Override for OpenAI-compatible endpoints (None uses api.openai.com)"
    )
    openai_model: str = Field(
        default="gpt-4",
        description="Chat model used for sentiment analysis and response generation"
    )
    openai_max_tokens: int = Field(
        default=1000,
        ge=1,
        description="Token budget for a generation call"
    )
    openai_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries performed by the SDK before a call is reported as failed"
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout for the provider"
    )

    # Generation tuning
    generation_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    generation_presence_penalty: float = Field(default=0.1, ge=-2.0, le=2.0)
    generation_frequency_penalty: float = Field(default=0.1, ge=-2.0, le=2.0)
    sentiment_max_tokens: int = Field(default=300, ge=1)
    sentiment_temperature: float = Field(default=0.1, ge=0.0, le=2.0)

    # Gating
    rate_limit_window_seconds: int = Field(
        default=900,
        ge=1,
        description="Length of the generation rate-limit window"
    )
    rate_limit_max_requests: int = Field(
        default=10,
        ge=1,
        description="Generation requests allowed per caller within one window"
    )
    trial_days: int = Field(
        default=14,
        ge=0,
        description="Length of the trial window granted to new accounts"
    )
    trial_usage_limit: int = Field(
        default=50,
        ge=0,
        description="Monthly usage limit for accounts created on a trial"
    )

    # Batch processing
    batch_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Pause after every batch item to respect provider rate limits"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
