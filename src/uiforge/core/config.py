"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="UIFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3001, gt=0, description="HTTP port")

    # Oracle
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""), description="Gemini API key"
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model name")
    gemini_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    gemini_max_tokens: int = Field(default=8192, gt=0, description="Max output tokens")
    oracle_timeout: float = Field(default=60.0, gt=0, description="Oracle call timeout (seconds)")

    # Circuit breaker
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Seconds before a retry probe")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Validation
    max_prompt_length: int = Field(default=10_000, gt=0, description="Max prompt length")
    max_history_length: int = Field(
        default=50, gt=0, description="History entries passed to the planner"
    )
    strict_props: bool = Field(default=False, description="Validate prop values against the whitelist")
    json_repair: bool = Field(default=True, description="Repair malformed oracle JSON before rejecting")

    # Sessions
    default_session_id: str = Field(default="default", min_length=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
