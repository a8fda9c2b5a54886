"""
Model configuration with strong typing.
Centralized settings for the Gemini API.
"""

from enum import Enum
import os

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import Settings


class GeminiModelName(str, Enum):
    """Known Gemini model variants."""

    FLASH = "gemini-2.5-flash"  # Default: fast and good at structured output
    PRO = "gemini-2.5-pro"
    FLASH_LITE = "gemini-2.5-flash-lite"


class GeminiConfig(BaseModel):
    """Type-safe Gemini API configuration."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    # Model selection
    model_name: str = Field(default=GeminiModelName.FLASH.value)
    api_key: str | None = Field(default=None)

    # Generation parameters
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=8192, ge=1)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1, le=100)

    def __init__(self, **data):
        """Initialize config with API key from environment if not provided."""
        if not data.get("api_key"):
            data["api_key"] = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        super().__init__(**data)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiConfig":
        return cls(
            model_name=settings.gemini_model,
            api_key=settings.gemini_api_key or None,
            temperature=settings.gemini_temperature,
            max_tokens=settings.gemini_max_tokens,
        )

    @property
    def is_flash_model(self) -> bool:
        """Check if using a Flash model variant."""
        return "flash" in self.model_name.lower()
