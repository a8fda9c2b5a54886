"""Input validation with strong typing."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from .errors import InputError


# Validation limits
MAX_PROMPT_LENGTH = 10_000
MAX_SESSION_ID_LENGTH = 128

# Phrases that try to override the planner's instructions
SUSPICIOUS_PATTERNS = (
    "ignore previous",
    "ignore above",
    "disregard",
    "system prompt",
    "you are now",
)


class RequestValidator(BaseModel):
    """Base validator with strict configuration (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
    )


class GenerateRequest(RequestValidator):
    """Validated generation request."""

    session_id: str = Field(default="default", min_length=1, max_length=MAX_SESSION_ID_LENGTH)
    prompt: str = Field(default="", max_length=MAX_PROMPT_LENGTH, validate_default=True)

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Ensure prompt is non-empty after stripping."""
        if not v:
            raise ValueError("Prompt is required")
        return v


class RollbackRequest(RequestValidator):
    """Validated rollback request."""

    session_id: str = Field(default="default", min_length=1, max_length=MAX_SESSION_ID_LENGTH)
    version_index: StrictInt


class SessionRequest(RequestValidator):
    """Session-scoped request (reset, lookups)."""

    session_id: str = Field(default="default", min_length=1, max_length=MAX_SESSION_ID_LENGTH)


def check_prompt_injection(prompt: str) -> None:
    """
    Reject prompts that try to override the system instructions.

    Args:
        prompt: User prompt

    Raises:
        InputError: If the prompt contains a known override phrase
    """
    lowered = prompt.lower()
    if any(pattern in lowered for pattern in SUSPICIOUS_PATTERNS):
        raise InputError(
            "That prompt looks like it might be trying to override the system. Please rephrase."
        )
