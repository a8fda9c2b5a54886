"""Pipeline error taxonomy.

Every error the orchestrator surfaces to a caller derives from PipelineError,
which carries the user-facing message, an HTTP-equivalent status and a stable
category string.
"""

from typing import Any


class PipelineError(Exception):
    """Base class for user-facing pipeline failures."""

    status_code: int = 500
    category: str = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        """Response body for this error."""
        return {"error": self.message}


class InputError(PipelineError):
    """Bad caller input: empty prompt, suspicious prompt, bad rollback index."""

    status_code = 400
    category = "input"


class OracleParseError(PipelineError):
    """Oracle output could not be parsed as a plan."""

    status_code = 502
    category = "oracle_parse"

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "raw": self.raw}


class PlanValidationError(PipelineError):
    """Oracle produced a parseable plan that violates the whitelist schema."""

    status_code = 502
    category = "plan_validation"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = list(details or [])

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class UpstreamServiceError(PipelineError):
    """Oracle transport failure, rewritten into a stable category."""

    MESSAGES = {
        "rate_limited": "AI usage limit reached. Please wait a moment and try again.",
        "overloaded": "AI service is currently overloaded. Please try again later.",
        "quota": "API quota exhausted. Please check your plan or try again later.",
        "timeout": "AI service took too long to respond. Please try again.",
        "unavailable": "AI service request failed. Please try again.",
    }
    STATUS = {
        "rate_limited": 429,
        "overloaded": 503,
        "quota": 503,
        "timeout": 504,
        "unavailable": 503,
    }

    def __init__(self, category: str) -> None:
        if category not in self.MESSAGES:
            category = "unavailable"
        super().__init__(self.MESSAGES[category])
        self.category = category
        self.status_code = self.STATUS[category]

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "category": self.category}


__all__ = [
    "PipelineError",
    "InputError",
    "OracleParseError",
    "PlanValidationError",
    "UpstreamServiceError",
]
