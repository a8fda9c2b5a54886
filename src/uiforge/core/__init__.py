"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    PipelineError,
    InputError,
    OracleParseError,
    PlanValidationError,
    UpstreamServiceError,
)
from .validate import (
    GenerateRequest,
    RollbackRequest,
    SessionRequest,
    check_prompt_injection,
    SUSPICIOUS_PATTERNS,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    strip_code_fences,
    safe_json_dumps,
    JSONParseError,
    validate_json_size,
)
from .hash import Algorithm, hash_string, hash_bytes
from .id import new_request_id, new_session_id


def create_container(settings: Settings | None = None, oracle=None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings, oracle)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "PipelineError",
    "InputError",
    "OracleParseError",
    "PlanValidationError",
    "UpstreamServiceError",
    # Validation
    "GenerateRequest",
    "RollbackRequest",
    "SessionRequest",
    "check_prompt_injection",
    "SUSPICIOUS_PATTERNS",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "strip_code_fences",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_size",
    # DI
    "create_container",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_bytes",
    # IDs
    "new_request_id",
    "new_session_id",
]
