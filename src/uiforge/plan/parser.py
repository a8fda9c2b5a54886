"""Oracle output parsing - raw model text to a wire-format plan."""

from typing import Any

from ..core import get_logger
from ..core.errors import OracleParseError
from ..core.json import JSONParseError, extract_json, validate_json_size

logger = get_logger(__name__)

MAX_PLAN_SIZE = 512 * 1024  # 512KB


def parse_plan_text(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Parse oracle output into a plan dictionary.

    Fenced code blocks and prose around the JSON object are stripped; the
    result is NOT validated against the whitelist.

    Args:
        text: Raw oracle output
        repair: Attempt json_repair on malformed JSON

    Returns:
        Parsed plan dictionary

    Raises:
        OracleParseError: If no JSON object can be recovered
    """
    raw = text or ""
    try:
        validate_json_size(raw, MAX_PLAN_SIZE, "Plan")
        return extract_json(raw, repair=repair)
    except JSONParseError as e:
        logger.warning("plan_parse_failed", error=str(e), preview=raw[:200])
        raise OracleParseError(
            "The AI returned invalid JSON. Please try rephrasing your request.", raw=raw
        ) from e
