"""ID Generation.

ULID-based identifiers with type prefixes so log lines stay readable
(req_01J..., gen_01J...).
"""

from typing import NewType

from ulid import ULID

RequestID = NewType("RequestID", str)
"""Pipeline request identifier"""

SessionID = NewType("SessionID", str)
"""Generated session identifier"""


class Prefix:
    """ID prefix constants."""

    REQUEST = "req"
    SESSION = "sess"


def _generate_with_prefix(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(_generate_with_prefix(Prefix.REQUEST))


def new_session_id() -> SessionID:
    """Generate new session ID."""
    return SessionID(_generate_with_prefix(Prefix.SESSION))


__all__ = [
    "RequestID",
    "SessionID",
    "Prefix",
    "new_request_id",
    "new_session_id",
]
