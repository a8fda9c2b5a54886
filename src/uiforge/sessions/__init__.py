"""
Session & Version Store
Conversation history, append-only versions and rollback.
"""

from .models import Role, HistoryEntry, Version, VersionSummary, Session
from .store import SessionStore, utcnow

__all__ = [
    "Role",
    "HistoryEntry",
    "Version",
    "VersionSummary",
    "Session",
    "SessionStore",
    "utcnow",
]
