"""
Session & Version Store
In-memory sessions with append-only version history and pointer rollback.
"""

import asyncio
import weakref
from collections.abc import Callable
from datetime import datetime, timezone

from ..compiler import CompiledArtifact
from ..core import InputError, get_logger
from ..plan import Plan
from .models import HistoryEntry, Role, Session, Version, VersionSummary

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Owns every session.

    Versions are never removed or rewritten; rollback only moves the session's
    current plan pointer. Callers that read the current plan and later commit
    must hold ``lock(session_id)`` for the whole span.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._sessions: dict[str, Session] = {}
        # a lock lives only while a holder or waiter references it
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()
        self._clock = clock

    def get(self, session_id: str) -> Session | None:
        """Get a session without creating it."""
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> Session:
        """Get a session, creating an empty one on first use."""
        session = self._sessions.get(session_id)
        if session is None:
            session = Session(session_id=session_id, created_at=self._clock())
            self._sessions[session_id] = session
            logger.debug("session_created", session_id=session_id)
        return session

    def lock(self, session_id: str) -> asyncio.Lock:
        """Per-session mutual exclusion for read-modify-commit sequences."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def commit(
        self,
        session_id: str,
        plan: Plan,
        artifact: CompiledArtifact,
        explanation: str,
        prompt: str,
    ) -> int:
        """
        Record a successful generation.

        Appends a version, makes it current and appends the user prompt and the
        assistant acknowledgement to the history.

        Returns:
            Index of the new version
        """
        session = self.get_or_create(session_id)
        version = Version(
            index=len(session.versions),
            plan=plan,
            artifact=artifact,
            explanation=explanation,
            prompt=prompt,
            timestamp=self._clock(),
        )
        session.versions.append(version)
        session.current_plan = plan
        session.current_index = version.index
        session.history.append(HistoryEntry(role=Role.USER, content=prompt))
        session.history.append(HistoryEntry(role=Role.ASSISTANT, content=f'Generated UI based on: "{prompt}"'))

        logger.info(
            "version_committed",
            session_id=session_id,
            version=version.index,
            components=len(artifact.components),
        )
        return version.index

    def rollback(self, session_id: str, index: object) -> Version:
        """
        Make an earlier version current again.

        Args:
            session_id: Session identifier (an unknown session has no versions)
            index: Version index in ``[0, total)``

        Returns:
            The version now current

        Raises:
            InputError: If ``index`` is not a valid version index
        """
        session = self._sessions.get(session_id)
        total = len(session.versions) if session else 0

        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < total:
            logger.warning("rollback_rejected", session_id=session_id, index=repr(index)[:50], total=total)
            raise InputError("Invalid version index")

        version = session.versions[index]
        session.current_plan = version.plan
        session.current_index = index

        logger.info("rolled_back", session_id=session_id, version=index, total=total)
        return version

    def summarize(self, session_id: str) -> list[VersionSummary]:
        """Version listing for a session (empty for unknown sessions)."""
        session = self._sessions.get(session_id)
        if session is None:
            return []
        return [v.summary() for v in session.versions]

    def reset(self, session_id: str) -> bool:
        """
        Discard a session.

        Returns:
            True if a session was removed (resetting twice is harmless)
        """
        existed = self._sessions.pop(session_id, None) is not None

        if existed:
            logger.info("session_reset", session_id=session_id)
        return existed

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def lock_count(self) -> int:
        """Number of session locks currently referenced."""
        return len(self._locks)

    def __len__(self) -> int:
        return len(self._sessions)
