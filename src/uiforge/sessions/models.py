"""Session and version data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..compiler import CompiledArtifact
from ..plan import Plan


class Role(str, Enum):
    """Author of a history entry."""

    USER = "user"
    ASSISTANT = "assistant"


class HistoryEntry(BaseModel):
    """One conversation turn."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role
    content: str


class Version(BaseModel):
    """An immutable snapshot produced by one successful generation."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    plan: Plan
    artifact: CompiledArtifact
    explanation: str = ""
    prompt: str
    timestamp: datetime

    @property
    def code(self) -> str:
        return self.artifact.code

    def summary(self) -> "VersionSummary":
        return VersionSummary(index=self.index, prompt=self.prompt, timestamp=self.timestamp)


class VersionSummary(BaseModel):
    """Lightweight version listing entry."""

    model_config = ConfigDict(frozen=True)

    index: int
    prompt: str
    timestamp: datetime


class Session(BaseModel):
    """
    Per-session conversation and version history.

    ``versions`` only ever grows; ``current_index`` is the version the live
    plan was taken from (-1 when nothing has been generated).
    """

    session_id: str
    history: list[HistoryEntry] = Field(default_factory=list)
    versions: list[Version] = Field(default_factory=list)
    current_plan: Plan | None = None
    current_index: int = -1
    created_at: datetime

    @property
    def is_modification(self) -> bool:
        """True when the next generation edits an existing plan."""
        return self.current_plan is not None

    @property
    def latest(self) -> Version | None:
        return self.versions[-1] if self.versions else None
