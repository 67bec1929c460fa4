"""Data models for watch sessions and build invocations."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class WatchEventKind(str, Enum):
    """Filesystem observer signals."""

    ADD = "add"
    CHANGE = "change"
    UNLINK = "unlink"
    READY = "ready"
    ERROR = "error"


class WatchEvent(BaseModel):
    """One signal delivered to the watch orchestrator."""

    kind: WatchEventKind
    path: Optional[str] = Field(default=None, description="Path relative to the watch root")
    message: Optional[str] = Field(default=None, description="Error description for ERROR events")


class WatchState(str, Enum):
    """Lifecycle states of a watch session."""

    INITIALIZING = "initializing"
    READY = "ready"
    STOPPED = "stopped"


class WatchSession(BaseModel):
    """State owned by one WatchOrchestrator for its whole lifetime."""

    watched_globs: List[str] = Field(default_factory=list)
    ignored_globs: List[str] = Field(default_factory=list)
    initial_build_done: bool = False
    state: WatchState = WatchState.INITIALIZING
    builds_requested: int = 0


class BuildOverlapPolicy(str, Enum):
    """What to do with build requests that arrive while a build is running."""

    PARALLEL = "parallel"  # spawn every request, builds may overlap
    COALESCE = "coalesce"  # one in flight, trailing requests fold into one rerun


class BuildInvocation(BaseModel):
    """One spawned execution of the external build step."""

    sequence: int = Field(description="1-based invocation counter within the session")
    reason: str = Field(default="", description="Event that requested the build")
    pid: Optional[int] = None
    exit_code: Optional[int] = None
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
