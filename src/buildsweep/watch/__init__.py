"""File watching and build re-triggering."""

from .launcher import BuildLauncher
from .observer import SourceTreeObserver, translate_event
from .orchestrator import WatchOrchestrator

__all__ = [
    "BuildLauncher",
    "SourceTreeObserver",
    "WatchOrchestrator",
    "translate_event",
]
