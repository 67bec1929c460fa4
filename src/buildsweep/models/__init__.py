"""Buildsweep data models."""

from .sanitizer_models import (
    Dialect,
    TransformRule,
    SourceEdit,
    ErrorKind,
    TransformError,
    SanitizeResult,
)
from .batch_models import (
    FileTask,
    FileStatus,
    FileOutcome,
    BatchStats,
)
from .watch_models import (
    WatchEventKind,
    WatchEvent,
    WatchState,
    WatchSession,
    BuildOverlapPolicy,
    BuildInvocation,
)

__all__ = [
    # Sanitizer models
    "Dialect",
    "TransformRule",
    "SourceEdit",
    "ErrorKind",
    "TransformError",
    "SanitizeResult",
    # Batch models
    "FileTask",
    "FileStatus",
    "FileOutcome",
    "BatchStats",
    # Watch models
    "WatchEventKind",
    "WatchEvent",
    "WatchState",
    "WatchSession",
    "BuildOverlapPolicy",
    "BuildInvocation",
]
