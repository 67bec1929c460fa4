"""Data models for batch runs."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .sanitizer_models import TransformError


class FileTask(BaseModel):
    """One discovered file, created at batch start and consumed once."""

    absolute_path: str = Field(description="Absolute path of the file")
    excluded: bool = Field(default=False, description="Never rewritten when True")


class FileStatus(str, Enum):
    """Terminal classification of a file within a batch."""

    SKIPPED = "skipped"
    PROCESSED = "processed"
    ERRORED = "errored"


class FileOutcome(BaseModel):
    """Result of processing one FileTask."""

    path: str
    status: FileStatus
    error: Optional[TransformError] = None
    changed: bool = Field(default=False, description="Sanitized text differed from the input")


class BatchStats(BaseModel):
    """
    Counters for one batch run.

    Excluded files are pass-through successes: they are counted in
    ``processed_files`` as well as ``skipped_files``, so
    ``processed_files + error_files == total_files`` always holds.
    """

    total_files: int = 0
    processed_files: int = 0
    error_files: int = 0
    skipped_files: int = 0
    changed_files: int = 0

    @property
    def rewritten_files(self) -> int:
        """Files that went through the sanitizer successfully."""
        return self.processed_files - self.skipped_files

    @property
    def has_errors(self) -> bool:
        return self.error_files > 0

    def record(self, outcome: FileOutcome) -> None:
        """Fold one file outcome into the counters."""
        if outcome.status == FileStatus.ERRORED:
            self.error_files += 1
            return

        self.processed_files += 1
        if outcome.status == FileStatus.SKIPPED:
            self.skipped_files += 1
        elif outcome.changed:
            self.changed_files += 1
