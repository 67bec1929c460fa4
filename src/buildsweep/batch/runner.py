"""Batch sanitizing of a source tree."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config import BatchConfig
from ..errors import DirectoryNotFoundError
from ..models import (
    BatchStats,
    ErrorKind,
    FileOutcome,
    FileStatus,
    FileTask,
    TransformError,
)
from ..sanitizer import SourceSanitizer
from .scanner import SourceScanner

logger = logging.getLogger(__name__)


class BatchRunner:
    """
    Sanitize every discovered file under a root directory in place.

    PATTERN: Sequential read -> sanitize -> write, one outcome per file
    CRITICAL: A failing file never aborts the batch
    CRITICAL: Writes are destructive, there is no backup
    """

    def __init__(
        self,
        config: Optional[BatchConfig] = None,
        sanitizer: Optional[SourceSanitizer] = None,
        dry_run: bool = False,
    ):
        """
        Initialize runner.

        Args:
            config: Discovery settings
            sanitizer: Sanitizer to apply (default rules if omitted)
            dry_run: Compute outcomes without writing files
        """
        self.config = config or BatchConfig()
        self.sanitizer = sanitizer or SourceSanitizer()
        self.dry_run = dry_run
        self.outcomes: List[FileOutcome] = []

    def discover(self, root_dir: Union[str, Path]) -> List[FileTask]:
        return SourceScanner(root_dir, self.config).scan()

    def process(self, task: FileTask) -> FileOutcome:
        """
        Process one file and classify it.

        Read and write failures are returned as IO outcomes, not raised.
        """
        path = task.absolute_path
        if task.excluded:
            logger.debug(f"Skipping excluded file: {path}")
            return FileOutcome(path=path, status=FileStatus.SKIPPED)

        try:
            original = Path(path).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return self._io_failure(path, f"Failed to read file: {e}")

        result = self.sanitizer.sanitize(original, path)
        if not result.ok:
            error = result.error
            if error.kind == ErrorKind.SERIALIZATION:
                logger.warning(f"No output generated for: {path} ({error.describe()})")
            else:
                logger.error(f"Error processing file {path}: {error.describe()}")
            return FileOutcome(path=path, status=FileStatus.ERRORED, error=error)

        changed = result.code != original
        if changed and not self.dry_run:
            try:
                Path(path).write_bytes(result.code.encode("utf-8"))
            except OSError as e:
                return self._io_failure(path, f"Failed to write file: {e}")

        logger.debug(
            f"Processed {path}: {result.removed_calls} calls, "
            f"{result.removed_comments} comments removed"
        )
        return FileOutcome(path=path, status=FileStatus.PROCESSED, changed=changed)

    def _io_failure(self, path: str, message: str) -> FileOutcome:
        logger.error(f"Error processing file {path}: {message}")
        error = TransformError(file_path=path, kind=ErrorKind.IO, message=message)
        return FileOutcome(path=path, status=FileStatus.ERRORED, error=error)

    def run(self, root_dir: Union[str, Path] = ".") -> BatchStats:
        """
        Run one batch over ``root_dir``.

        Args:
            root_dir: Directory to sanitize

        Returns:
            Fresh BatchStats for this run

        Raises:
            DirectoryNotFoundError: root_dir does not exist
        """
        root = Path(root_dir)
        if not root.exists():
            raise DirectoryNotFoundError(str(root_dir))

        tasks = self.discover(root)
        stats = BatchStats(total_files=len(tasks))
        self.outcomes = []

        mode = " (dry run)" if self.dry_run else ""
        logger.info(f"Sanitizing {len(tasks)} files under {root.resolve()}{mode}")

        for task in tasks:
            outcome = self.process(task)
            self.outcomes.append(outcome)
            stats.record(outcome)

        logger.info(
            f"Done: {stats.processed_files}/{stats.total_files} processed, "
            f"{stats.changed_files} changed, {stats.skipped_files} skipped, "
            f"{stats.error_files} errors"
        )
        return stats
