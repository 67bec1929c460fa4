"""Candidate file discovery for batch runs."""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Set, Union

from ..config import BatchConfig
from ..models import FileTask
from ..paths import PathMatcher

logger = logging.getLogger(__name__)


class SourceScanner:
    """
    Discover files a batch run should sanitize.

    PATTERN: Walk once, prune ignored directories before descending
    CRITICAL: Files here get rewritten in place, ignore rules must hold
    GOTCHA: Excluded files are still discovered, they are skipped later
    """

    def __init__(self, root_path: Union[str, Path], config: Optional[BatchConfig] = None):
        """
        Initialize scanner.

        Args:
            root_path: Directory to scan
            config: Batch settings (extensions, ignore globs, exclusions)
        """
        self.root_path = Path(root_path).resolve()
        self.config = config or BatchConfig()
        self.extensions: Set[str] = {ext.lower() for ext in self.config.extensions}
        self.matcher = PathMatcher(
            self.root_path,
            ignore=self.config.ignore_globs,
            ignore_dotfiles=self.config.ignore_dotfiles,
        )

    def is_excluded(self, path: Union[str, Path]) -> bool:
        """
        Check the fixed exclusion list.

        A name matches the basename exactly or any path ending with it, so
        ``main.js`` also protects ``domain.js``.
        """
        path_str = str(path)
        name = os.path.basename(path_str)
        return any(
            path_str.endswith(excluded) or name == excluded
            for excluded in self.config.excluded_files
        )

    def _has_extension(self, name: str) -> bool:
        return any(name.lower().endswith(ext) for ext in self.extensions)

    def iter_paths(self) -> Iterator[Path]:
        """Yield candidate files under the root, ignored paths filtered out."""
        for dirpath, dirnames, filenames in os.walk(self.root_path):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root_path).as_posix()
            prefix = "" if rel_dir == "." else rel_dir + "/"

            # Prune in place so os.walk never enters ignored directories
            dirnames[:] = sorted(
                d for d in dirnames if not self.matcher.is_ignored(prefix + d, is_dir=True)
            )

            for name in sorted(filenames):
                if not self._has_extension(name):
                    continue
                if self.matcher.is_ignored(prefix + name):
                    continue
                yield current / name

    def scan(self) -> List[FileTask]:
        """
        Build the task list for one batch.

        Returns:
            FileTasks sorted by path, one per distinct file
        """
        seen: Set[str] = set()
        tasks: List[FileTask] = []
        for path in self.iter_paths():
            key = str(path)
            if key in seen:
                continue
            seen.add(key)
            tasks.append(FileTask(absolute_path=key, excluded=self.is_excluded(key)))

        tasks.sort(key=lambda t: t.absolute_path)
        logger.debug(f"Discovered {len(tasks)} files under {self.root_path}")
        return tasks
