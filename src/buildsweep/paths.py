"""Gitwildmatch path matching shared by discovery and watching."""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from pathspec import PathSpec

DOTFILE_PATTERN = ".*"


def _normalize(pattern: str, anchored: bool) -> str:
    """Strip ``./`` prefixes and optionally anchor the pattern at the root."""
    pattern = pattern.strip()
    while pattern.startswith("./"):
        pattern = pattern[2:]
    if anchored and not pattern.startswith("/"):
        pattern = "/" + pattern
    return pattern


def compile_globs(patterns: Iterable[str], anchored: bool = False) -> Optional[PathSpec]:
    """
    Compile glob patterns into a PathSpec.

    Args:
        patterns: Gitwildmatch patterns (``lib/**/*.js``, ``node_modules/``)
        anchored: Anchor every pattern at the root, as a watch path is

    Returns:
        Compiled PathSpec, or None when no patterns were given
    """
    lines = [_normalize(p, anchored) for p in patterns if p and p.strip()]
    if not lines:
        return None
    return PathSpec.from_lines("gitwildmatch", lines)


class PathMatcher:
    """
    Include/ignore decision for paths under one root.

    PATTERN: Compile once, match relative POSIX paths
    GOTCHA: Directory checks need the trailing slash for ``dir/`` patterns
    """

    def __init__(
        self,
        root: Union[str, Path],
        include: Optional[List[str]] = None,
        ignore: Optional[List[str]] = None,
        ignore_dotfiles: bool = True,
    ):
        self.root = Path(root).resolve()
        self.include_patterns = list(include or [])
        self.ignore_patterns = list(ignore or [])
        if ignore_dotfiles and DOTFILE_PATTERN not in self.ignore_patterns:
            self.ignore_patterns.append(DOTFILE_PATTERN)

        self._include = compile_globs(self.include_patterns, anchored=True)
        self._ignore = compile_globs(self.ignore_patterns)

    def relative(self, path: Union[str, Path]) -> Optional[str]:
        """Return the root-relative POSIX path, or None if outside the root."""
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        try:
            return candidate.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        if self._ignore is None:
            return False
        if is_dir and not rel_path.endswith("/"):
            rel_path += "/"
        return self._ignore.match_file(rel_path)

    def is_included(self, rel_path: str) -> bool:
        if self._include is None:
            return True
        return self._include.match_file(rel_path)

    def matches(self, path: Union[str, Path], is_dir: bool = False) -> bool:
        """True when ``path`` is inside the root, included and not ignored."""
        rel_path = self.relative(path)
        if rel_path is None or rel_path in ("", "."):
            return False
        if self.is_ignored(rel_path, is_dir=is_dir):
            return False
        return is_dir or self.is_included(rel_path)
