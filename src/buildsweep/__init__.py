"""Build pipeline tooling for the sprint helper userscript.

This package provides:
- Source sanitizing (diagnostic call removal, comment stripping) over
  tree-sitter syntax trees
- Batch rewriting of a source tree with per-file failure isolation
- A watch loop that re-runs the external build on every relevant change
"""

from .batch import BatchRunner, SourceScanner
from .config import SweepConfig, load_config
from .errors import (
    BuildSweepError,
    DirectoryNotFoundError,
    ParseError,
    SanitizerError,
    SerializationError,
    SourceEncodingError,
    UnsupportedDialectError,
)
from .sanitizer import SourceSanitizer
from .watch import BuildLauncher, SourceTreeObserver, WatchOrchestrator

__version__ = "0.1.0"

__all__ = [
    "BatchRunner",
    "SourceScanner",
    "SweepConfig",
    "load_config",
    "BuildSweepError",
    "DirectoryNotFoundError",
    "ParseError",
    "SanitizerError",
    "SerializationError",
    "SourceEncodingError",
    "UnsupportedDialectError",
    "SourceSanitizer",
    "BuildLauncher",
    "SourceTreeObserver",
    "WatchOrchestrator",
]
