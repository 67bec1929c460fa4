"""Syntax-tree based source sanitizing."""

from .parser import DialectParser
from .rewriter import apply_edits
from .rules import RuleMatcher, collect_edits
from .sanitizer import SourceSanitizer

__all__ = [
    "DialectParser",
    "RuleMatcher",
    "SourceSanitizer",
    "apply_edits",
    "collect_edits",
]
