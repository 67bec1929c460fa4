"""Batch discovery and in-place sanitizing."""

from .runner import BatchRunner
from .scanner import SourceScanner

__all__ = ["BatchRunner", "SourceScanner"]
