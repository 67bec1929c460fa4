"""Source sanitizer: diagnostic call removal and comment stripping."""

import logging
from typing import Optional

from ..config import SanitizerConfig
from ..errors import SanitizerError, SerializationError, SourceEncodingError
from ..models import SanitizeResult, TransformRule
from .parser import DialectParser
from .rewriter import apply_edits
from .rules import RuleMatcher, collect_edits

logger = logging.getLogger(__name__)


class SourceSanitizer:
    """
    Text-in/text-out sanitizer for script sources.

    PATTERN: parse -> collect edits in one walk -> splice -> verify
    CRITICAL: Never raises for bad input, failures come back as results
    GOTCHA: Byte offsets from tree-sitter index the UTF-8 encoding, not the str
    """

    def __init__(
        self,
        config: Optional[SanitizerConfig] = None,
        parser: Optional[DialectParser] = None,
    ):
        self.config = config or SanitizerConfig()
        self.parser = parser or DialectParser()

    def supports(self, file_path: str) -> bool:
        """True when the file's extension maps to a known dialect."""
        return self.parser.detect_dialect(file_path) is not None

    def sanitize(self, source_text: str, file_path: str) -> SanitizeResult:
        """
        Sanitize one file's source text.

        Args:
            source_text: Current contents of the file
            file_path: Path of the file, used for the dialect and error reports

        Returns:
            SanitizeResult with either the transformed code or a TransformError
        """
        try:
            return self._sanitize(source_text, file_path)
        except SanitizerError as e:
            logger.debug(f"Sanitize failed for {file_path}: {e}")
            return SanitizeResult.failure(e.to_error())

    def _sanitize(self, source_text: str, file_path: str) -> SanitizeResult:
        try:
            source = source_text.encode("utf-8")
        except UnicodeEncodeError as e:
            # Lone surrogates
            raise SourceEncodingError(
                file_path, f"Source is not valid UTF-8 text: {e.reason}"
            ) from e
        tree = self.parser.parse(source, file_path)

        matcher = RuleMatcher(
            source,
            rules=self.config.rules,
            diagnostic_objects=self.config.diagnostic_objects,
            preserved_severities=self.config.preserved_severities,
        )
        edits = collect_edits(tree.root_node, matcher)
        removed_calls = sum(1 for e in edits if e.rule == TransformRule.REMOVE_DIAGNOSTIC_CALL)
        removed_comments = len(edits) - removed_calls

        output = apply_edits(source, edits)
        if not output.strip():
            raise SerializationError(file_path, "No output generated")

        if edits:
            # The rewrite must still be valid source
            try:
                self.parser.parse(output, file_path)
            except SanitizerError as e:
                raise SerializationError(
                    file_path, f"Rewritten source no longer parses: {e.message}", e.line, e.column
                ) from e

        return SanitizeResult.success(
            file_path,
            output.decode("utf-8"),
            removed_calls=removed_calls,
            removed_comments=removed_comments,
        )
