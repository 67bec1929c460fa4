"""Tree-sitter parsing for script dialects."""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

from ..errors import ParseError, UnsupportedDialectError
from ..models import Dialect

logger = logging.getLogger(__name__)


class DialectParser:
    """
    Tree-sitter based parser for the supported script dialects.

    PATTERN: Load each grammar once, reuse the parser
    GOTCHA: Tree-sitter uses bytes, not strings
    GOTCHA: Tree-sitter never fails outright, errors surface as ERROR/missing nodes
    """

    # Dialect to tree-sitter-language-pack grammar name
    GRAMMAR_MAPPING: Dict[Dialect, str] = {
        Dialect.JAVASCRIPT: "javascript",
        Dialect.TYPESCRIPT: "typescript",
        Dialect.TSX: "tsx",
    }

    # File extension to dialect mapping (the grammar for .js covers JSX)
    EXTENSION_MAPPING: Dict[str, Dialect] = {
        ".js": Dialect.JAVASCRIPT,
        ".jsx": Dialect.JAVASCRIPT,
        ".ts": Dialect.TYPESCRIPT,
        ".tsx": Dialect.TSX,
    }

    def __init__(self):
        self._parsers: Dict[Dialect, Parser] = {}

    def detect_dialect(self, file_path: str) -> Optional[Dialect]:
        """Map a file path to its dialect, or None when unsupported."""
        return self.EXTENSION_MAPPING.get(Path(file_path).suffix.lower())

    def _get_parser(self, dialect: Dialect, file_path: str) -> Parser:
        parser = self._parsers.get(dialect)
        if parser is not None:
            return parser

        grammar = self.GRAMMAR_MAPPING[dialect]
        try:
            parser = get_parser(grammar)
        except Exception as e:
            logger.error(f"Failed to load {grammar} grammar: {e}")
            raise ParseError(file_path, f"Failed to load {grammar} grammar: {e}") from e

        logger.debug(f"Loaded {grammar} language grammar")
        self._parsers[dialect] = parser
        return parser

    def parse(self, source: bytes, file_path: str) -> Tree:
        """
        Parse source bytes into a syntax tree.

        Args:
            source: UTF-8 encoded source
            file_path: Path used to pick the dialect and for error reporting

        Returns:
            A tree free of syntax errors

        Raises:
            UnsupportedDialectError: Extension is not in the supported set
            ParseError: The source contains syntax errors
        """
        dialect = self.detect_dialect(file_path)
        if dialect is None:
            raise UnsupportedDialectError(
                file_path, f"Unsupported file type: {Path(file_path).suffix or '(none)'}"
            )

        tree = self._get_parser(dialect, file_path).parse(source)
        root = tree.root_node
        if root.has_error:
            bad = first_error_node(root)
            if bad is None:
                raise ParseError(file_path, "Syntax error")
            row, column = bad.start_point
            what = f"Missing {bad.type}" if bad.is_missing else "Unexpected token"
            raise ParseError(file_path, what, line=row + 1, column=column + 1)
        return tree


def walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def first_error_node(root: Node) -> Optional[Node]:
    """Return the first ERROR or missing node in document order."""
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None
