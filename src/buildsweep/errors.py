"""Exception types raised by buildsweep components."""

from typing import Optional

from .models.sanitizer_models import ErrorKind, TransformError


class BuildSweepError(Exception):
    """Base class for buildsweep failures."""

    pass


class DirectoryNotFoundError(BuildSweepError):
    """Raised when a batch root directory does not exist."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f'Directory "{directory}" does not exist')


class SanitizerError(BuildSweepError):
    """
    Per-file sanitizer failure.

    Never escapes SourceSanitizer.sanitize(); it is converted to a
    TransformError value there.
    """

    kind = ErrorKind.PARSE

    def __init__(
        self,
        file_path: str,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = file_path
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{file_path}: {message}")

    def to_error(self) -> TransformError:
        return TransformError(
            file_path=self.file_path,
            kind=self.kind,
            message=self.message,
            line=self.line,
            column=self.column,
        )


class ParseError(SanitizerError):
    """Raised when the source does not parse cleanly."""

    kind = ErrorKind.PARSE


class SerializationError(SanitizerError):
    """Raised when the rewritten tree yields no usable source text."""

    kind = ErrorKind.SERIALIZATION


class UnsupportedDialectError(SanitizerError):
    """Raised for files whose extension maps to no known grammar."""

    kind = ErrorKind.UNSUPPORTED


class SourceEncodingError(SanitizerError):
    """Raised when source text cannot be represented as UTF-8."""

    kind = ErrorKind.IO
