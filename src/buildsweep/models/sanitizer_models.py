"""Data models for source sanitizing."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Dialect(str, Enum):
    """Script dialects the sanitizer can parse."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"


class TransformRule(str, Enum):
    """Tree rewrites applied by the sanitizer."""

    REMOVE_DIAGNOSTIC_CALL = "remove_diagnostic_call"
    STRIP_COMMENTS = "strip_comments"


class SourceEdit(BaseModel):
    """A pending rewrite of one byte range of the source."""

    start_byte: int = Field(ge=0, description="Start of the replaced range")
    end_byte: int = Field(ge=0, description="End of the replaced range (exclusive)")
    replacement: str = Field(default="", description="Text inserted in place of the range")
    rule: TransformRule = Field(description="Rule that produced this edit")

    @property
    def is_removal(self) -> bool:
        """True when the edit deletes the range without substitute text."""
        return self.replacement == ""


class ErrorKind(str, Enum):
    """Classes of per-file failures."""

    PARSE = "parse"
    SERIALIZATION = "serialization"
    UNSUPPORTED = "unsupported"
    IO = "io"


class TransformError(BaseModel):
    """A recoverable failure attached to one file."""

    file_path: str = Field(description="File the failure belongs to")
    kind: ErrorKind = Field(description="Failure class")
    message: str = Field(description="Underlying error message")
    line: Optional[int] = Field(default=None, description="1-based line, if known")
    column: Optional[int] = Field(default=None, description="1-based column, if known")

    def describe(self) -> str:
        """Human-readable one-line description."""
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.message}{location}"


class SanitizeResult(BaseModel):
    """Outcome of sanitizing one source text."""

    file_path: str
    code: Optional[str] = Field(default=None, description="Transformed source on success")
    error: Optional[TransformError] = Field(default=None, description="Failure, if any")
    removed_calls: int = Field(default=0, ge=0)
    removed_comments: int = Field(default=0, ge=0)

    @property
    def ok(self) -> bool:
        """True when a transformed text was produced."""
        return self.error is None and self.code is not None

    @classmethod
    def success(
        cls,
        file_path: str,
        code: str,
        removed_calls: int = 0,
        removed_comments: int = 0,
    ) -> "SanitizeResult":
        return cls(
            file_path=file_path,
            code=code,
            removed_calls=removed_calls,
            removed_comments=removed_comments,
        )

    @classmethod
    def failure(cls, error: TransformError) -> "SanitizeResult":
        return cls(file_path=error.file_path, error=error)
