"""Tests for data models."""

from buildsweep.models import (
    BatchStats,
    ErrorKind,
    FileOutcome,
    FileStatus,
    TransformError,
)


class TestBatchStats:
    """Tests for stats accumulation."""

    def test_record_classifications(self):
        stats = BatchStats(total_files=4)
        stats.record(FileOutcome(path="a.js", status=FileStatus.PROCESSED, changed=True))
        stats.record(FileOutcome(path="b.js", status=FileStatus.PROCESSED))
        stats.record(FileOutcome(path="main.js", status=FileStatus.SKIPPED))
        stats.record(FileOutcome(path="c.js", status=FileStatus.ERRORED))

        assert stats.processed_files == 3
        assert stats.skipped_files == 1
        assert stats.changed_files == 1
        assert stats.error_files == 1
        assert stats.rewritten_files == 2
        assert stats.has_errors
        assert stats.processed_files + stats.error_files == stats.total_files


class TestTransformError:
    """Tests for error descriptions."""

    def test_describe_with_location(self):
        error = TransformError(
            file_path="a.js", kind=ErrorKind.PARSE, message="Unexpected token", line=3, column=7
        )

        assert error.describe() == "Unexpected token (line 3, column 7)"

    def test_describe_without_location(self):
        error = TransformError(file_path="a.js", kind=ErrorKind.IO, message="Failed to read file")

        assert error.describe() == "Failed to read file"
