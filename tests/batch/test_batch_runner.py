"""Tests for BatchRunner and SourceScanner."""

from pathlib import Path

import pytest

from buildsweep.batch import BatchRunner, SourceScanner
from buildsweep.config import BatchConfig
from buildsweep.errors import DirectoryNotFoundError
from buildsweep.models import ErrorKind, FileStatus


class TestSourceScanner:
    """Tests for discovery."""

    def test_discovers_only_eligible_files(self, sample_project):
        """Ignored directories, dotfiles and other extensions are skipped."""
        tasks = SourceScanner(sample_project).scan()
        rel = [Path(t.absolute_path).relative_to(sample_project.resolve()).as_posix() for t in tasks]

        assert rel == ["lib/a.js", "lib/broken.js", "lib/nested/b.ts", "main.js"]

    def test_excluded_files_are_flagged(self, sample_project):
        """Excluded names are discovered but marked."""
        tasks = {Path(t.absolute_path).name: t for t in SourceScanner(sample_project).scan()}

        assert tasks["main.js"].excluded is True
        assert tasks["a.js"].excluded is False

    def test_exclusion_matches_path_suffix(self, tmp_path):
        """A path ending with an excluded name is excluded too."""
        scanner = SourceScanner(tmp_path)

        assert scanner.is_excluded(tmp_path / "lib" / "main.js")
        assert scanner.is_excluded(tmp_path / "domain.js")
        assert not scanner.is_excluded(tmp_path / "main.ts")

    def test_custom_ignore_globs(self, tmp_path):
        """Configured ignore globs replace the defaults."""
        (tmp_path / "vendor").mkdir()
        (tmp_path / "vendor" / "lib.js").write_text("x();\n")
        (tmp_path / "app.js").write_text("y();\n")

        config = BatchConfig(ignore_globs=["vendor/"])
        tasks = SourceScanner(tmp_path, config).scan()

        assert [Path(t.absolute_path).name for t in tasks] == ["app.js"]


class TestBatchRunner:
    """Tests for batch runs."""

    def test_run_counts_and_rewrites(self, sample_project):
        """Every file gets exactly one classification."""
        stats = BatchRunner().run(sample_project)

        assert stats.total_files == 4
        assert stats.processed_files == 3
        assert stats.error_files == 1
        assert stats.skipped_files == 1
        assert stats.changed_files == 1
        assert stats.processed_files + stats.error_files == stats.total_files

        assert (sample_project / "lib" / "a.js").read_text() == "export const a = 1;\n"

    def test_valid_files_without_edits_untouched(self, sample_project):
        """A file with nothing to remove keeps its content."""
        before = (sample_project / "lib" / "nested" / "b.ts").read_bytes()
        BatchRunner().run(sample_project)

        assert (sample_project / "lib" / "nested" / "b.ts").read_bytes() == before

    def test_excluded_and_ignored_files_never_rewritten(self, sample_project):
        """Entry points and ignored trees are byte-identical after a run."""
        paths = [
            sample_project / "main.js",
            sample_project / "node_modules" / "pkg" / "index.js",
            sample_project / "dist" / "bundle.js",
            sample_project / "build" / "out.js",
            sample_project / ".cache" / "x.js",
        ]
        before = {p: p.read_bytes() for p in paths}

        BatchRunner().run(sample_project)

        for path in paths:
            assert path.read_bytes() == before[path], path

    def test_malformed_file_does_not_abort_batch(self, sample_project):
        """The broken file is recorded and left as it was."""
        runner = BatchRunner()
        runner.run(sample_project)

        errored = [o for o in runner.outcomes if o.status == FileStatus.ERRORED]
        assert len(errored) == 1
        assert errored[0].path.endswith("broken.js")
        assert errored[0].error.kind == ErrorKind.PARSE
        assert (sample_project / "lib" / "broken.js").read_text() == "function (\n"

    def test_undecodable_file_is_io_error(self, tmp_path):
        """Bytes that are not UTF-8 are an IO failure for that file only."""
        (tmp_path / "bad.js").write_bytes(b"const s = '\xff\xfe';\n")
        (tmp_path / "good.js").write_text("console.log(1);\ngo();\n")

        runner = BatchRunner()
        stats = runner.run(tmp_path)

        assert stats.error_files == 1
        assert stats.processed_files == 1
        bad = next(o for o in runner.outcomes if o.path.endswith("bad.js"))
        assert bad.error.kind == ErrorKind.IO
        assert (tmp_path / "good.js").read_text() == "go();\n"

    def test_second_run_changes_nothing(self, sample_project):
        """Sanitized trees are stable under a second run."""
        BatchRunner().run(sample_project)
        stats = BatchRunner().run(sample_project)

        assert stats.changed_files == 0
        assert stats.error_files == 1

    def test_dry_run_leaves_files(self, sample_project):
        """Dry runs report changes without writing."""
        before = (sample_project / "lib" / "a.js").read_bytes()
        stats = BatchRunner(dry_run=True).run(sample_project)

        assert stats.changed_files == 1
        assert (sample_project / "lib" / "a.js").read_bytes() == before

    def test_missing_directory(self, tmp_path):
        """A missing root fails before any discovery."""
        with pytest.raises(DirectoryNotFoundError) as exc_info:
            BatchRunner().run(tmp_path / "nope")

        assert "does not exist" in str(exc_info.value)

    def test_stats_are_fresh_per_run(self, sample_project):
        """Each run returns its own counters."""
        runner = BatchRunner()
        first = runner.run(sample_project)
        second = runner.run(sample_project)

        assert first is not second
        assert second.total_files == 4
        assert len(runner.outcomes) == 4
