"""Tests for the click CLI."""

import pytest
from click.testing import CliRunner

from buildsweep.cli import app as cli_app
from buildsweep.models import BuildOverlapPolicy


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CliRunner with logging setup and user config stubbed out."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setattr(cli_app, "configure_logging", lambda verbose=False, quiet=False: None)
    return CliRunner()


class TestCleanCommand:
    """Tests for `buildsweep clean`."""

    def test_clean_reports_totals(self, runner, sample_project):
        result = runner.invoke(cli_app.main, ["clean", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "Sanitize summary" in result.output
        assert "broken.js" in result.output
        assert (sample_project / "lib" / "a.js").read_text() == "export const a = 1;\n"

    def test_missing_directory_exits_1(self, runner, tmp_path):
        result = runner.invoke(cli_app.main, ["clean", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_dry_run_and_extra_exclude(self, runner, sample_project):
        before = (sample_project / "lib" / "a.js").read_bytes()

        result = runner.invoke(
            cli_app.main, ["clean", "--dry-run", "--exclude", "a.js", str(sample_project)]
        )

        assert result.exit_code == 0, result.output
        assert "dry run" in result.output
        assert (sample_project / "lib" / "a.js").read_bytes() == before


class TestWatchCommand:
    """Tests for `buildsweep watch`."""

    def test_watch_wires_options(self, runner, tmp_path, monkeypatch):
        created = {}

        class FakeOrchestrator:
            def __init__(self, config, root=None):
                created["config"] = config
                created["root"] = root

            async def run(self):
                created["ran"] = True

            def close(self):
                pass

        monkeypatch.setattr(cli_app, "WatchOrchestrator", FakeOrchestrator)

        result = runner.invoke(
            cli_app.main,
            [
                "watch",
                "--root", str(tmp_path),
                "--policy", "coalesce",
                "--build-command", "npm run build",
            ],
        )

        assert result.exit_code == 0, result.output
        assert created["ran"] is True
        assert created["root"] == str(tmp_path)
        assert created["config"].overlap_policy == BuildOverlapPolicy.COALESCE
        assert created["config"].build_command == ["npm", "run", "build"]
