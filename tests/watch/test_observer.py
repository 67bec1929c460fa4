"""Tests for SourceTreeObserver and event translation."""

import asyncio

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from buildsweep.models import WatchEventKind
from buildsweep.paths import PathMatcher
from buildsweep.watch import SourceTreeObserver, translate_event

WATCH_PATHS = ["lib/**/*.js", "main.js"]
IGNORED = ["node_modules/", "dist/", "build/"]


@pytest.fixture
def project(tmp_path):
    """Project tree with watched and unwatched files."""
    (tmp_path / "lib" / "ui").mkdir(parents=True)
    (tmp_path / "lib" / "a.js").write_text("a();\n")
    (tmp_path / "lib" / "ui" / "tabs.js").write_text("tabs();\n")
    (tmp_path / "lib" / "notes.txt").write_text("notes\n")
    (tmp_path / "main.js").write_text("main();\n")
    (tmp_path / "other.js").write_text("other();\n")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "dep.js").write_text("dep();\n")
    (tmp_path / "lib" / ".hidden.js").write_text("hidden();\n")
    return tmp_path


@pytest.fixture
def matcher(project):
    return PathMatcher(project, include=WATCH_PATHS, ignore=IGNORED)


class TestPathMatcher:
    """Tests for glob matching."""

    def test_matches_watched_globs(self, project, matcher):
        assert matcher.matches(project / "lib" / "a.js")
        assert matcher.matches(project / "lib" / "ui" / "tabs.js")
        assert matcher.matches(project / "main.js")

    def test_rejects_unwatched_and_ignored(self, project, matcher):
        assert not matcher.matches(project / "other.js")
        assert not matcher.matches(project / "lib" / "notes.txt")
        assert not matcher.matches(project / "lib" / ".hidden.js")
        assert not matcher.matches(project / "src" / "main.js")
        assert not matcher.matches(project.parent / "elsewhere.js")


class TestTranslateEvent:
    """Tests for watchdog event mapping."""

    def test_created_modified_deleted(self, project, matcher):
        path = str(project / "lib" / "a.js")

        assert [e.kind for e in translate_event(FileCreatedEvent(path), matcher)] == [
            WatchEventKind.ADD
        ]
        assert [e.kind for e in translate_event(FileModifiedEvent(path), matcher)] == [
            WatchEventKind.CHANGE
        ]
        deleted = translate_event(FileDeletedEvent(path), matcher)
        assert deleted[0].kind == WatchEventKind.UNLINK
        assert deleted[0].path == "lib/a.js"

    def test_moved_is_unlink_plus_add(self, project, matcher):
        event = FileMovedEvent(str(project / "lib" / "a.js"), str(project / "lib" / "b.js"))
        events = translate_event(event, matcher)

        assert [(e.kind, e.path) for e in events] == [
            (WatchEventKind.UNLINK, "lib/a.js"),
            (WatchEventKind.ADD, "lib/b.js"),
        ]

    def test_unmatched_and_directory_events_dropped(self, project, matcher):
        assert translate_event(FileModifiedEvent(str(project / "other.js")), matcher) == []
        assert translate_event(DirModifiedEvent(str(project / "lib")), matcher) == []
        assert (
            translate_event(FileModifiedEvent(str(project / "node_modules" / "dep.js")), matcher)
            == []
        )


class TestSourceTreeObserver:
    """Tests for the observer."""

    def test_initial_scan(self, project):
        observer = SourceTreeObserver(project, WATCH_PATHS, IGNORED)

        assert observer.initial_scan() == ["lib/a.js", "lib/ui/tabs.js", "main.js"]

    @pytest.mark.asyncio
    async def test_start_reports_existing_files_then_ready(self, project):
        observer = SourceTreeObserver(project, WATCH_PATHS, IGNORED)
        received = []

        observer.start(received.append)
        try:
            assert observer.is_running
            kinds = [e.kind for e in received]
            assert kinds == [WatchEventKind.ADD] * 3 + [WatchEventKind.READY]
        finally:
            observer.stop()

        assert not observer.is_running

    @pytest.mark.asyncio
    async def test_live_change_is_delivered(self, project):
        """A real modification reaches the sink on the loop."""
        observer = SourceTreeObserver(project, WATCH_PATHS, IGNORED)
        received = []

        observer.start(received.append)
        try:
            (project / "lib" / "a.js").write_text("a(); b();\n")
            for _ in range(50):
                await asyncio.sleep(0.1)
                if any(e.path == "lib/a.js" and e.kind != WatchEventKind.ADD for e in received):
                    break
        finally:
            observer.stop()

        assert any(
            e.path == "lib/a.js" and e.kind == WatchEventKind.CHANGE for e in received
        )
