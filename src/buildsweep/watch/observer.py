"""Filesystem observation for the watch loop."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..models import WatchEvent, WatchEventKind
from ..paths import PathMatcher

logger = logging.getLogger(__name__)

EventSink = Callable[[WatchEvent], None]


def translate_event(event: FileSystemEvent, matcher: PathMatcher) -> List[WatchEvent]:
    """
    Map one watchdog event to watch events for matching files.

    created -> add, modified -> change, deleted -> unlink,
    moved -> unlink(src) + add(dest). Directory events are dropped.
    """
    if event.is_directory:
        return []

    def to_event(kind: WatchEventKind, raw_path) -> List[WatchEvent]:
        path = os.fsdecode(raw_path)
        if not matcher.matches(path):
            return []
        return [WatchEvent(kind=kind, path=matcher.relative(path))]

    if event.event_type == EVENT_TYPE_CREATED:
        return to_event(WatchEventKind.ADD, event.src_path)
    if event.event_type == EVENT_TYPE_MODIFIED:
        return to_event(WatchEventKind.CHANGE, event.src_path)
    if event.event_type == EVENT_TYPE_DELETED:
        return to_event(WatchEventKind.UNLINK, event.src_path)
    if event.event_type == EVENT_TYPE_MOVED:
        return to_event(WatchEventKind.UNLINK, event.src_path) + to_event(
            WatchEventKind.ADD, event.dest_path
        )
    return []


class _ForwardingHandler(FileSystemEventHandler):
    """Watchdog handler that forwards translated events onto the loop."""

    def __init__(self, observer: "SourceTreeObserver"):
        self.observer = observer

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            events = translate_event(event, self.observer.matcher)
        except Exception as e:
            self.observer.emit_threadsafe(WatchEvent(kind=WatchEventKind.ERROR, message=str(e)))
            return
        for watch_event in events:
            self.observer.emit_threadsafe(watch_event)


class SourceTreeObserver:
    """
    Recursive watcher over a root directory, filtered by globs.

    PATTERN: watchdog thread -> call_soon_threadsafe -> loop callback
    CRITICAL: The sink is only ever called on the event loop thread
    GOTCHA: watchdog has no initial scan, existing files are reported here
    """

    def __init__(
        self,
        root_path: Union[str, Path],
        watch_paths: List[str],
        ignored: Optional[List[str]] = None,
        ignore_dotfiles: bool = True,
    ):
        """
        Initialize observer.

        Args:
            root_path: Directory to watch recursively
            watch_paths: Globs relative to the root that are reported
            ignored: Globs never reported (dotfiles are added by default)
            ignore_dotfiles: Skip dotfiles and dot directories
        """
        self.root_path = Path(root_path).resolve()
        self.matcher = PathMatcher(
            self.root_path,
            include=watch_paths,
            ignore=ignored,
            ignore_dotfiles=ignore_dotfiles,
        )
        self._observer = None
        self._sink: Optional[EventSink] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def emit_threadsafe(self, event: WatchEvent) -> None:
        if self._loop is None or self._sink is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._sink, event)

    def start(self, sink: EventSink) -> None:
        """
        Start watching and run the initial scan. Call from the event loop.

        Existing files are reported as ADD events, then one READY event.
        Failures to start are reported as an ERROR event.
        """
        self._loop = asyncio.get_running_loop()
        self._sink = sink

        observer = Observer()
        try:
            observer.schedule(_ForwardingHandler(self), str(self.root_path), recursive=True)
            observer.start()
        except OSError as e:
            logger.debug(f"Observer failed to start: {e}")
            sink(WatchEvent(kind=WatchEventKind.ERROR, message=str(e)))
        else:
            self._observer = observer

        for rel_path in self.initial_scan():
            sink(WatchEvent(kind=WatchEventKind.ADD, path=rel_path))
        sink(WatchEvent(kind=WatchEventKind.READY))

    def initial_scan(self) -> List[str]:
        """Relative paths of existing files matching the watched globs, sorted."""
        found: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root_path):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if self.matcher.matches(current / d, is_dir=True)
            )
            for name in sorted(filenames):
                path = current / name
                if self.matcher.matches(path):
                    found.append(self.matcher.relative(path))
        return sorted(found)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        self._sink = None
