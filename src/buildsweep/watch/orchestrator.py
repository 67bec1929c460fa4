"""Watch-and-rebuild session state machine."""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import WatchConfig
from ..models import WatchEvent, WatchEventKind, WatchSession, WatchState
from .launcher import BuildLauncher
from .observer import SourceTreeObserver

logger = logging.getLogger(__name__)

ObserverFactory = Callable[[Path, WatchConfig], SourceTreeObserver]


def default_observer_factory(root: Path, config: WatchConfig) -> SourceTreeObserver:
    return SourceTreeObserver(
        root,
        watch_paths=config.watch_paths,
        ignored=config.ignored,
        ignore_dotfiles=config.ignore_dotfiles,
    )


class WatchOrchestrator:
    """
    Rebuild on every relevant source change.

    Events are handled one at a time on a single asyncio loop:

    - READY: first time only, run the initial build
    - ADD / CHANGE: rebuild once the initial build was triggered
    - UNLINK: always rebuild
    - ERROR: log and carry on

    There is no debouncing, every qualifying event requests its own build.
    """

    def __init__(
        self,
        config: Optional[WatchConfig] = None,
        root: Optional[Union[str, Path]] = None,
        launcher: Optional[BuildLauncher] = None,
        observer_factory: Optional[ObserverFactory] = None,
    ):
        self.config = config or WatchConfig()
        self.root = Path(root or ".").resolve()
        self.launcher = launcher or BuildLauncher(
            self.config.build_command,
            cwd=self.root,
            policy=self.config.overlap_policy,
        )
        self.session = WatchSession(
            watched_globs=list(self.config.watch_paths),
            ignored_globs=list(self.config.ignored),
        )
        self._observer_factory = observer_factory or default_observer_factory
        self._observer: Optional[SourceTreeObserver] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def state(self) -> WatchState:
        return self.session.state

    def _trigger_build(self, reason: str) -> None:
        self.session.builds_requested += 1
        self.launcher.request(reason)

    def handle_event(self, event: WatchEvent) -> None:
        """Advance the session by one observer event."""
        if self.session.state == WatchState.STOPPED:
            return

        kind = event.kind
        if kind == WatchEventKind.READY:
            self.session.state = WatchState.READY
            logger.info("Initial scan complete. Watching for changes...")
            if not self.session.initial_build_done:
                self.session.initial_build_done = True
                self._trigger_build("initial build")
        elif kind == WatchEventKind.CHANGE:
            if self.session.initial_build_done:
                logger.info(f"File changed: {event.path}")
                self._trigger_build(f"changed {event.path}")
        elif kind == WatchEventKind.ADD:
            # Adds before the initial build belong to the initial scan
            if self.session.initial_build_done:
                logger.info(f"New file detected: {event.path}")
                self._trigger_build(f"added {event.path}")
        elif kind == WatchEventKind.UNLINK:
            logger.info(f"File deleted: {event.path}")
            self._trigger_build(f"deleted {event.path}")
        elif kind == WatchEventKind.ERROR:
            logger.error(f"Watcher error: {event.message}")

    def start(self) -> None:
        """Begin observing. Must be called from the running event loop."""
        logger.info("Starting file watcher...")
        self.session.state = WatchState.INITIALIZING
        self._stop_event = asyncio.Event()
        self._observer = self._observer_factory(self.root, self.config)
        self._observer.start(self.handle_event)

    def request_stop(self) -> None:
        """Ask a running session to end (bound to SIGINT)."""
        if self._stop_event is not None:
            self._stop_event.set()

    def close(self) -> None:
        """Stop observing. Running builds are left to finish on their own."""
        if self._observer is not None:
            self._observer.stop()
            self._observer = None
        if self.session.state != WatchState.STOPPED:
            self.session.state = WatchState.STOPPED
            logger.info("File watcher stopped.")

    async def run(self) -> None:
        """Run a whole session until request_stop() or SIGINT."""
        loop = asyncio.get_running_loop()
        self.start()

        installed = False
        try:
            loop.add_signal_handler(signal.SIGINT, self.request_stop)
            installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            # No loop signal support (Windows), KeyboardInterrupt ends the session
            pass

        try:
            await self._stop_event.wait()
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)
            self.close()
