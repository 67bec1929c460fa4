"""Spawning of the external build step."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set, Union

from ..models import BuildInvocation, BuildOverlapPolicy

logger = logging.getLogger(__name__)


class BuildLauncher:
    """
    Run the build command as a child process.

    PATTERN: Fire and observe, completion is awaited on a task, never inline
    CRITICAL: Build failures are logged only, nothing propagates to the loop
    GOTCHA: Under PARALLEL, rapid requests spawn overlapping builds
    """

    def __init__(
        self,
        command: List[str],
        cwd: Optional[Union[str, Path]] = None,
        policy: BuildOverlapPolicy = BuildOverlapPolicy.PARALLEL,
    ):
        """
        Initialize launcher.

        Args:
            command: Build entry point and its script path
            cwd: Working directory for the child (default: current)
            policy: Handling of requests while a build is running
        """
        if not command:
            raise ValueError("Build command must not be empty")
        self.command = list(command)
        self.cwd = Path(cwd) if cwd is not None else None
        self.policy = policy

        self.invocations: List[BuildInvocation] = []
        self._tasks: Set[asyncio.Task] = set()
        self._pending_reason: Optional[str] = None

    @property
    def in_flight(self) -> int:
        """Number of builds still running."""
        return len(self._tasks)

    def request(self, reason: str = "") -> Optional[asyncio.Task]:
        """
        Ask for a build. Must be called from the running event loop.

        Returns:
            The task running the new build, or None when the request was
            folded into a trailing build under COALESCE
        """
        if self.policy == BuildOverlapPolicy.COALESCE and self._tasks:
            if self._pending_reason is None:
                logger.debug("Build in progress, queueing one trailing rebuild")
            self._pending_reason = reason
            return None
        return self._start(reason)

    def _start(self, reason: str) -> asyncio.Task:
        invocation = BuildInvocation(sequence=len(self.invocations) + 1, reason=reason)
        self.invocations.append(invocation)

        task = asyncio.get_running_loop().create_task(self._run(invocation))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Build task crashed: {error!r}")
        if self._pending_reason is not None and not self._tasks:
            reason, self._pending_reason = self._pending_reason, None
            self._start(reason)

    async def _run(self, invocation: BuildInvocation) -> BuildInvocation:
        logger.info("File change detected, rebuilding...")
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except OSError as e:
            invocation.finished_at = datetime.now()
            logger.error(f"Build failed to start: {e}")
            return invocation

        invocation.pid = process.pid
        invocation.exit_code = await process.wait()
        invocation.finished_at = datetime.now()

        if invocation.succeeded:
            logger.info("Build completed successfully")
        else:
            logger.error(f"Build failed with code {invocation.exit_code}")
        return invocation

    async def wait_idle(self) -> None:
        """Wait until no build is running, trailing rebuilds included."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
