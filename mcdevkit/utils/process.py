"""
Supervision of the running server process.

The server inherits the terminal's stdin, stdout and stderr so its console
can be used directly. While it runs, mcdevkit waits for whichever comes
first: the server exiting on its own, or an interrupt (Ctrl+C), in which case
the server is killed.
"""

import asyncio
import logging
import signal
from pathlib import Path
from typing import List, Optional, Sequence

from ..exceptions import ServerStartError

logger = logging.getLogger(__name__)


class ServerProcess:
    """Handles the lifecycle of one server process."""

    def __init__(self, command: Sequence[str], working_dir: Path) -> None:
        self.command: List[str] = list(command)
        self.working_dir = Path(working_dir)
        self.process: Optional[asyncio.subprocess.Process] = None
        self.interrupted = False

    @property
    def is_running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    async def start(self) -> None:
        """Spawn the process with inherited standard streams."""
        logger.debug(f"Spawning {' '.join(self.command)} in {self.working_dir}")
        try:
            self.process = await asyncio.create_subprocess_exec(
                *self.command,
                cwd=str(self.working_dir),
                stdin=None,
                stdout=None,
                stderr=None,
            )
        except OSError as e:
            raise ServerStartError(f"Failed to start {self.command[0]}", e) from e

    async def kill(self) -> None:
        """Kill the process and reap it. Best effort."""
        if not self.is_running:
            return
        try:
            self.process.kill()
        except ProcessLookupError:
            pass
        await self.process.wait()

    async def run(self, interrupt: Optional[asyncio.Event] = None) -> Optional[int]:
        """
        Start the process and wait until it exits or an interrupt arrives.

        Args:
            interrupt: Event that requests a shutdown when set. When None,
                SIGINT is trapped from before the spawn until the run ends
                and sets it.

        Returns:
            The process return code
        """
        if interrupt is not None:
            await self.start()
            return await self._wait(interrupt)

        interrupt = asyncio.Event()
        restore = _trap_sigint(interrupt)
        try:
            await self.start()
            return await self._wait(interrupt)
        finally:
            restore()

    async def _wait(self, interrupt: asyncio.Event) -> Optional[int]:
        exit_task = asyncio.ensure_future(self.process.wait())
        interrupt_task = asyncio.ensure_future(interrupt.wait())

        done, _ = await asyncio.wait(
            {exit_task, interrupt_task},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if exit_task not in done:
            self.interrupted = True
            logger.info("Interrupt received, stopping server.")
            await self.kill()

        for task in (exit_task, interrupt_task):
            if not task.done():
                task.cancel()

        return self.process.returncode


def _trap_sigint(event: asyncio.Event):
    """Set ``event`` on SIGINT; return a callable that removes the trap."""
    loop = asyncio.get_running_loop()

    try:
        loop.add_signal_handler(signal.SIGINT, event.set)
    except (NotImplementedError, RuntimeError):
        # Event loops without signal support (Windows)
        previous = signal.getsignal(signal.SIGINT)
        signal.signal(signal.SIGINT, lambda signum, frame: loop.call_soon_threadsafe(event.set))
        return lambda: signal.signal(signal.SIGINT, previous)

    return lambda: loop.remove_signal_handler(signal.SIGINT)
