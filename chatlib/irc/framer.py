"""Reader task that moves inbound lines from the socket to a bounded queue.

The server decides how fast lines arrive, so reading is decoupled from
parsing and dispatch. When the queue is full the reader simply waits, which
pauses further socket reads without dropping anything.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..errors import NetworkError, SessionStateError
from ..logs.logger import logger
from .connection import IRCConnection


class LineFramer:
    def __init__(self, connection: IRCConnection, capacity: int) -> None:
        self.connection = connection
        self.capacity = capacity
        self.queue: asyncio.Queue[bytes] = asyncio.Queue(maxsize=capacity)
        self.lines_read = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            raise SessionStateError("line framer already running")
        self._task = asyncio.create_task(self._read_loop(), name="irc-line-framer")

    async def get(self) -> bytes:
        """Next raw line, oldest first. Blocks until one is available."""
        return await self.queue.get()

    async def _read_loop(self) -> None:
        user = self.connection.nick
        while True:
            try:
                line = await self.connection.read_line()
            except ValueError as e:
                # Over-long record; the reader has already discarded it.
                logger.log_event(
                    "irc", "line_too_long", level=logging.WARNING, user=user, error=str(e)
                )
                continue
            except (OSError, NetworkError) as e:
                logger.log_event(
                    "irc",
                    "read_error",
                    level=logging.ERROR,
                    user=user,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return
            if not line:
                logger.log_event("irc", "read_eof", level=logging.WARNING, user=user)
                return
            if self.queue.full():
                logger.log_event(
                    "irc",
                    "queue_full",
                    level=logging.WARNING,
                    user=user,
                    size=self.queue.qsize(),
                )
            await self.queue.put(line)
            self.lines_read += 1

    async def stop(self, timeout: float) -> None:
        """Wait up to ``timeout`` for the reader to exit, then cancel it."""
        task = self._task
        if task is None:
            return
        if not task.done():
            await asyncio.wait({task}, timeout=timeout)
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
