"""SignalHandler - turns SIGINT/SIGTERM into a single shutdown request."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable

from ..logs.logger import logger


class SignalHandler:
    """Handler for system signals and shutdown coordination."""

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, on_shutdown: Callable[[], None]) -> None:
        self.on_shutdown = on_shutdown
        self.shutdown_initiated = False
        self._installed: list[signal.Signals] = []

    @property
    def installed(self) -> tuple[signal.Signals, ...]:
        return tuple(self._installed)

    def handle(self, signum: int) -> None:
        # Idempotent: only the first signal requests shutdown
        if self.shutdown_initiated:
            return
        logger.log_event("app", "signal_received", level=logging.WARNING, signal=signum)
        self.shutdown_initiated = True
        self.on_shutdown()

    def setup_signal_handlers(self) -> None:
        """Register the handler on the running loop (main thread only)."""
        loop = asyncio.get_running_loop()
        for sig in self.SIGNALS:
            try:
                loop.add_signal_handler(sig, self.handle, sig)
            except (NotImplementedError, RuntimeError, ValueError) as e:
                logger.log_event(
                    "app",
                    "signal_handler_unavailable",
                    level=logging.DEBUG,
                    signal=int(sig),
                    error=str(e),
                )
                continue
            self._installed.append(sig)

    def remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        while self._installed:
            loop.remove_signal_handler(self._installed.pop())
