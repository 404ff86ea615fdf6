"""Host loop wiring a ChatAPI to a CommandDispatcher."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..errors import ChatError, MalformedLineError, ServerError
from ..errors.handling import log_error
from ..logs.logger import logger
from ..message import Message
from .abstract import ChatAPI
from .dispatcher import CommandDispatcher
from .signal_handler import SignalHandler

LIFECYCLE_STARTED = "started"
LIFECYCLE_STOPPING = "stopping"


class ChatHandler:
    """Owns the receive loop and the lifecycle of one chat backend.

    ``run()`` starts pumping ``receive_message`` before ``api.start()`` so the
    backend can observe its first inbound line, dispatches every message in
    arrival order, and shuts the backend down when a stop is requested
    (signal, :meth:`request_stop`, or a fatal server error).

    Lifecycle hooks are synthetic messages with an empty command and the
    text ``started`` / ``stopping``; register actions with command ``""``
    to receive them.
    """

    def __init__(
        self, api: ChatAPI, dispatcher: CommandDispatcher | None = None
    ) -> None:
        self.api = api
        self.dispatcher = dispatcher or CommandDispatcher()
        self.signal_handler = SignalHandler(self.request_stop)
        self._stop_event = asyncio.Event()
        self._receive_task: asyncio.Task[None] | None = None

    def request_stop(self) -> None:
        self._stop_event.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    async def run(self, handle_signals: bool = True) -> None:
        """Start the backend and block until a stop is requested.

        Signal handlers are installed before ``api.start()``; a signal that
        arrives while starting takes effect once the start completes, so the
        backend still gets to say goodbye.

        Raises:
            ChatError: If the backend fails to start.
        """
        if handle_signals:
            self.signal_handler.setup_signal_handlers()
        try:
            await self._run()
        finally:
            if handle_signals:
                self.signal_handler.remove_signal_handlers()

    async def _run(self) -> None:
        self._receive_task = asyncio.create_task(
            self._receive_loop(), name="chat-receive-loop"
        )
        try:
            await self.api.start()
        except BaseException:
            await self._cancel_receive_loop()
            raise

        logger.log_event("chat", "started")
        try:
            await self.dispatcher.dispatch(Message(text=LIFECYCLE_STARTED))
            await self._stop_event.wait()
        finally:
            await self._shutdown()

    async def _shutdown(self) -> None:
        logger.log_event("chat", "stopping")
        await self.dispatcher.dispatch(Message(text=LIFECYCLE_STOPPING))
        try:
            await self.api.stop()
        except ChatError as e:
            log_error("Error stopping chat backend", e)
        await self._cancel_receive_loop()
        logger.log_event("chat", "stopped")

    async def _cancel_receive_loop(self) -> None:
        task = self._receive_task
        self._receive_task = None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _receive_loop(self) -> None:
        while True:
            try:
                message = await self.api.receive_message()
            except MalformedLineError as e:
                log_error("Discarding unrecognized line", e, level=logging.WARNING)
                continue
            except ServerError as e:
                log_error("Server ended the session", e)
                self.request_stop()
                return
            except ChatError as e:
                log_error("Error receiving message", e)
                continue
            await self.dispatcher.dispatch(message)
