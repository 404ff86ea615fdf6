"""Async IRC client implementing the ChatAPI contract."""

from __future__ import annotations

import logging
import ssl

from ..chat.abstract import ChatAPI
from ..chat.dispatcher import CommandDispatcher
from ..config.model import IRCConfig
from ..config.tls import build_ssl_context
from ..constants import FRAMER_STOP_TIMEOUT_SECONDS, QUIT_MESSAGE
from ..errors import (
    ChatError,
    MalformedLineError,
    ServerError,
    SessionStateError,
)
from ..logs.logger import logger
from ..message import Message
from .actions import IRCActions, register_builtin_actions
from .connection import IRCConnection
from .framer import LineFramer
from .handshake import SessionHandshake
from .models import SessionState
from .parser import AddressedLine, ErrorLine, PingLine, parse_line


class IRCClient(ChatAPI):
    """IRC backend for the chat host.

    One instance drives exactly one connection: ``start()`` may only be
    called once.
    """

    def __init__(
        self, config: IRCConfig, *, ssl_context: ssl.SSLContext | None = None
    ) -> None:
        self.config = config
        if ssl_context is None and config.tls is not None:
            ssl_context = build_ssl_context(config.tls)
        self.state = SessionState.DISCONNECTED
        self.connection = IRCConnection(
            config.host,
            config.port,
            dial_timeout=config.dial_timeout,
            keepalive=config.keepalive,
            ssl_context=ssl_context,
            server_hostname=config.server_name,
            nick=config.nick,
        )
        self.framer = LineFramer(self.connection, config.msg_buffer_size)
        self.handshake = SessionHandshake(self)

    @classmethod
    def from_config(
        cls, config: IRCConfig, ssl_context: ssl.SSLContext | None = None
    ) -> IRCClient:
        return cls(config, ssl_context=ssl_context)

    @property
    def ready(self) -> bool:
        return self.state is SessionState.READY

    def set_state(self, new_state: SessionState) -> None:
        """Move to ``new_state``, logging the transition."""
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.config.nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def register_actions(self, dispatcher: CommandDispatcher) -> IRCActions:
        return register_builtin_actions(dispatcher, self)

    async def start(self) -> None:
        """Connect, wait for the server to speak, then log in.

        Raises:
            SessionStateError: If the client was already started.
            ConnectionSetupError: If the server cannot be reached.
            LivenessTimeoutError: If the server stays silent for ``dial_timeout``.
            NetworkError: If the login lines cannot be written.
        """
        if self.state is not SessionState.DISCONNECTED:
            raise SessionStateError(
                f"cannot start from state {self.state.name}",
                data={"state": self.state.name},
            )
        self.set_state(SessionState.CONNECTING)
        try:
            await self.connection.connect()
            self.set_state(SessionState.AWAITING_FIRST_BYTE)
            self.framer.start()
            await self.handshake.await_liveness(self.config.dial_timeout)
            self.set_state(SessionState.HANDSHAKING)
            await self.handshake.login()
        except BaseException as e:
            logger.log_event(
                "irc",
                "start_failed",
                level=logging.ERROR,
                user=self.config.nick,
                error=str(e),
                error_type=type(e).__name__,
            )
            await self._close_transport()
            raise
        logger.log_event(
            "irc", "started", user=self.config.nick, server=self.connection.address
        )

    async def stop(self) -> None:
        """Send QUIT (best effort) and close the transport. Idempotent."""
        if self.state in (SessionState.CLOSING, SessionState.CLOSED):
            return
        self.set_state(SessionState.CLOSING)
        try:
            await self.send_message(Message(command="QUIT", text=QUIT_MESSAGE))
        except ChatError as e:
            logger.log_event(
                "irc",
                "quit_failed",
                level=logging.WARNING,
                user=self.config.nick,
                error=str(e),
            )
        await self._close_transport()
        logger.log_event("irc", "stopped", user=self.config.nick)

    async def _close_transport(self) -> None:
        await self.connection.disconnect()
        await self.framer.stop(FRAMER_STOP_TIMEOUT_SECONDS)
        self.set_state(SessionState.CLOSED)

    async def send_message(self, message: Message) -> None:
        await self.connection.send_line(message.to_line())

    async def receive_message(self) -> Message:
        """Next inbound message.

        PING lines are answered with PONG before being returned.

        Raises:
            MalformedLineError: For an unrecognized line (safe to keep reading).
            ServerError: For an ERROR line; the session is over.
            NetworkError: If the PONG reply cannot be written.
        """
        data = await self.framer.get()
        line = data.decode("utf-8", errors="ignore")
        logger.log_event(
            "irc",
            "line_received",
            level=logging.DEBUG,
            user=self.config.nick,
            line=line.rstrip("\r\n"),
        )
        parsed = parse_line(line)
        if isinstance(parsed, AddressedLine):
            self.handshake.observe_line()
            return parsed.to_message()
        if isinstance(parsed, PingLine):
            self.handshake.observe_line()
            await self.pong(parsed.token)
            return parsed.to_message()
        if isinstance(parsed, ErrorLine):
            logger.log_event(
                "irc",
                "server_error",
                level=logging.ERROR,
                user=self.config.nick,
                reason=parsed.message,
            )
            raise ServerError(parsed.message, raw=line)
        raise MalformedLineError(line)

    async def ping(self) -> None:
        await self.connection.ping()

    async def pong(self, token: str) -> None:
        await self.send_message(Message(command="PONG", text=token))

    async def join_channel(self, channel: str) -> None:
        await self.send_message(Message(command="JOIN", receiver=channel))
        logger.log_event("irc", "join_sent", user=self.config.nick, channel=channel)

    async def leave_channel(self, channel: str) -> None:
        await self.send_message(Message(command="PART", receiver=channel))
        logger.log_event("irc", "part_sent", user=self.config.nick, channel=channel)
