"""Liveness detection, login and channel joins."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..errors import LivenessTimeoutError, SessionStateError
from ..logs.logger import logger
from ..message import Message
from .models import SessionState

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient


class SessionHandshake:
    """Registration sequence for one connection.

    The protocol has no "ready to log in" signal, so the first parsed inbound
    line is taken as proof that the server is talking to us.
    """

    def __init__(self, client: IRCClient) -> None:
        self.client = client
        self._first_line = asyncio.Event()
        self._waiting = False

    @property
    def live(self) -> bool:
        return self._first_line.is_set()

    def observe_line(self) -> None:
        self._first_line.set()

    async def await_liveness(self, timeout: float) -> None:
        """Wait for the first parsed inbound line.

        Raises:
            LivenessTimeoutError: If nothing arrives within ``timeout`` seconds.
            SessionStateError: If another wait is already in flight.
        """
        if self._waiting:
            raise SessionStateError("liveness wait already in progress")
        self._waiting = True
        try:
            await asyncio.wait_for(self._first_line.wait(), timeout=timeout)
        except TimeoutError as e:
            logger.log_event(
                "irc",
                "liveness_timeout",
                level=logging.ERROR,
                user=self.client.config.nick,
                timeout=timeout,
            )
            raise LivenessTimeoutError(
                f"no data from server within {timeout}s", data={"timeout": timeout}
            ) from e
        finally:
            self._waiting = False
        logger.log_event(
            "irc", "liveness_confirmed", level=logging.DEBUG, user=self.client.config.nick
        )

    async def login(self) -> None:
        """Send NICK and USER after the configured settle delay.

        Errors from either write propagate to the caller.
        """
        config = self.client.config
        logger.log_event(
            "irc",
            "login_wait",
            level=logging.DEBUG,
            user=config.nick,
            delay=config.login_delay,
        )
        await asyncio.sleep(config.login_delay)
        await self.client.send_message(Message(command="NICK", receiver=config.nick))
        await self.client.send_message(
            Message(command="USER", receiver=f"{config.nick} 0 *", text=config.realname)
        )
        logger.log_event("irc", "login_sent", user=config.nick, realname=config.realname)

    async def join_channels(self) -> None:
        """Join every configured channel in order; the first failure aborts the rest."""
        for channel in self.client.config.channels:
            await self.client.join_channel(channel)

    async def mark_ready(self) -> bool:
        """Handle the server's registration-complete signal.

        Servers send the signal more than once, so only the first call joins
        channels. Returns True when this call made the session ready.
        """
        if self.client.state is not SessionState.HANDSHAKING:
            return False
        self.client.set_state(SessionState.READY)
        logger.log_event(
            "irc",
            "ready",
            user=self.client.config.nick,
            channels=len(self.client.config.channels),
        )
        await self.join_channels()
        return True
