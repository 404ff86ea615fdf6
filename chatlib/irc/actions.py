"""Built-in actions every IRC client registers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ..chat.abstract import ROLE_ADMIN
from ..constants import READY_COMMAND
from ..logs.logger import logger
from ..message import Message
from .parser import sender_nick

if TYPE_CHECKING:  # pragma: no cover
    from ..chat.dispatcher import CommandDispatcher
    from .client import IRCClient

JOIN_PATTERN = r"^!join\s+(?P<channel>\S+)"
LEAVE_PATTERN = r"^!(?:part|leave)(?:\s+(?P<channel>\S+))?\s*$"
PING_PATTERN = r"^!ping\b"


class IRCActions:
    def __init__(self, client: IRCClient) -> None:
        self.client = client

    async def on_ready(self, match: re.Match[str], message: Message) -> None:
        await self.client.handshake.mark_ready()

    async def join_channel(self, match: re.Match[str], message: Message) -> None:
        channel = match.group("channel")
        logger.log_event(
            "irc",
            "join_requested",
            level=logging.DEBUG,
            user=self.client.config.nick,
            channel=channel,
            requested_by=sender_nick(message.sender),
        )
        await self.client.join_channel(channel)

    async def leave_channel(self, match: re.Match[str], message: Message) -> None:
        # Without an argument leave the channel the command was said in.
        channel = match.group("channel") or message.receiver
        logger.log_event(
            "irc",
            "leave_requested",
            level=logging.DEBUG,
            user=self.client.config.nick,
            channel=channel,
            requested_by=sender_nick(message.sender),
        )
        await self.client.leave_channel(channel)

    async def ping(self, match: re.Match[str], message: Message) -> None:
        await self.client.ping()


def register_builtin_actions(
    dispatcher: CommandDispatcher, client: IRCClient
) -> IRCActions:
    actions = IRCActions(client)
    dispatcher.register(READY_COMMAND, "", actions.on_ready)
    dispatcher.register(
        "PRIVMSG",
        JOIN_PATTERN,
        actions.join_channel,
        ROLE_ADMIN,
        example="!join #channel",
        help="Join the specified channel",
    )
    dispatcher.register(
        "PRIVMSG",
        LEAVE_PATTERN,
        actions.leave_channel,
        ROLE_ADMIN,
        example="!part #channel",
        help="Leave the specified channel, or this one",
    )
    dispatcher.register(
        "PRIVMSG",
        PING_PATTERN,
        actions.ping,
        example="!ping",
        help="Ping the server and ask for a pong",
    )
    return actions
