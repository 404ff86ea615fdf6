"""Local IRC peer and helpers shared by the client tests."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

from chatlib.config.model import IRCConfig
from chatlib.errors import ChatError
from chatlib.irc.client import IRCClient
from chatlib.message import Message

# Server greeting sent before registration; any parsed line proves liveness.
MSG_INIT = (
    ":irc.test.foo NOTICE * :*** Looking up your hostname...\r\n"
    ":irc.test.foo NOTICE * :*** Checking Ident\r\n"
    ":irc.test.foo NOTICE * :*** Couldn't look up your hostname\r\n"
)
MSG_ACCEPT = (
    ":irc.test.foo 001 freyabot :Welcome to the freyabot IRC Network\r\n"
    ":irc.test.foo 002 freyabot :Your host is irc.test.foo, running version test123\r\n"
    ":irc.test.foo 003 freyabot :This server was created Jun 27 2022 at 15:27:35\r\n"
    ":irc.test.foo 004 freyabot irc.test.foo test123 asdf fdsa afsd\r\n"
    ":irc.test.foo 005 freyabot CASEMAPPING=rfc1459 NETWORK=Test :are supported by this server\r\n"
)


class FakeIRCServer:
    """Local TCP peer; each accepted connection is queued for the test."""

    def __init__(self) -> None:
        self.server: asyncio.AbstractServer | None = None
        self.port = 0
        self._accepted: asyncio.Queue[
            tuple[asyncio.StreamReader, asyncio.StreamWriter]
        ] = asyncio.Queue()
        self._writers: list[asyncio.StreamWriter] = []

    async def start(self) -> None:
        self.server = await asyncio.start_server(self._on_client, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]

    async def _on_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._writers.append(writer)
        await self._accepted.put((reader, writer))

    async def accept(
        self, timeout: float = 2.0
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        return await asyncio.wait_for(self._accepted.get(), timeout=timeout)

    async def close(self) -> None:
        for writer in self._writers:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()


async def read_lines(
    reader: asyncio.StreamReader, count: int, timeout: float = 2.0
) -> list[str]:
    lines = []
    for _ in range(count):
        data = await asyncio.wait_for(reader.readline(), timeout=timeout)
        lines.append(data.decode())
    return lines


def make_config(port: int, **overrides: Any) -> IRCConfig:
    settings: dict[str, Any] = {
        "host": "127.0.0.1",
        "port": port,
        "dial_timeout": 2.0,
        "login_delay": 0,
    }
    settings.update(overrides)
    return IRCConfig.build(**settings)


async def pump(client: IRCClient, sink: list[Message | ChatError]) -> None:
    """Stand-in for the host receive loop: collect messages and errors."""
    while True:
        try:
            sink.append(await client.receive_message())
        except ChatError as e:
            sink.append(e)


