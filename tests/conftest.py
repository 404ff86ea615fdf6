from __future__ import annotations

import asyncio
import contextlib

import pytest
import pytest_asyncio

from chatlib.errors import ChatError
from chatlib.irc.client import IRCClient
from chatlib.message import Message
from tests.fixtures.irc_server import FakeIRCServer, pump


@pytest_asyncio.fixture
async def irc_server():
    server = FakeIRCServer()
    await server.start()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def started_pump():
    """Start pump tasks for clients and cancel them after the test."""
    tasks: list[asyncio.Task[None]] = []

    def _start(client: IRCClient, sink: list[Message | ChatError]) -> asyncio.Task[None]:
        task = asyncio.create_task(pump(client, sink))
        tasks.append(task)
        return task

    yield _start
    for task in tasks:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


@pytest.fixture
def message_factory():
    def _make(text: str = "", command: str = "PRIVMSG", **kwargs: str) -> Message:
        kwargs.setdefault("sender", "alice!alice@host")
        kwargs.setdefault("receiver", "#room")
        return Message(text=text, command=command, **kwargs)

    return _make
