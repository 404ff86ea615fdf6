import asyncio
import logging

import pytest

from chatlib.chat.abstract import ROLE_ADMIN
from chatlib.chat.dispatcher import CommandDispatcher
from chatlib.errors import NetworkError
from chatlib.irc.client import IRCClient
from chatlib.irc.models import SessionState
from chatlib.message import Message

from tests.fixtures.irc_server import make_config


class DummyIRC(IRCClient):
    def __init__(self, **settings) -> None:  # keep base init
        super().__init__(make_config(6667, **settings))
        self.sent: list[str] = []
        self.pings = 0

    async def send_message(self, message: Message) -> None:  # capture instead of network
        self.sent.append(message.to_line())

    async def ping(self) -> None:
        self.pings += 1


def _privmsg(text: str, receiver: str = "#room") -> Message:
    return Message(
        text=text,
        command="PRIVMSG",
        sender="admin!admin@host",
        receiver=receiver,
        raw=f":admin!admin@host PRIVMSG {receiver} :{text}\r\n",
    )


@pytest.fixture
def wired():
    client = DummyIRC(channels=["#a", "#b"])
    disp = CommandDispatcher()
    client.register_actions(disp)
    return client, disp


def test_builtin_actions_registered(wired):
    _client, disp = wired
    assert [(a.command, a.roles) for a in disp.actions] == [
        ("005", ()),
        ("PRIVMSG", (ROLE_ADMIN,)),
        ("PRIVMSG", (ROLE_ADMIN,)),
        ("PRIVMSG", ()),
    ]
    assert "!join #channel - Join the specified channel" in disp.help_lines()


@pytest.mark.asyncio
async def test_ready_joins_channels_once(wired):
    client, disp = wired
    client.state = SessionState.HANDSHAKING
    ready = Message(text="CASEMAPPING=rfc1459", command="005", receiver="freyabot")

    await disp.dispatch(ready)
    await disp.dispatch(ready)
    assert client.ready
    assert client.sent == ["JOIN #a", "JOIN #b"]


@pytest.mark.asyncio
async def test_ready_ignored_before_login(wired):
    client, disp = wired
    await disp.dispatch(Message(text="x", command="005", receiver="freyabot"))
    assert client.state is SessionState.DISCONNECTED
    assert client.sent == []


@pytest.mark.asyncio
async def test_join_command(wired):
    client, disp = wired
    await disp.dispatch(_privmsg("!join #newchan"))
    assert client.sent == ["JOIN #newchan"]


@pytest.mark.asyncio
async def test_join_without_channel_does_nothing(wired):
    client, disp = wired
    assert await disp.dispatch(_privmsg("!join")) == 0
    assert client.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("!part #old", "PART #old"),
        ("!leave #old", "PART #old"),
        ("!part", "PART #room"),
        ("!leave", "PART #room"),
    ],
)
async def test_part_and_leave(wired, text, expected):
    client, disp = wired
    await disp.dispatch(_privmsg(text))
    assert client.sent == [expected]


@pytest.mark.asyncio
async def test_ping_command(wired):
    client, disp = wired
    await disp.dispatch(_privmsg("!ping", receiver="freyabot"))
    assert client.pings == 1
    assert client.sent == []


@pytest.mark.asyncio
async def test_commands_only_at_start_of_text(wired):
    client, disp = wired
    assert await disp.dispatch(_privmsg("please !join #x")) == 0
    assert await disp.dispatch(_privmsg("!pingpong")) == 0
    assert await disp.dispatch(_privmsg("!partial")) == 0
    assert client.sent == []
    assert client.pings == 0


@pytest.mark.asyncio
async def test_login_sends_nick_then_user():
    client = DummyIRC(nick="bob")
    await client.handshake.login()
    assert client.sent == ["NICK bob", "USER bob 0 * :FreyaBot (bob)"]


class BrokenJoinIRC(DummyIRC):
    """Fails the first JOIN write."""

    async def send_message(self, message: Message) -> None:
        if message.command == "JOIN":
            raise NetworkError(f"write failed for {message.receiver}")
        await super().send_message(message)


@pytest.mark.asyncio
async def test_login_waits_settle_delay():
    client = DummyIRC(nick="bob", login_delay=0.3)
    loop = asyncio.get_running_loop()
    started = loop.time()
    await client.handshake.login()
    assert loop.time() - started >= 0.3
    assert client.sent[0] == "NICK bob"


@pytest.mark.asyncio
async def test_first_failed_join_aborts_the_rest():
    client = BrokenJoinIRC(channels=["#a", "#b"])
    with pytest.raises(NetworkError, match="#a"):
        await client.handshake.join_channels()
    assert client.sent == []


@pytest.mark.asyncio
async def test_ready_join_failure_is_logged(caplog):
    client = BrokenJoinIRC(channels=["#a", "#b"])
    disp = CommandDispatcher()
    client.register_actions(disp)
    client.set_state(SessionState.HANDSHAKING)

    await disp.dispatch(Message(text="x", command="005", receiver="freyabot"))
    assert client.ready
    assert client.sent == []
    assert "write failed for #a" in caplog.text


@pytest.mark.asyncio
async def test_mark_ready_logs_state_change(caplog):
    client = DummyIRC()
    client.set_state(SessionState.HANDSHAKING)
    with caplog.at_level(logging.DEBUG, logger="chatlib"):
        assert await client.handshake.mark_ready()
        assert not await client.handshake.mark_ready()
    assert "HANDSHAKING -> READY" in caplog.text
