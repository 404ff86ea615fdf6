"""IRC line classification.

Only three shapes are recognized, checked in this order:

    :<sender> <command> <receiver> [:]<text>     AddressedLine
    PING :<token>                                PingLine
    ERROR :<message>                             ErrorLine

Anything else is a MalformedLine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..message import Message

_LINE_RE = re.compile(
    r"^:(?P<sender>\S+) (?P<command>\S+) (?P<receiver>\S+)(?: :?(?P<text>.*))?$"
)
_PING_RE = re.compile(r"^PING :(?P<token>.*)$")
_ERROR_RE = re.compile(r"^ERROR :(?P<message>.*)$")


@dataclass(frozen=True, slots=True)
class AddressedLine:
    raw: str
    sender: str
    command: str
    receiver: str
    text: str

    def to_message(self) -> Message:
        return Message(
            text=self.text,
            command=self.command,
            sender=self.sender,
            receiver=self.receiver,
            raw=self.raw,
        )


@dataclass(frozen=True, slots=True)
class PingLine:
    raw: str
    token: str

    def to_message(self) -> Message:
        return Message(text=self.token, command="PING", raw=self.raw)


@dataclass(frozen=True, slots=True)
class ErrorLine:
    raw: str
    message: str


@dataclass(frozen=True, slots=True)
class MalformedLine:
    raw: str


ParsedLine = AddressedLine | PingLine | ErrorLine | MalformedLine


def strip_terminator(raw: str) -> str:
    return raw.rstrip("\r\n")


def parse_line(raw: str) -> ParsedLine:
    """Classify one inbound line (terminator optional)."""
    body = strip_terminator(raw)
    if m := _LINE_RE.match(body):
        return AddressedLine(
            raw=raw,
            sender=m.group("sender"),
            command=m.group("command"),
            receiver=m.group("receiver"),
            text=m.group("text") or "",
        )
    if m := _PING_RE.match(body):
        return PingLine(raw=raw, token=m.group("token"))
    if m := _ERROR_RE.match(body):
        return ErrorLine(raw=raw, message=m.group("message"))
    return MalformedLine(raw=raw)


def sender_nick(sender: str) -> str:
    """Nick part of a ``nick!user@host`` prefix."""
    return sender.split("!", 1)[0]
