"""Message model shared by the protocol client, the dispatcher and handlers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Message:
    """A unit of chat traffic, inbound or outbound.

    Attributes:
        text: Payload, may be empty.
        command: Protocol verb or numeric (``PRIVMSG``, ``005``...). Empty for
            synthetic lifecycle events.
        sender: Originating identity, empty for locally built messages.
        receiver: Target nick or channel.
        raw: The untouched inbound line. Only parsed messages carry it.
    """

    text: str = ""
    command: str = ""
    sender: str = ""
    receiver: str = ""
    raw: str = ""

    def to_line(self) -> str:
        """Serialize as an outbound line without the terminator.

        ``<COMMAND> [<RECEIVER>] [:<TEXT>]``
        """
        parts = [self.command]
        if self.receiver:
            parts.append(self.receiver)
        if self.text:
            parts.append(f":{self.text}")
        return " ".join(parts)

    @property
    def is_inbound(self) -> bool:
        return bool(self.raw)
