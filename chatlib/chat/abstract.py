"""Chat backend abstraction layer.

The host loop only depends on this contract, so any protocol client that
implements it can be plugged in:

    start()                    connect and complete the login handshake
    stop()                     say goodbye and close the transport
    send_message(message)      write one outbound message
    receive_message()          next inbound message (blocks until one arrives)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..message import Message

ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
ROLE_USER = "user"


class ChatAPI(ABC):
    """Abstract chat backend interface."""

    @abstractmethod
    async def start(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def stop(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def send_message(self, message: Message) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def receive_message(self) -> Message:  # pragma: no cover - interface
        raise NotImplementedError
