"""chatlib: an asyncio IRC client and command dispatcher for chat bots."""

from .chat import ChatAPI, ChatHandler, CommandDispatcher  # noqa: F401
from .config import IRCConfig, TLSSettings  # noqa: F401
from .irc import IRCClient  # noqa: F401
from .message import Message  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "ChatAPI",
    "ChatHandler",
    "CommandDispatcher",
    "IRCClient",
    "IRCConfig",
    "Message",
    "TLSSettings",
]
