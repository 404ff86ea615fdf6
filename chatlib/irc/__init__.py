"""IRC subsystem package.

Contains the connection, line framer, parser, handshake, built-in actions
and the client that ties them together.
"""

from .actions import IRCActions, register_builtin_actions  # noqa: F401
from .client import IRCClient  # noqa: F401
from .connection import IRCConnection  # noqa: F401
from .framer import LineFramer  # noqa: F401
from .handshake import SessionHandshake  # noqa: F401
from .models import SessionState  # noqa: F401
from .parser import (  # noqa: F401
    AddressedLine,
    ErrorLine,
    MalformedLine,
    ParsedLine,
    PingLine,
    parse_line,
)

__all__ = [
    "AddressedLine",
    "ErrorLine",
    "IRCActions",
    "IRCClient",
    "IRCConnection",
    "LineFramer",
    "MalformedLine",
    "ParsedLine",
    "PingLine",
    "SessionHandshake",
    "SessionState",
    "parse_line",
    "register_builtin_actions",
]
