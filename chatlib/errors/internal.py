"""Centralized error hierarchy for the chat client.

These exceptions give the host loop semantic categories to decide what is
fatal and what is logged and skipped.

Classes:
  ChatError              – Base for all client errors.
  ConfigurationError     – Missing or invalid settings, fatal at construction.
  ConnectionSetupError   – Dial / TLS failure, fatal to start.
  LivenessTimeoutError   – Peer sent nothing within the dial timeout.
  SessionStateError      – Operation not valid in the current session state.
  NetworkError           – Read/write failure on an established transport.
  ConnectionClosedError  – Write attempted after the transport was closed.
  ParsingError           – Inbound data could not be interpreted.
  MalformedLineError     – Line matched none of the recognized shapes.
  ServerError            – Peer sent an ERROR line; the session is finished.
"""

from __future__ import annotations

from collections.abc import Mapping


class ChatError(Exception):
    """Base class for all chat client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigurationError(ChatError):
    """Raised for missing or invalid configuration, never retried."""


class ConnectionSetupError(ChatError):
    """Raised when the transport cannot be established (dial, TLS)."""


class LivenessTimeoutError(ChatError):
    """Raised when no inbound line arrives within the dial timeout.

    Kept distinct from ConnectionSetupError so a host can decide whether
    to retry externally.
    """


class SessionStateError(ChatError):
    """Raised when an operation does not fit the current session state."""


class NetworkError(ChatError):
    """Raised for transport read/write failures after connection."""


class ConnectionClosedError(NetworkError):
    """Raised when writing to a transport that is closed or never opened."""


class ParsingError(ChatError):
    """Raised when inbound data cannot be interpreted."""


class MalformedLineError(ParsingError):
    """Raised for a line that matches no recognized shape.

    Recoverable: the caller logs it and keeps reading.
    """

    def __init__(self, raw: str) -> None:
        super().__init__(
            f"line does not match any known pattern: {raw!r}", data={"raw": raw}
        )
        self.raw = raw


class ServerError(ChatError):
    """Raised when the server sends an ERROR line.

    Terminal for the session; the transport should be considered unusable.
    """

    def __init__(self, reason: str, *, raw: str = "") -> None:
        super().__init__(f"server error: {reason}", data={"raw": raw})
        self.reason = reason
        self.raw = raw


__all__ = [
    "ChatError",
    "ConfigurationError",
    "ConnectionSetupError",
    "LivenessTimeoutError",
    "SessionStateError",
    "NetworkError",
    "ConnectionClosedError",
    "ParsingError",
    "MalformedLineError",
    "ServerError",
]
