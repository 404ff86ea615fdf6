"""Error types and error logging helpers."""

from .internal import (  # noqa: F401
    ChatError,
    ConfigurationError,
    ConnectionClosedError,
    ConnectionSetupError,
    LivenessTimeoutError,
    MalformedLineError,
    NetworkError,
    ParsingError,
    ServerError,
    SessionStateError,
)

__all__ = [
    "ChatError",
    "ConfigurationError",
    "ConnectionClosedError",
    "ConnectionSetupError",
    "LivenessTimeoutError",
    "MalformedLineError",
    "NetworkError",
    "ParsingError",
    "ServerError",
    "SessionStateError",
]
