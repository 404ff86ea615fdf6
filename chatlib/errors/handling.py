from __future__ import annotations

import logging

from ..logging_config import log_structured_error
from .internal import (
    ChatError,
    ConfigurationError,
    ConnectionSetupError,
    LivenessTimeoutError,
    NetworkError,
    ParsingError,
    ServerError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception to the error category used in structured logs."""
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, LivenessTimeoutError):
        return "timeout"
    if isinstance(error, ConnectionSetupError):
        return "connect"
    if isinstance(error, NetworkError | OSError | ConnectionError):
        return "network"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, ServerError):
        return "server"
    if isinstance(error, ChatError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, object] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level, ERROR unless the caller knows better.
    """
    merged: dict[str, object] = {}
    if isinstance(error, ChatError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error,
        context=merged or None,
        level=level,
    )
