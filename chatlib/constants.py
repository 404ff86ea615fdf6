"""
Configuration constants for the chatlib IRC client

This module contains the defaults used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Identity
DEFAULT_NICK = os.getenv("DEFAULT_NICK", "freyabot")
DEFAULT_REALNAME = os.getenv("DEFAULT_REALNAME", "FreyaBot")
QUIT_MESSAGE = os.getenv("QUIT_MESSAGE", "I must go! My people need me.")

# Ports
DEFAULT_TLS_PORT = _get_env_int("DEFAULT_TLS_PORT", 6697)
DEFAULT_PLAIN_PORT = _get_env_int("DEFAULT_PLAIN_PORT", 6667)

# Timing (seconds)
DEFAULT_LOGIN_DELAY_SECONDS = _get_env_float(
    "DEFAULT_LOGIN_DELAY_SECONDS", 5.0
)  # Settle delay before NICK/USER, servers often reject an immediate login
DEFAULT_DIAL_TIMEOUT_SECONDS = _get_env_float(
    "DEFAULT_DIAL_TIMEOUT_SECONDS", 10.0
)  # Bounds both the TCP/TLS dial and the wait for the first inbound line
DEFAULT_KEEPALIVE_SECONDS = _get_env_float(
    "DEFAULT_KEEPALIVE_SECONDS", 60.0
)  # TCP keep-alive interval
FRAMER_STOP_TIMEOUT_SECONDS = _get_env_float(
    "FRAMER_STOP_TIMEOUT_SECONDS", 1.0
)  # How long stop() waits for the reader task to notice the closed transport

# Buffers
DEFAULT_MSG_BUFFER_SIZE = _get_env_int(
    "DEFAULT_MSG_BUFFER_SIZE", 100
)  # Inbound line queue capacity
STREAM_READ_LIMIT = _get_env_int(
    "STREAM_READ_LIMIT", 2**16
)  # Longest inbound record accepted by the reader

# Protocol
WRITE_TERMINATOR = "\n"
READY_COMMAND = "005"  # RPL_ISUPPORT, the server has finished registration

# Config file
CONF_FILE_ENV = "CHATLIB_CONF_FILE"  # Explicit config path, skips the search
CONF_FILE_NAME = os.getenv("CHATLIB_CONF_NAME", "chatlib.conf")
CONF_SEARCH_DIRS = (
    "/etc/chatlib",
    "~/.config/chatlib",
    "~/.chatlib",
    ".",
)  # First directory holding CONF_FILE_NAME wins
ENV_PREFIX = "CHATLIB"  # CHATLIB_IRC_SERVER, CHATLIB_LOG_LEVEL...
