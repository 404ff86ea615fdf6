"""Shared IRC data models."""

from __future__ import annotations

from enum import Enum, auto


class SessionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    AWAITING_FIRST_BYTE = auto()
    HANDSHAKING = auto()
    READY = auto()
    CLOSING = auto()
    CLOSED = auto()
