"""Protocol-agnostic chat host: backend contract, dispatcher and host loop."""

from .abstract import ROLE_ADMIN, ROLE_STAFF, ROLE_USER, ChatAPI  # noqa: F401
from .dispatcher import Action, ActionHandler, CommandDispatcher  # noqa: F401
from .handler import LIFECYCLE_STARTED, LIFECYCLE_STOPPING, ChatHandler  # noqa: F401
from .signal_handler import SignalHandler  # noqa: F401

__all__ = [
    "Action",
    "ActionHandler",
    "ChatAPI",
    "ChatHandler",
    "CommandDispatcher",
    "LIFECYCLE_STARTED",
    "LIFECYCLE_STOPPING",
    "ROLE_ADMIN",
    "ROLE_STAFF",
    "ROLE_USER",
    "SignalHandler",
]
