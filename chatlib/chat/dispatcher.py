"""Data-driven command dispatch."""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol

from ..logs.logger import logger
from ..message import Message


class ActionHandler(Protocol):
    """Callable invoked for a matching message.

    Receives the pattern match against the message text and the message.
    May be a coroutine function or a plain function.
    """

    def __call__(
        self, match: re.Match[str], message: Message
    ) -> Awaitable[None] | None: ...


@dataclass(frozen=True, slots=True)
class Action:
    """A registered ``(command, pattern) -> handler`` binding.

    ``roles`` is the declared requirement for the sender; checking it is up
    to whoever wraps the handler.
    """

    command: str
    pattern: re.Pattern[str]
    handler: ActionHandler
    roles: tuple[str, ...] = ()
    example: str = ""
    help: str = ""

    def match(self, message: Message) -> re.Match[str] | None:
        if self.command != message.command:
            return None
        return self.pattern.search(message.text)

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", type(self.handler).__name__)


class CommandDispatcher:
    """Ordered list of actions evaluated against every dispatched message.

    Every matching action fires, in registration order. A failing handler is
    logged and does not stop the remaining ones.
    """

    def __init__(self) -> None:
        self._actions: list[Action] = []

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self._actions)

    def register(
        self,
        command: str,
        pattern: str,
        handler: ActionHandler,
        *roles: str,
        example: str = "",
        help: str = "",  # noqa: A002
    ) -> Action:
        """Append an action.

        Raises:
            re.error: If ``pattern`` does not compile.
        """
        action = Action(
            command=command,
            pattern=re.compile(pattern),
            handler=handler,
            roles=tuple(roles),
            example=example,
            help=help,
        )
        self._actions.append(action)
        logger.log_event(
            "chat",
            "action_registered",
            level=logging.DEBUG,
            command=command or "<lifecycle>",
            pattern=pattern,
            handler=action.name,
        )
        return action

    async def dispatch(self, message: Message) -> int:
        """Run every matching action for ``message`` and return how many fired."""
        fired = 0
        for action in self._actions:
            match = action.match(message)
            if match is None:
                continue
            fired += 1
            try:
                result = action.handler(match, message)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "chat",
                    "action_error",
                    level=logging.ERROR,
                    command=message.command,
                    handler=action.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return fired

    def help_lines(self) -> list[str]:
        return [f"{a.example} - {a.help}" for a in self._actions if a.example]
