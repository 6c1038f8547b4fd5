"""
plugins/base.py
---------------
Base class for commands. A command is both the descriptor the registry stores
(invokes, group, permission level) and the body the supervisor runs.

Writing a command:
1) Subclass `Command` and pass its invokes to `super().__init__`.
2) Implement `execute(ctx)` (plain or `async`). Raise to signal failure.
3) Optionally override `on_failure(error, ctx)` to report errors differently.
4) Register an instance with `CmdHandler.register_command(...)`.

Plain functions can be registered with the `CommandRegistry.command` decorator,
which wraps them in a `FunctionCommand`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

import discord

from cmdhandler.core.constants import ERROR_COLOR, CommandGroup

if TYPE_CHECKING:
    from cmdhandler.dispatch.context import CommandContext

logger = logging.getLogger(__name__)

CommandFunc = Callable[["CommandContext"], Awaitable[None] | None]


def normalize_group(group: str | CommandGroup | None) -> str:
    if group is None:
        return CommandGroup.MISC.value
    if isinstance(group, CommandGroup):
        return group.value
    return group.strip().upper() or CommandGroup.MISC.value


class Command(ABC):
    def __init__(
        self,
        invokes: str | Iterable[str],
        description: str = "",
        help_text: str = "",
        permission_level: int = 0,
        group: str | CommandGroup | None = None,
    ) -> None:
        if isinstance(invokes, str):
            invokes = [invokes]
        self.invokes: tuple[str, ...] = tuple(i.strip() for i in invokes if i and i.strip())
        self.description = description
        self.help_text = help_text or description
        self.permission_level = permission_level
        self.group: str = normalize_group(group)

    @property
    def main_invoke(self) -> str:
        return self.invokes[0] if self.invokes else ""

    @abstractmethod
    def execute(self, ctx: CommandContext) -> Awaitable[None] | None:
        """Run the command. Raising (or rejecting) marks the invocation as failed."""

    async def on_failure(self, error: BaseException, ctx: CommandContext) -> None:
        """Report *error* back to the channel the command was invoked in."""
        embed = discord.Embed(
            title="Error",
            description=str(error) or type(error).__name__,
            colour=ERROR_COLOR,
        )
        await ctx.channel.send(embed=embed)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} invokes={list(self.invokes)!r} group={self.group}>"


class FunctionCommand(Command):
    """Adapter turning a plain function or coroutine function into a `Command`."""

    def __init__(self, func: CommandFunc, invokes: str | Iterable[str], **kwargs: Any) -> None:
        if not kwargs.get("description") and func.__doc__:
            # first docstring line doubles as the help listing text
            kwargs["description"] = func.__doc__.strip().splitlines()[0]
        super().__init__(invokes, **kwargs)
        self.func = func

    def execute(self, ctx: CommandContext) -> Awaitable[None] | None:
        return self.func(ctx)
