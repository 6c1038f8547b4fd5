from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import discord

if TYPE_CHECKING:
    from cmdhandler.dispatch.handler import CmdHandler


@dataclass(frozen=True)
class CommandContext:
    """Everything a command needs about one invocation.

    Created fresh for each message that parses as a command and discarded once
    the command finished or failed.
    """

    message: discord.Message
    args: list[str] = field(default_factory=list)
    invoke: str = ""
    handler: CmdHandler | None = None

    @property
    def author(self) -> Any:
        """The invoking user (a ``discord.Member`` inside guilds)."""
        return self.message.author

    @property
    def guild(self) -> discord.Guild | None:
        return self.message.guild

    @property
    def member(self) -> discord.Member | None:
        return self.message.author if self.message.guild is not None else None  # type: ignore[return-value]

    @property
    def channel(self) -> Any:
        return self.message.channel

    @property
    def content(self) -> str:
        return self.message.content
