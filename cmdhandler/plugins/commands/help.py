#!/usr/bin/env python
"""
File: plugins/commands/help.py
------------------------------
Summary: Built-in help command. Lists registered commands grouped by their
command group, or shows details for one command with `help <invoke>`.

The registry answers the reserved `help` invoke with this command unless a bot
registers its own `help`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from cmdhandler.core.constants import HELP_INVOKE, CommandGroup
from cmdhandler.core.exceptions import CommandError
from cmdhandler.plugins.base import Command

if TYPE_CHECKING:
    from cmdhandler.dispatch.context import CommandContext
    from cmdhandler.dispatch.handler import CmdHandler

logger = logging.getLogger(__name__)

# Discord rejects embed field values longer than this
FIELD_VALUE_LIMIT = 1024


def chunk_lines(lines: list[str], limit: int) -> list[str]:
    """Join *lines* with newlines into blocks of at most *limit* characters.

    A single line longer than *limit* is truncated with an ellipsis.
    """
    chunks: list[str] = []
    current = ""
    for line in lines:
        if len(line) > limit:
            line = line[: limit - 1] + "…"
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            candidate = line
        current = candidate
    if current:
        chunks.append(current)
    return chunks


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            HELP_INVOKE,
            description="Show available commands.",
            help_text=f"`{HELP_INVOKE}` lists all commands, `{HELP_INVOKE} <command>` shows details.",
            group=CommandGroup.INFO,
        )

    async def execute(self, ctx: CommandContext) -> None:
        handler = ctx.handler
        if handler is None:
            raise CommandError("help is only available through a command handler")

        prefix = handler.settings.prefix
        color = handler.settings.default_color

        if ctx.args:
            await self._send_details(ctx, handler, ctx.args[0], prefix, color)
            return

        embed = discord.Embed(title="Commands", colour=color)
        for group, commands in handler.registry.by_group().items():
            lines = [
                f"`{prefix}{cmd.main_invoke}` – {cmd.description or '…'}" for cmd in commands
            ]
            for i, value in enumerate(chunk_lines(lines, FIELD_VALUE_LIMIT)):
                name = group if i == 0 else f"{group} (cont.)"
                embed.add_field(name=name, value=value, inline=False)

        if not embed.fields:
            embed.description = "No commands available."
        else:
            embed.set_footer(text=f"Use {prefix}{HELP_INVOKE} <command> for more details.")
        await ctx.channel.send(embed=embed)

    async def _send_details(
        self, ctx: CommandContext, handler: CmdHandler, invoke: str, prefix: str, color: int
    ) -> None:
        lookup = invoke.lower() if handler.settings.invoke_to_lower else invoke
        cmd = handler.registry.resolve(lookup)
        if cmd is None:
            await ctx.channel.send(f"Command `{invoke}` not found.")
            return

        embed = discord.Embed(
            title=f"{prefix}{cmd.main_invoke}",
            description=cmd.help_text or "No detailed help available.",
            colour=color,
        )
        if len(cmd.invokes) > 1:
            embed.add_field(
                name="Aliases",
                value=", ".join(f"`{prefix}{i}`" for i in cmd.invokes[1:]),
                inline=False,
            )
        embed.add_field(name="Group", value=cmd.group, inline=True)
        embed.add_field(name="Permission level", value=str(cmd.permission_level), inline=True)
        await ctx.channel.send(embed=embed)
