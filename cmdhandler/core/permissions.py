#!/usr/bin/env python
"""
core/permissions.py
-------------------
Permission providers. A provider answers one question asynchronously: may the
author of this invocation run this command?

`LevelPermissionProvider` is the default, level-based system:
  * every command carries a `permission_level` (0 = everyone),
  * guild owners get `owner_perm_level`,
  * everyone else gets the highest of their own stored level and the stored
    levels of their roles.

The bot owner override is NOT handled here; `PermissionGate` applies it before
a provider is ever consulted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdhandler.dispatch.context import CommandContext
    from cmdhandler.plugins.base import Command
    from cmdhandler.storage.base import GuildConfigStore

logger = logging.getLogger(__name__)

EVERYONE: int = 0


def has_permission(user_level: int, required_level: int) -> bool:
    """Return True if *user_level* meets or exceeds *required_level*."""
    return user_level >= required_level


class PermissionProvider(ABC):
    @abstractmethod
    async def check_user_permission(self, ctx: CommandContext, command: Command) -> bool:
        """Return True when ``ctx.author`` may run *command*. May raise."""


class LevelPermissionProvider(PermissionProvider):
    def __init__(self, store: GuildConfigStore | None = None, owner_perm_level: int = 10) -> None:
        self.store = store
        self.owner_perm_level = owner_perm_level

    async def get_user_level(self, ctx: CommandContext) -> int:
        guild = ctx.guild
        if guild is None:
            return EVERYONE
        author = ctx.author
        if getattr(guild, "owner_id", None) == author.id:
            return self.owner_perm_level
        if self.store is None:
            return EVERYONE

        level = await self.store.get_member_permission_level(guild.id, author.id)
        role_levels = await self.store.get_role_permission_levels(guild.id)
        if role_levels:
            for role in getattr(author, "roles", None) or []:
                level = max(level, role_levels.get(role.id, EVERYONE))
        return level

    async def check_user_permission(self, ctx: CommandContext, command: Command) -> bool:
        if command.permission_level <= EVERYONE:
            return True
        user_level = await self.get_user_level(ctx)
        logger.debug(
            f"Permission level {user_level} vs required {command.permission_level} "
            f"for '{command.main_invoke}'"
        )
        return has_permission(user_level, command.permission_level)


# End of core/permissions.py
