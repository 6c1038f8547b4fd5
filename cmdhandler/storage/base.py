"""
storage/base.py - Interface of the guild configuration store.

The dispatch pipeline only needs `get_guild_prefix`; the default permission
provider reads the permission level methods. Implementations must be safe to
call concurrently from independent message tasks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class GuildConfigStore(ABC):
    async def connect(self) -> None:
        """Prepare the backend (create tables, open pools). No-op by default."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""

    @abstractmethod
    async def get_guild_prefix(self, guild_id: int) -> str | None:
        """Return the guild's prefix override, or None when unset."""

    @abstractmethod
    async def set_guild_prefix(self, guild_id: int, prefix: str | None) -> None:
        """Set the guild's prefix override; None removes it."""

    @abstractmethod
    async def get_member_permission_level(self, guild_id: int, member_id: int) -> int:
        """Return the level explicitly granted to a member (0 when unset)."""

    @abstractmethod
    async def set_member_permission_level(self, guild_id: int, member_id: int, level: int) -> None: ...

    @abstractmethod
    async def get_role_permission_levels(self, guild_id: int) -> dict[int, int]:
        """Return role id -> level for every role with a level in the guild."""

    @abstractmethod
    async def set_role_permission_level(self, guild_id: int, role_id: int, level: int) -> None: ...
