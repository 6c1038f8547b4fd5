from __future__ import annotations

from cmdhandler.storage.base import GuildConfigStore


class InMemoryStore(GuildConfigStore):
    """Dict-backed store. State lives for the lifetime of the process."""

    def __init__(self) -> None:
        self._prefixes: dict[int, str] = {}
        self._member_levels: dict[tuple[int, int], int] = {}
        self._role_levels: dict[int, dict[int, int]] = {}

    async def get_guild_prefix(self, guild_id: int) -> str | None:
        return self._prefixes.get(guild_id)

    async def set_guild_prefix(self, guild_id: int, prefix: str | None) -> None:
        if prefix:
            self._prefixes[guild_id] = prefix
        else:
            self._prefixes.pop(guild_id, None)

    async def get_member_permission_level(self, guild_id: int, member_id: int) -> int:
        return self._member_levels.get((guild_id, member_id), 0)

    async def set_member_permission_level(self, guild_id: int, member_id: int, level: int) -> None:
        self._member_levels[(guild_id, member_id)] = level

    async def get_role_permission_levels(self, guild_id: int) -> dict[int, int]:
        return dict(self._role_levels.get(guild_id, {}))

    async def set_role_permission_level(self, guild_id: int, role_id: int, level: int) -> None:
        self._role_levels.setdefault(guild_id, {})[role_id] = level
