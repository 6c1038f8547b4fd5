#!/usr/bin/env python
"""
storage/sqlite.py
-----------------
SQLite-backed guild configuration store using aiosqlite.

One connection is opened per call so independent message tasks never share a
cursor. `connect()` creates the tables; every sqlite error is re-raised as
StoreError (the prefix resolver and permission gate decide how to degrade).
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from cmdhandler.core.exceptions import StoreError
from cmdhandler.storage.base import GuildConfigStore

logger = logging.getLogger(__name__)

SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS guild_prefixes (
        guild_id INTEGER PRIMARY KEY,
        prefix TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS member_levels (
        guild_id INTEGER NOT NULL,
        member_id INTEGER NOT NULL,
        level INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (guild_id, member_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS role_levels (
        guild_id INTEGER NOT NULL,
        role_id INTEGER NOT NULL,
        level INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (guild_id, role_id)
    )
    """,
)


class SqliteStore(GuildConfigStore):
    def __init__(self, db_name: str) -> None:
        self.db_name = db_name

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        try:
            async with aiosqlite.connect(self.db_name) as conn:
                conn.row_factory = aiosqlite.Row
                yield conn
        except aiosqlite.Error as e:
            logger.error(f"SQL error on {self.db_name!r}: {e}")
            raise StoreError("sqlite", str(e)) from e

    async def connect(self) -> None:
        async with self.acquire() as conn:
            for statement in SCHEMA:
                await conn.execute(statement)
            await conn.commit()
        logger.info(f"SQLite store ready at {self.db_name!r}")

    async def _fetch_one(self, query: str, params: tuple[Any, ...]) -> aiosqlite.Row | None:
        async with self.acquire() as conn:
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchone()

    async def _execute(self, query: str, params: tuple[Any, ...]) -> None:
        async with self.acquire() as conn:
            await conn.execute(query, params)
            await conn.commit()

    async def get_guild_prefix(self, guild_id: int) -> str | None:
        row = await self._fetch_one(
            "SELECT prefix FROM guild_prefixes WHERE guild_id = ?", (guild_id,)
        )
        return row["prefix"] if row else None

    async def set_guild_prefix(self, guild_id: int, prefix: str | None) -> None:
        if prefix:
            await self._execute(
                "INSERT OR REPLACE INTO guild_prefixes (guild_id, prefix) VALUES (?, ?)",
                (guild_id, prefix),
            )
        else:
            await self._execute("DELETE FROM guild_prefixes WHERE guild_id = ?", (guild_id,))

    async def get_member_permission_level(self, guild_id: int, member_id: int) -> int:
        row = await self._fetch_one(
            "SELECT level FROM member_levels WHERE guild_id = ? AND member_id = ?",
            (guild_id, member_id),
        )
        return int(row["level"]) if row else 0

    async def set_member_permission_level(self, guild_id: int, member_id: int, level: int) -> None:
        await self._execute(
            "INSERT OR REPLACE INTO member_levels (guild_id, member_id, level) VALUES (?, ?, ?)",
            (guild_id, member_id, level),
        )

    async def get_role_permission_levels(self, guild_id: int) -> dict[int, int]:
        async with self.acquire() as conn:
            async with conn.execute(
                "SELECT role_id, level FROM role_levels WHERE guild_id = ?", (guild_id,)
            ) as cursor:
                rows = await cursor.fetchall()
        return {int(row["role_id"]): int(row["level"]) for row in rows}

    async def set_role_permission_level(self, guild_id: int, role_id: int, level: int) -> None:
        await self._execute(
            "INSERT OR REPLACE INTO role_levels (guild_id, role_id, level) VALUES (?, ?, ?)",
            (guild_id, role_id, level),
        )


# End of storage/sqlite.py
