"""
tests/storage/test_memory_store.py - Tests for the in-memory guild configuration store.
"""

import pytest

from cmdhandler.storage import choose_store
from cmdhandler.storage.memory import InMemoryStore
from cmdhandler.storage.sqlite import SqliteStore
from tests._mocks.mocks import make_settings


@pytest.mark.asyncio
async def test_prefix_set_get_and_clear(store):
    assert await store.get_guild_prefix(1) is None
    await store.set_guild_prefix(1, "?")
    assert await store.get_guild_prefix(1) == "?"
    assert await store.get_guild_prefix(2) is None

    await store.set_guild_prefix(1, None)
    assert await store.get_guild_prefix(1) is None


@pytest.mark.asyncio
async def test_member_levels_default_to_zero(store):
    assert await store.get_member_permission_level(1, 42) == 0
    await store.set_member_permission_level(1, 42, 6)
    assert await store.get_member_permission_level(1, 42) == 6
    # levels are per guild
    assert await store.get_member_permission_level(2, 42) == 0


@pytest.mark.asyncio
async def test_role_levels_returned_as_copy(store):
    await store.set_role_permission_level(1, 500, 3)
    levels = await store.get_role_permission_levels(1)
    assert levels == {500: 3}
    levels[501] = 9
    assert await store.get_role_permission_levels(1) == {500: 3}
    assert await store.get_role_permission_levels(2) == {}


@pytest.mark.asyncio
async def test_connect_and_close_are_noops(store):
    await store.connect()
    await store.close()


def test_choose_store(tmp_path):
    assert isinstance(choose_store(make_settings()), InMemoryStore)
    assert isinstance(choose_store(make_settings(db_name=str(tmp_path / "x.db"))), SqliteStore)
