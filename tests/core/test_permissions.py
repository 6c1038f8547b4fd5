"""
tests/core/test_permissions.py - Tests for the level-based permission provider.
"""

import pytest

from cmdhandler.core.permissions import LevelPermissionProvider, has_permission
from cmdhandler.dispatch.context import CommandContext
from cmdhandler.storage.memory import InMemoryStore
from tests._mocks.mocks import MockGuild, MockMessage, MockRole, MockUser, RecordingCommand


def _ctx(author, guild=None):
    return CommandContext(MockMessage("!x", author=author, guild=guild))


@pytest.mark.parametrize(
    "user_level, required, expected",
    [(0, 0, True), (5, 5, True), (6, 5, True), (4, 5, False)],
)
def test_has_permission(user_level, required, expected):
    assert has_permission(user_level, required) is expected


@pytest.mark.asyncio
async def test_level_zero_command_open_to_everyone():
    provider = LevelPermissionProvider(store=None)
    ctx = _ctx(MockUser(42), MockGuild())
    assert await provider.check_user_permission(ctx, RecordingCommand()) is True


@pytest.mark.asyncio
async def test_dm_author_has_level_zero():
    provider = LevelPermissionProvider(InMemoryStore())
    ctx = _ctx(MockUser(42))
    assert await provider.get_user_level(ctx) == 0
    assert await provider.check_user_permission(ctx, RecordingCommand(permission_level=1)) is False


@pytest.mark.asyncio
async def test_guild_owner_gets_owner_level():
    provider = LevelPermissionProvider(InMemoryStore(), owner_perm_level=10)
    ctx = _ctx(MockUser(1), MockGuild(owner_id=1))
    assert await provider.get_user_level(ctx) == 10
    assert await provider.check_user_permission(ctx, RecordingCommand(permission_level=10))
    assert not await provider.check_user_permission(ctx, RecordingCommand(permission_level=11))


@pytest.mark.asyncio
async def test_member_level_from_store():
    store = InMemoryStore()
    await store.set_member_permission_level(1000, 42, 3)
    provider = LevelPermissionProvider(store)
    assert await provider.get_user_level(_ctx(MockUser(42), MockGuild(1000))) == 3


@pytest.mark.asyncio
async def test_highest_role_level_wins():
    store = InMemoryStore()
    await store.set_member_permission_level(1000, 42, 1)
    await store.set_role_permission_level(1000, 500, 4)
    await store.set_role_permission_level(1000, 501, 7)
    await store.set_role_permission_level(1000, 502, 9)  # role the member lacks
    author = MockUser(42, roles=[MockRole(500), MockRole(501)])
    provider = LevelPermissionProvider(store)

    assert await provider.get_user_level(_ctx(author, MockGuild(1000))) == 7


@pytest.mark.asyncio
async def test_without_store_non_owner_is_level_zero():
    provider = LevelPermissionProvider(store=None)
    assert await provider.get_user_level(_ctx(MockUser(42), MockGuild())) == 0
