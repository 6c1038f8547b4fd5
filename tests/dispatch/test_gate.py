"""
tests/dispatch/test_gate.py - Tests for the permission gate (owner override, provider errors).
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from cmdhandler.core.exceptions import PermissionCheckError
from cmdhandler.dispatch.context import CommandContext
from cmdhandler.dispatch.gate import PermissionGate
from tests._mocks.mocks import MockGuild, MockMessage, MockUser, RecordingCommand


def _ctx(user_id: int) -> CommandContext:
    return CommandContext(MockMessage("!ban", author=MockUser(user_id), guild=MockGuild()))


@pytest.mark.asyncio
async def test_owner_bypasses_provider():
    provider = AsyncMock()
    provider.check_user_permission.return_value = False
    gate = PermissionGate(provider, owner_id=7)

    assert await gate.check(_ctx(7), RecordingCommand("ban", permission_level=99)) is True
    provider.check_user_permission.assert_not_called()


@pytest.mark.asyncio
async def test_non_owner_asks_provider():
    provider = AsyncMock()
    provider.check_user_permission.return_value = False
    gate = PermissionGate(provider, owner_id=7)
    cmd = RecordingCommand("ban", permission_level=5)
    ctx = _ctx(8)

    assert await gate.check(ctx, cmd) is False
    provider.check_user_permission.assert_awaited_once_with(ctx, cmd)


@pytest.mark.asyncio
async def test_no_owner_configured_always_asks_provider():
    provider = AsyncMock()
    provider.check_user_permission.return_value = True
    gate = PermissionGate(provider, owner_id=None)
    assert gate.is_owner(_ctx(7)) is False
    assert await gate.check(_ctx(7), RecordingCommand()) is True


@pytest.mark.asyncio
async def test_provider_error_raises_check_error():
    provider = AsyncMock()
    provider.check_user_permission.side_effect = RuntimeError("boom")
    gate = PermissionGate(provider)

    with pytest.raises(PermissionCheckError) as exc_info:
        await gate.check(_ctx(8), RecordingCommand("ban"))
    assert exc_info.value.command == "ban"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_provider_timeout_raises_check_error():
    async def slow(*_args):
        await asyncio.sleep(1)
        return True

    provider = AsyncMock()
    provider.check_user_permission.side_effect = slow
    gate = PermissionGate(provider, timeout=0.01)

    with pytest.raises(PermissionCheckError, match="timed out"):
        await gate.check(_ctx(8), RecordingCommand())


@pytest.mark.asyncio
async def test_provider_timeout_error_without_bound_keeps_its_repr():
    provider = AsyncMock()
    provider.check_user_permission.side_effect = asyncio.TimeoutError("driver timeout")
    gate = PermissionGate(provider, timeout=None)

    with pytest.raises(PermissionCheckError) as exc_info:
        await gate.check(_ctx(8), RecordingCommand())
    assert "timed out after" not in exc_info.value.reason
    assert "driver timeout" in exc_info.value.reason
