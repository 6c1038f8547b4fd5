"""
tests/dispatch/test_supervisor.py - Tests for the per-invocation state machine and its log events.
"""

from unittest.mock import AsyncMock

import pytest

from cmdhandler.core.exceptions import MissingPermissionError
from cmdhandler.core.log_sinks import LoggerContainer, LogLevel
from cmdhandler.dispatch.context import CommandContext
from cmdhandler.dispatch.gate import PermissionGate
from cmdhandler.dispatch.supervisor import (
    ExecutionState,
    ExecutionSupervisor,
    describe_origin,
)
from tests._mocks.mocks import (
    MockGuild,
    MockMessage,
    MockUser,
    RecordingCommand,
    RecordingSink,
)


def _supervisor(permitted=True, *, side_effect=None, verbose=False, log_to_console=True):
    provider = AsyncMock()
    provider.check_user_permission.return_value = permitted
    if side_effect is not None:
        provider.check_user_permission.side_effect = side_effect
    sink = RecordingSink()
    log = LoggerContainer(use_default_logger=False, verbose=verbose)
    log.register_logger("recorder", sink)
    return ExecutionSupervisor(PermissionGate(provider), log, log_to_console=log_to_console), sink


def _ctx(content="!ping", guild=True):
    message = MockMessage(
        content, author=MockUser(42, "alice"), guild=MockGuild(name="guild1") if guild else None
    )
    return CommandContext(message, invoke="ping")


def test_describe_origin():
    assert describe_origin(_ctx()) == "alice@guild1"
    assert describe_origin(_ctx(guild=False)) == "alice@DM"


@pytest.mark.asyncio
async def test_success_logs_exec_event():
    sup, sink = _supervisor()
    cmd = RecordingCommand()
    execution = await sup.run(cmd, _ctx())

    assert execution.state is ExecutionState.SUCCEEDED
    assert execution.done
    assert execution.history == [
        ExecutionState.PENDING,
        ExecutionState.CHECKING_PERMISSION,
        ExecutionState.EXECUTING,
        ExecutionState.SUCCEEDED,
    ]
    assert len(cmd.executed) == 1
    assert sink.messages(LogLevel.INFO) == ["<CMD EXEC> {alice@guild1} !ping"]
    _, _, fields = sink.events[-1]
    assert fields["invoke"] == "ping"
    assert fields["author_id"] == 42
    assert fields["status"] == "SUCCEEDED"


@pytest.mark.asyncio
async def test_denied_calls_failure_handler_with_missing_permission():
    sup, sink = _supervisor(permitted=False)
    cmd = RecordingCommand(permission_level=5)
    execution = await sup.run(cmd, _ctx())

    assert execution.state is ExecutionState.DENIED
    assert cmd.executed == []
    assert len(cmd.failures) == 1
    error, _ = cmd.failures[0]
    assert isinstance(error, MissingPermissionError)
    assert str(error) == "Missing permission."
    assert sink.messages(LogLevel.ERROR) == ["<CMD FAILED> {alice@guild1} !ping"]


@pytest.mark.asyncio
async def test_execute_error_marks_failed():
    boom = ValueError("bad arg")
    sup, sink = _supervisor()
    cmd = RecordingCommand(raises=boom)
    execution = await sup.run(cmd, _ctx())

    assert execution.state is ExecutionState.FAILED
    assert execution.error is boom
    assert cmd.failures[0][0] is boom
    assert sink.with_prefix("<CMD FAILED>") == ["<CMD FAILED> {alice@guild1} !ping"]
    assert sink.with_prefix("<CMD EXEC>") == []


@pytest.mark.asyncio
async def test_failure_handler_error_is_logged_not_raised():
    sup, sink = _supervisor()
    cmd = RecordingCommand(raises=ValueError("x"), failure_raises=RuntimeError("cannot send"))
    execution = await sup.run(cmd, _ctx())

    assert execution.state is ExecutionState.FAILED
    errors = sink.messages(LogLevel.ERROR)
    assert errors[0].startswith("<CMD FAILED>")
    assert errors[1] == "|ping| failed executing on_failure(): cannot send"
    assert sink.events[-1][2]["status"] == "FAILURE_HANDLER_FAILED"


@pytest.mark.asyncio
async def test_permission_check_error_aborts_without_running():
    sup, sink = _supervisor(side_effect=RuntimeError("provider down"))
    cmd = RecordingCommand()
    execution = await sup.run(cmd, _ctx())

    assert execution.state is ExecutionState.ABORTED
    assert cmd.executed == []
    assert cmd.failures == []
    errors = sink.messages(LogLevel.ERROR)
    assert len(errors) == 1
    assert errors[0].startswith("Permission check failed:")


@pytest.mark.asyncio
async def test_console_events_suppressed_when_disabled():
    sup, sink = _supervisor(log_to_console=False)
    await sup.run(RecordingCommand(), _ctx())
    assert sink.events == []


@pytest.mark.asyncio
async def test_failure_handler_still_runs_when_console_events_disabled():
    sup, sink = _supervisor(permitted=False, log_to_console=False)
    cmd = RecordingCommand()
    await sup.run(cmd, _ctx())
    assert len(cmd.failures) == 1
    assert sink.events == []


@pytest.mark.asyncio
async def test_sync_command_body_is_supported():
    from cmdhandler.plugins.base import FunctionCommand

    calls = []
    sup, _ = _supervisor()
    cmd = FunctionCommand(lambda ctx: calls.append(ctx.invoke), "ping")
    execution = await sup.run(cmd, _ctx())
    assert execution.state is ExecutionState.SUCCEEDED
    assert calls == ["ping"]


@pytest.mark.asyncio
async def test_verbose_logs_state_transitions():
    sup, sink = _supervisor(verbose=True)
    await sup.run(RecordingCommand(), _ctx())
    debug = sink.messages(LogLevel.DEBUG)
    assert "|ping| PENDING -> CHECKING_PERMISSION" in debug
    assert "|ping| EXECUTING -> SUCCEEDED" in debug
