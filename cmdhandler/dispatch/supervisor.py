"""Run one resolved command invocation and report its outcome.

State machine per invocation::

    PENDING -> CHECKING_PERMISSION -> EXECUTING -> SUCCEEDED
                                   |            -> FAILED
                                   -> DENIED
                                   -> ABORTED   (permission check itself failed)

Exactly one terminal event is written to the log sinks for every invocation
that reaches ``CHECKING_PERMISSION``. Nothing raised by the command body, its
failure handler or the permission provider escapes :meth:`ExecutionSupervisor.run`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from cmdhandler.core.constants import DM_LABEL
from cmdhandler.core.exceptions import MissingPermissionError, PermissionCheckError
from cmdhandler.utils.async_helpers import maybe_await

if TYPE_CHECKING:
    from cmdhandler.core.log_sinks import LoggerContainer
    from cmdhandler.dispatch.context import CommandContext
    from cmdhandler.dispatch.gate import PermissionGate
    from cmdhandler.plugins.base import Command


class ExecutionState(Enum):
    PENDING = auto()
    CHECKING_PERMISSION = auto()
    EXECUTING = auto()
    DENIED = auto()
    SUCCEEDED = auto()
    FAILED = auto()
    ABORTED = auto()


TERMINAL_STATES = frozenset(
    {
        ExecutionState.DENIED,
        ExecutionState.SUCCEEDED,
        ExecutionState.FAILED,
        ExecutionState.ABORTED,
    }
)


@dataclass
class Execution:
    command: Command
    ctx: CommandContext
    state: ExecutionState = ExecutionState.PENDING
    error: BaseException | None = None
    history: list[ExecutionState] = field(default_factory=lambda: [ExecutionState.PENDING])

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES


def describe_origin(ctx: CommandContext) -> str:
    """``author@guild`` (or ``author@DM``) as used in command events."""
    guild = ctx.guild
    return f"{ctx.author}@{guild.name if guild is not None else DM_LABEL}"


class ExecutionSupervisor:
    def __init__(
        self,
        gate: PermissionGate,
        log: LoggerContainer,
        *,
        log_to_console: bool = True,
    ) -> None:
        self.gate = gate
        self.log = log
        self.log_to_console = log_to_console

    def _set_state(self, execution: Execution, new_state: ExecutionState) -> None:
        if execution.state == new_state:
            return
        self.log.debug(
            f"|{execution.command.main_invoke}| {execution.state.name} -> {new_state.name}",
            invoke=execution.command.main_invoke,
            state=new_state.name,
        )
        execution.state = new_state
        execution.history.append(new_state)

    def _fields(self, execution: Execution, **extra: Any) -> dict[str, Any]:
        ctx = execution.ctx
        guild = ctx.guild
        return {
            "invoke": execution.command.main_invoke,
            "author": str(ctx.author),
            "author_id": ctx.author.id,
            "guild": guild.name if guild is not None else DM_LABEL,
            "guild_id": guild.id if guild is not None else None,
            "content": ctx.content,
            **extra,
        }

    async def run(self, command: Command, ctx: CommandContext) -> Execution:
        execution = Execution(command, ctx)
        self._set_state(execution, ExecutionState.CHECKING_PERMISSION)

        try:
            permitted = await self.gate.check(ctx, command)
        except PermissionCheckError as e:
            execution.error = e
            self._set_state(execution, ExecutionState.ABORTED)
            self.log.error(
                f"Permission check failed: {e}",
                **self._fields(execution, status=execution.state.name, error=repr(e.__cause__ or e)),
            )
            return execution

        if not permitted:
            self._set_state(execution, ExecutionState.DENIED)
            await self._command_failed(execution, MissingPermissionError())
            return execution

        self._set_state(execution, ExecutionState.EXECUTING)
        try:
            await maybe_await(command.execute(ctx))
        except Exception as e:
            self._set_state(execution, ExecutionState.FAILED)
            await self._command_failed(execution, e)
            return execution

        self._set_state(execution, ExecutionState.SUCCEEDED)
        if self.log_to_console:
            self.log.info(
                f"<CMD EXEC> {{{describe_origin(ctx)}}} {ctx.content}",
                **self._fields(execution, status=execution.state.name),
            )
        return execution

    async def _command_failed(self, execution: Execution, error: BaseException) -> None:
        execution.error = error
        command, ctx = execution.command, execution.ctx
        if self.log_to_console:
            self.log.error(
                f"<CMD FAILED> {{{describe_origin(ctx)}}} {ctx.content}",
                **self._fields(execution, status=execution.state.name, error=repr(error)),
            )
        try:
            await maybe_await(command.on_failure(error, ctx))
        except Exception as e:  # noqa: BLE001 – failure handlers must never escape
            self.log.error(
                f"|{command.main_invoke}| failed executing on_failure(): {e}",
                **self._fields(execution, status="FAILURE_HANDLER_FAILED", error=repr(e)),
            )
