from cmdhandler.dispatch.context import CommandContext
from cmdhandler.dispatch.gate import PermissionGate
from cmdhandler.dispatch.handler import CmdHandler
from cmdhandler.dispatch.parser import Invocation, parse_invocation
from cmdhandler.dispatch.prefix import PrefixResolver
from cmdhandler.dispatch.supervisor import Execution, ExecutionState, ExecutionSupervisor

__all__ = [
    "CmdHandler",
    "CommandContext",
    "Execution",
    "ExecutionState",
    "ExecutionSupervisor",
    "Invocation",
    "PermissionGate",
    "PrefixResolver",
    "parse_invocation",
]
