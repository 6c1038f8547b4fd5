"""Prefix command handler for discord.py bots.

    from cmdhandler import CmdHandler, Command, Settings

    handler = CmdHandler(bot, Settings(prefix="!", owner_id=1234))
    handler.register_command(MyCommand(), CommandGroup.FUN)
"""

from cmdhandler.core.constants import CommandGroup
from cmdhandler.core.exceptions import (
    CommandError,
    ConfigurationError,
    MissingPermissionError,
    PermissionCheckError,
    RegistrationError,
)
from cmdhandler.core.log_sinks import LoggerContainer, LogLevel, LogSink
from cmdhandler.core.permissions import LevelPermissionProvider, PermissionProvider
from cmdhandler.core.settings import Settings
from cmdhandler.dispatch import CmdHandler, CommandContext, Execution, ExecutionState
from cmdhandler.plugins import Command, CommandRegistry, FunctionCommand
from cmdhandler.storage import GuildConfigStore, InMemoryStore, SqliteStore

__all__ = [
    "CmdHandler",
    "Command",
    "CommandContext",
    "CommandError",
    "CommandGroup",
    "CommandRegistry",
    "ConfigurationError",
    "Execution",
    "ExecutionState",
    "FunctionCommand",
    "GuildConfigStore",
    "InMemoryStore",
    "LevelPermissionProvider",
    "LogLevel",
    "LogSink",
    "LoggerContainer",
    "MissingPermissionError",
    "PermissionCheckError",
    "PermissionProvider",
    "RegistrationError",
    "Settings",
    "SqliteStore",
]
