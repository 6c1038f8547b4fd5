"""The command handler: entry point that ties the dispatch stages together.

``CmdHandler`` subscribes to the client's message events once the client is
ready and pushes every message through the same pipeline::

    PrefixResolver -> parse_invocation -> CommandRegistry.resolve
        -> PermissionGate -> ExecutionSupervisor -> log sinks

Every message runs in its own ``asyncio`` task, so a slow store, permission
provider or command only delays its own message. Nothing raised while
processing one message reaches the client's event loop or another message.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from cmdhandler.core.constants import CommandGroup
from cmdhandler.core.exceptions import ConfigurationError
from cmdhandler.core.log_sinks import LoggerContainer, LogLevel, LogSink
from cmdhandler.core.permissions import LevelPermissionProvider, PermissionProvider
from cmdhandler.dispatch.context import CommandContext
from cmdhandler.dispatch.gate import PermissionGate
from cmdhandler.dispatch.parser import parse_invocation
from cmdhandler.dispatch.prefix import PrefixResolver
from cmdhandler.dispatch.supervisor import Execution, ExecutionSupervisor
from cmdhandler.plugins.registry import CommandRegistry

if TYPE_CHECKING:
    from discord.ext import commands

    from cmdhandler.core.settings import Settings
    from cmdhandler.plugins.base import Command
    from cmdhandler.storage.base import GuildConfigStore

logger = logging.getLogger(__name__)

__all__ = ["CmdHandler"]


class CmdHandler:
    DEFAULT_GROUPS = CommandGroup

    def __init__(
        self,
        client: commands.Bot,
        settings: Settings,
        *,
        registry: CommandRegistry | None = None,
        store: GuildConfigStore | None = None,
        permission_provider: PermissionProvider | None = None,
        logger: LoggerContainer | None = None,
    ) -> None:
        if client is None:
            raise ConfigurationError("Client undefined or not initialized")
        if settings is None:
            raise ConfigurationError("settings undefined")
        if not getattr(settings, "prefix", None):
            raise ConfigurationError("settings.prefix not defined")

        self.client = client
        self.settings = settings
        # An empty registry is falsy, so compare with None explicitly.
        self.registry = registry if registry is not None else CommandRegistry()
        self.log = (
            logger
            if logger is not None
            else LoggerContainer(settings.use_default_logger, settings.verbose_log)
        )
        self.store = store
        self.permission_provider = permission_provider
        self.prefix_resolver = PrefixResolver(store, settings.store_timeout)

        self._supervisor: ExecutionSupervisor | None = None
        self._tasks: set[asyncio.Task[Execution | None]] = set()
        self._ready = False

        client.add_listener(self._on_ready, "on_ready")

    # ------------------------------------------------------------------+
    # Registration (startup phase)                                      +
    # ------------------------------------------------------------------+

    def register_command(
        self, command: Command, group: str | CommandGroup | None = None
    ) -> CmdHandler:
        self.registry.register(command, group)
        return self

    def set_database_driver(self, store: GuildConfigStore) -> CmdHandler:
        if store is None:
            raise ConfigurationError("database driver is undefined!")
        self.store = store
        self.prefix_resolver.store = store
        return self

    def set_permission_handler(self, provider: PermissionProvider) -> CmdHandler:
        if not isinstance(provider, PermissionProvider):
            raise ConfigurationError("permission handler must implement PermissionProvider!")
        self.permission_provider = provider
        self._supervisor = None
        return self

    def register_logger(
        self, name: str, sink: LogSink, default_level: LogLevel = LogLevel.DEBUG
    ) -> CmdHandler:
        self.log.register_logger(name, sink, default_level)
        return self

    def get_logger_by_name(self, name: str) -> LogSink | None:
        return self.log.get_logger_by_name(name)

    # ------------------------------------------------------------------+
    # Setup                                                             +
    # ------------------------------------------------------------------+

    @property
    def supervisor(self) -> ExecutionSupervisor:
        return self._build_pipeline()

    def _build_pipeline(self) -> ExecutionSupervisor:
        if self._supervisor is None:
            if self.permission_provider is None:
                self.permission_provider = LevelPermissionProvider(
                    self.store, self.settings.owner_perm_level
                )
            gate = PermissionGate(
                self.permission_provider,
                owner_id=self.settings.owner_id,
                timeout=self.settings.permission_timeout,
            )
            self._supervisor = ExecutionSupervisor(
                gate, self.log, log_to_console=self.settings.log_to_console
            )
        return self._supervisor

    def setup(self) -> None:
        """Freeze the registry and subscribe to message events. Runs once."""
        if self._ready:
            return
        if self.settings.owner_id is None:
            self.log.warning(
                "No bot owner set! If you are the owner / host of this bot, please set "
                "your ID as bot owner for full permission to all commands!"
            )
        self._build_pipeline()
        if self.settings.invoke_to_lower:
            self.registry.fold_case()
        self.registry.freeze()

        self.client.add_listener(self._on_message, "on_message")
        if self.settings.parse_msg_edit:
            self.client.add_listener(self._on_message_edit, "on_message_edit")
        self._ready = True
        self.log.info(f"Registered {len(self.registry)} commands")

    @property
    def ready(self) -> bool:
        return self._ready

    async def _on_ready(self) -> None:
        # on_ready fires again after every gateway resume; setup() is idempotent
        self.setup()

    # ------------------------------------------------------------------+
    # Event subscription                                                +
    # ------------------------------------------------------------------+

    async def _on_message(self, message: discord.Message) -> None:
        self.dispatch(message)

    async def _on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        # embed unfurls also fire edits; only a content change is a new invocation
        if before.content == after.content:
            return
        self.dispatch(after)

    def dispatch(self, message: discord.Message) -> asyncio.Task[Execution | None]:
        """Schedule *message* for processing and return immediately."""
        task = asyncio.create_task(
            self.handle_message(message), name=f"cmd:{getattr(message, 'id', '?')}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until every scheduled message has been processed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Cancel in-flight messages and release the store."""
        for task in list(self._tasks):
            task.cancel()
        await self.join()
        if self.store is not None:
            await self.store.close()

    # ------------------------------------------------------------------+
    # Pipeline                                                          +
    # ------------------------------------------------------------------+

    def accepts(self, message: discord.Message | None) -> bool:
        """Return False for messages the pipeline must ignore entirely."""
        if message is None:
            return False
        author = message.author
        if author == self.client.user or getattr(author, "bot", False):
            return False
        if message.guild is None and not self.settings.parse_dm:
            return False
        return True

    async def handle_message(self, message: discord.Message) -> Execution | None:
        """Run the whole pipeline for one message.

        Returns the finished :class:`Execution`, or None when the message did
        not invoke a command.
        """
        try:
            return await self._process(message)
        except Exception:  # noqa: BLE001 – one message must never break another
            logger.exception(f"Unhandled error while dispatching message {getattr(message, 'id', '?')}")
            return None

    async def _process(self, message: discord.Message) -> Execution | None:
        if not self.accepts(message):
            return None

        guild = message.guild
        guild_prefix = await self.prefix_resolver.resolve(guild.id if guild is not None else None)

        invocation = parse_invocation(
            message.content or "",
            self.settings.prefix,
            guild_prefix,
            lowercase=self.settings.invoke_to_lower,
        )
        if invocation is None:
            return None

        command = self.registry.resolve(invocation.invoke)
        if command is None:
            self.log.debug(f"No command registered for invoke '{invocation.invoke}'")
            return None

        ctx = CommandContext(
            message=message,
            args=invocation.args,
            invoke=invocation.invoke,
            handler=self,
        )
        return await self.supervisor.run(command, ctx)

    def __repr__(self) -> str:
        return f"<CmdHandler prefix={self.settings.prefix!r} commands={len(self.registry)}>"

