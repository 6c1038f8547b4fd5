from __future__ import annotations

import importlib
import logging
from typing import Any

import discord
from discord.ext import commands

from cmdhandler.core.containers import Container
from cmdhandler.core.settings import Settings
from cmdhandler.dispatch.handler import CmdHandler
from cmdhandler.utils.module_discovery import iter_submodules

logger = logging.getLogger(__name__)


class HandlerBot(commands.Bot):
    """discord.py bot whose messages are parsed by :class:`CmdHandler` only."""

    def __init__(self, settings: Settings, **kwargs: Any) -> None:
        intents = discord.Intents.default()
        intents.message_content = True  # prefix commands need the message text
        intents.members = True  # role-based permission levels
        super().__init__(
            command_prefix=settings.prefix,
            intents=intents,
            help_command=None,
            **kwargs,
        )

    async def on_message(self, message: discord.Message) -> None:
        # discord.ext.commands would otherwise parse the same message a second time
        return None


def load_command_extensions(handler: CmdHandler, packages: list[str]) -> int:
    """Import every submodule of *packages* and call its ``setup(handler)``.

    Returns the number of modules that registered commands.
    """
    loaded = 0
    for pkg in packages:
        try:
            names = list(iter_submodules(pkg))
        except ModuleNotFoundError:
            logger.error(f"Command package not found: {pkg}")
            continue
        for ext_name in names:
            try:
                module = importlib.import_module(ext_name)
            except Exception as e:
                logger.exception(f"Extension {ext_name} failed to import", exc_info=e)
                continue
            setup = getattr(module, "setup", None)
            if setup is None:
                logger.debug(f"Extension {ext_name} has no setup() function, skipping.")
                continue
            try:
                setup(handler)
            except Exception as e:
                logger.exception(f"Extension {ext_name} failed to load", exc_info=e)
                continue
            loaded += 1
            logger.info(f"Successfully loaded extension: {ext_name}")
    return loaded


def build_handler(
    app_settings: Settings, container: Container | None = None
) -> tuple[HandlerBot, CmdHandler]:
    """Create the bot and its command handler, wired through the DI container."""
    container = container or Container()
    container.config.override(app_settings)
    bot = HandlerBot(app_settings)
    handler = container.cmd_handler(client=bot)
    load_command_extensions(handler, app_settings.command_packages)
    return bot, handler


async def launch_bot(app_settings: Settings | None = None) -> None:
    """Build the bot, connect the store and run until the connection closes."""
    app_settings = app_settings or Settings()  # type: ignore[call-arg]

    if not app_settings.discord_token:
        logger.critical("DISCORD_TOKEN not configured. Cannot launch bot.")
        return

    bot, handler = build_handler(app_settings)
    if handler.store is not None:
        await handler.store.connect()

    try:
        async with bot:
            await bot.start(app_settings.discord_token)
    except discord.errors.LoginFailure:
        logger.critical("Failed to log in to Discord. Check your DISCORD_TOKEN.")
    finally:
        await handler.close()
        logger.info("launch_bot completed.")
