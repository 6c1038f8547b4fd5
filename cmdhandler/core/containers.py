from dependency_injector import containers, providers

from cmdhandler.core.log_sinks import LoggerContainer
from cmdhandler.core.permissions import LevelPermissionProvider
from cmdhandler.core.settings import Settings
from cmdhandler.dispatch.handler import CmdHandler
from cmdhandler.plugins.registry import CommandRegistry
from cmdhandler.storage import choose_store


class Container(containers.DeclarativeContainer):
    """Dependency Injection Container for the command handler.

    Every collaborator is a singleton so the registry populated during startup
    is the same instance the handler reads while dispatching.
    """

    # Settings are read from the environment unless overridden, e.g.
    #     container.config.override(Settings(prefix="!"))
    config = providers.Singleton(Settings)

    # Guild configuration store – SQLite when DB_NAME is set, memory otherwise
    store = providers.Singleton(choose_store, config)

    registry = providers.Singleton(CommandRegistry)

    log_sinks = providers.Singleton(
        LoggerContainer,
        use_default_logger=config.provided.use_default_logger,
        verbose=config.provided.verbose_log,
    )

    permission_provider = providers.Singleton(
        LevelPermissionProvider,
        store=store,
        owner_perm_level=config.provided.owner_perm_level,
    )

    # The Discord client only exists once the bot is built, so it is passed in:
    #     handler = container.cmd_handler(client=bot)
    cmd_handler = providers.Singleton(
        CmdHandler,
        client=providers.Dependency(),
        settings=config,
        registry=registry,
        store=store,
        permission_provider=permission_provider,
        logger=log_sinks,
    )
