from __future__ import annotations

import logging

from cmdhandler.core.settings import Settings
from cmdhandler.storage.base import GuildConfigStore
from cmdhandler.storage.memory import InMemoryStore
from cmdhandler.storage.sqlite import SqliteStore

__all__ = ["GuildConfigStore", "InMemoryStore", "SqliteStore", "choose_store"]

logger = logging.getLogger(__name__)


def choose_store(cfg: Settings) -> GuildConfigStore:
    """Return a SqliteStore when ``db_name`` is configured, else an InMemoryStore."""
    if cfg.db_name:
        logger.info(f"Using SQLite guild store at {cfg.db_name!r}")
        return SqliteStore(cfg.db_name)
    logger.info("Using in-memory guild store (set DB_NAME to persist prefixes)")
    return InMemoryStore()
