from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cmdhandler.utils.async_helpers import wait_for_optional

if TYPE_CHECKING:
    from cmdhandler.storage.base import GuildConfigStore

logger = logging.getLogger(__name__)


class PrefixResolver:
    """Look up a guild's prefix override.

    Store failures never abort dispatch: an error, a timeout or a missing row
    all mean "no override" and the global prefix keeps working.
    """

    def __init__(self, store: GuildConfigStore | None = None, timeout: float | None = None) -> None:
        self.store = store
        self.timeout = timeout

    async def resolve(self, guild_id: int | None) -> str | None:
        if guild_id is None or self.store is None:
            return None
        try:
            prefix = await wait_for_optional(self.store.get_guild_prefix(guild_id), self.timeout)
        except Exception as e:  # noqa: BLE001 – degrade to "no override"
            if isinstance(e, asyncio.TimeoutError) and self.timeout is not None:
                reason = f"timed out after {self.timeout}s"
            else:
                reason = f"failed: {e!r}"
            logger.warning(f"Guild prefix lookup for {guild_id} {reason}; using global prefix")
            return None
        return prefix or None
