from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cmdhandler.core.exceptions import PermissionCheckError
from cmdhandler.utils.async_helpers import wait_for_optional

if TYPE_CHECKING:
    from cmdhandler.core.permissions import PermissionProvider
    from cmdhandler.dispatch.context import CommandContext
    from cmdhandler.plugins.base import Command

logger = logging.getLogger(__name__)


class PermissionGate:
    """Decide whether an invocation may run.

    The configured bot owner is always permitted and the provider is not asked.
    Everyone else is checked by the provider; a provider error or timeout
    raises :class:`PermissionCheckError` instead of answering.
    """

    def __init__(
        self,
        provider: PermissionProvider,
        owner_id: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.provider = provider
        self.owner_id = owner_id
        self.timeout = timeout

    def is_owner(self, ctx: CommandContext) -> bool:
        return self.owner_id is not None and ctx.author.id == self.owner_id

    async def check(self, ctx: CommandContext, command: Command) -> bool:
        if self.is_owner(ctx):
            logger.debug(f"Owner override for '{command.main_invoke}'")
            return True
        try:
            permitted = await wait_for_optional(
                self.provider.check_user_permission(ctx, command), self.timeout
            )
        except Exception as e:
            if isinstance(e, asyncio.TimeoutError) and self.timeout is not None:
                reason = f"timed out after {self.timeout}s"
            else:
                reason = repr(e)
            raise PermissionCheckError(command.main_invoke, reason) from e
        return bool(permitted)
