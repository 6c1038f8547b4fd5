"""Small helpers shared by the dispatch stages.

Command bodies and failure handlers may be plain functions or coroutine
functions; :func:`maybe_await` lets the pipeline treat both the same way.
:func:`wait_for_optional` bounds a collaborator call with an optional timeout.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable
from typing import TypeVar

__all__ = ["maybe_await", "wait_for_optional"]

T = TypeVar("T")


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await *value* when it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def wait_for_optional(aw: Awaitable[T], timeout: float | None) -> T:
    """Await *aw*, raising :class:`asyncio.TimeoutError` after *timeout* seconds.

    ``timeout=None`` waits forever.
    """
    if timeout is None:
        return await aw
    return await asyncio.wait_for(aw, timeout)
