#!/usr/bin/env python
"""
tests/conftest.py – test harness bootstrap.
Provides settings, a recording log sink and a command handler wired to mock
discord objects.
"""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest

from cmdhandler.core.log_sinks import LoggerContainer
from cmdhandler.core.logger_setup import setup_logging
from cmdhandler.core.settings import Settings
from cmdhandler.dispatch.handler import CmdHandler
from cmdhandler.plugins.registry import CommandRegistry
from cmdhandler.storage.memory import InMemoryStore
from tests._mocks.mocks import MockClient, RecordingSink, make_settings

# ------------------------------------------------------------------+
# Global logging setup                                              +
# ------------------------------------------------------------------+
setup_logging({"root": {"level": "WARNING"}})


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client() -> MockClient:
    return MockClient()


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def handler(
    client: MockClient,
    settings: Settings,
    registry: CommandRegistry,
    store: InMemoryStore,
    sink: RecordingSink,
) -> CmdHandler:
    log = LoggerContainer(use_default_logger=False, verbose=False)
    h = CmdHandler(client, settings, registry=registry, store=store, logger=log)  # type: ignore[arg-type]
    h.register_logger("recorder", sink)
    return h


@pytest.fixture(autouse=True)
async def _cleanup_asyncio_tasks() -> AsyncGenerator[None, None]:
    """Ensure no pending tasks survive beyond each test function.

    pytest-asyncio closes the event loop *after* test teardown. Pending tasks
    spawned by the handler are cancelled and awaited here so the loop closes
    without "Task was destroyed but it is pending" warnings.
    """
    yield

    loop = asyncio.get_running_loop()
    pending: list[asyncio.Task[Any]] = [
        t
        for t in asyncio.all_tasks(loop)
        if t is not asyncio.current_task(loop=loop) and not t.done()
    ]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
