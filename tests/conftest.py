"""
Shared pytest fixtures for conductor tests.

This module provides:
- FakeRunner: a ProcessRunner that records calls instead of spawning docker
- A loguru sink capturing operator diagnostics
- A small three-composition Config
"""

import asyncio
from pathlib import Path

import pytest
from loguru import logger

from conductor.core.models import Config, ManagedComposition
from conductor.core.registry import CompositionRegistry
from conductor.lib.process_runner import ProcessOutcome

TOKEN = "s3cret-token"


class FakeRunner:
    """
    Records every invocation and returns scripted outcomes.

    `outcomes` maps a work directory (or None for prune) to a ProcessOutcome
    or an exception instance to raise. Unscripted calls succeed.
    Set `gate` to an asyncio.Event to hold every call until it is set.
    """

    def __init__(self, outcomes=None):
        self.outcomes = dict(outcomes or {})
        self.calls = []
        self.gate = None
        self.active = 0
        self.max_active = 0
        self.started = asyncio.Event()

    async def run(self, executable, arguments, work_directory=None):
        self.calls.append((executable, list(arguments), work_directory))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.started.set()
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
        finally:
            self.active -= 1

        key = str(work_directory) if work_directory is not None else None
        outcome = self.outcomes.get(key, ProcessOutcome(returncode=0))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def work_directories(self):
        return [str(call[2]) if call[2] is not None else None for call in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def registry():
    return CompositionRegistry(
        {
            "web": ManagedComposition(Path("/srv/web")),
            "db": ManagedComposition(Path("/srv/db")),
            "cache": ManagedComposition(Path("/srv/cache")),
        }
    )


@pytest.fixture
def config(registry):
    return Config(token=TOKEN, compositions=registry)


@pytest.fixture
def log_messages():
    """Collect every loguru message emitted during the test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), format="{level}|{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)
