"""
compose.py
- Redeploy and prune operations built on top of a ProcessRunner.
- Shared by the HTTP trigger and the periodic runners; one call is one attempt.
"""

import contextlib

from loguru import logger

from conductor.core import config as runtime
from conductor.core.constants import PRUNE_ARGS, REDEPLOY_ARGS
from conductor.core.errors import PruneFailed, PullFailed


async def redeploy(name, registry, runner, locks=None):
    """
    Pull the latest images for a composition and bring it up.

    Raises:
        CompositionNotFound: `name` is not registered.
        ProcessIoError: docker could not be launched.
        PullFailed: docker exited non-zero; carries its stdout/stderr.
    """
    composition = registry.lookup(name)
    guard = locks.for_name(name) if locks is not None else contextlib.nullcontext()

    async with guard:
        logger.info(f"[compose] Redeploying {name} in {composition.work_directory}")
        outcome = await runner.run(runtime.DOCKER_BIN, REDEPLOY_ARGS, composition.work_directory)

    if not outcome.success:
        raise PullFailed(outcome.stdout, outcome.stderr)
    logger.info(f"[compose] {name} redeployed successfully.")


async def prune(runner):
    """
    Remove every image not used by a container.

    Raises:
        ProcessIoError: docker could not be launched.
        PruneFailed: docker exited non-zero; carries its stdout/stderr.
    """
    logger.info("[compose] Pruning unused images...")
    outcome = await runner.run(runtime.DOCKER_BIN, PRUNE_ARGS)
    if not outcome.success:
        raise PruneFailed(outcome.stdout, outcome.stderr)
    logger.info("[compose] Images pruned successfully.")
