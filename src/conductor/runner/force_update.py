#!/usr/bin/env python3
"""
force_update.py
- Periodically redeploys every registered composition ("sweep").
- Compositions are attempted one after another in registry order.
- A failing composition is logged and the sweep moves on to the next one.
- Stops at the tick-wait point once the shutdown event is set; a running sweep completes first.
"""

from loguru import logger

from conductor.core.errors import ConductorError
from conductor.lib.compose import redeploy
from conductor.lib.ticker import Ticker


async def sweep(registry, runner, locks=None):
    """
    Redeploy every composition once.

    Returns:
        list[str]: names whose redeploy failed.
    """
    failed = []
    for name in registry.names():
        try:
            await redeploy(name, registry, runner, locks=locks)
        except ConductorError as e:
            logger.error(f"[force_update] Redeploy of {name} failed: {e.describe()}")
            failed.append(name)
        except Exception:
            logger.exception(f"[force_update] Unexpected error while redeploying {name}")
            failed.append(name)
    return failed


async def run(registry, runner, stop_event, interval, locks=None, ticker=None):
    ticker = ticker or Ticker(interval)
    logger.info(f"[force_update] Redeploying {len(registry)} composition(s) every {interval} seconds.")

    while await ticker.wait(stop_event):
        logger.info("[force_update] Starting sweep...")
        failed = await sweep(registry, runner, locks=locks)
        if failed:
            logger.warning(f"[force_update] Sweep finished with {len(failed)} failure(s): {', '.join(failed)}")
        else:
            logger.info("[force_update] Sweep finished.")

    logger.info("[force_update] Shutdown requested, stopping.")
