#!/usr/bin/env python3
"""
gc_prune.py
- Periodically runs `docker image prune -a -f` to reclaim disk space.
- A failed prune is logged and retried only at the next scheduled tick.
"""

from loguru import logger

from conductor.core.errors import ConductorError
from conductor.lib.compose import prune
from conductor.lib.ticker import Ticker


async def run(runner, stop_event, interval, ticker=None):
    ticker = ticker or Ticker(interval)
    logger.info(f"[gc_prune] Pruning unused images every {interval} seconds.")

    while await ticker.wait(stop_event):
        try:
            await prune(runner)
        except ConductorError as e:
            logger.error(f"[gc_prune] Prune operation failed: {e.describe()}")
        except Exception:
            logger.exception("[gc_prune] Unexpected error during prune")

    logger.info("[gc_prune] Shutdown requested, stopping.")
