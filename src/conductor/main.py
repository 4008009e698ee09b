#!/usr/bin/env python3
"""
main.py
- Main asynchronous entrypoint for conductor.
- Usage:
    conductor [CONFIG_PATH]     (defaults to /etc/conductor/config.toml)
- Launches:
    - HTTP redeploy trigger (FastAPI on uvicorn)
    - Force-update loop, if `force_update_interval` is configured
    - Image prune loop, if `prune_interval` is configured
- SIGINT/SIGTERM drain all of them before exiting.
"""

import asyncio
import sys

import sentry_sdk
import uvicorn
from loguru import logger

from conductor.api import create_app
from conductor.core import config as runtime
from conductor.core.config_loader import load_config, preview_config
from conductor.core.constants import DEFAULT_CONFIG_PATH
from conductor.core.errors import ConfigError
from conductor.lib.locks import CompositionLocks
from conductor.lib.process_runner import DryRunRunner, SubprocessRunner
from conductor.runner import force_update, gc_prune
from conductor.supervisor import Server, ShutdownCoordinator


def init_sentry():
    # Only if you have a Sentry DSN
    if runtime.SENTRY_DSN:
        sentry_sdk.init(dsn=runtime.SENTRY_DSN, traces_sample_rate=1.0)


def build_runner():
    if runtime.DRY_RUN:
        logger.warning("[main] DRY_RUN=true: docker commands will be logged, not executed.")
        return DryRunRunner()
    return SubprocessRunner()


def build_server(app, port):
    return Server(uvicorn.Config(app, host=runtime.BIND_HOST, port=port, log_level=runtime.LOG_LEVEL.lower()))


def start_workers(config, runner, coordinator, locks=None):
    """Spawn the periodic runners enabled in `config`."""
    if config.force_update_interval:
        coordinator.spawn(
            "force_update",
            force_update.run(
                config.compositions, runner, coordinator.stop_event, config.force_update_interval, locks=locks
            ),
        )
    else:
        logger.info("[main] force_update_interval not set: periodic redeploys disabled.")

    if config.prune_interval:
        coordinator.spawn("gc_prune", gc_prune.run(runner, coordinator.stop_event, config.prune_interval))
    else:
        logger.info("[main] prune_interval not set: periodic image pruning disabled.")


async def serve(config, runner=None):
    coordinator = ShutdownCoordinator()
    coordinator.install_signal_handlers()

    runner = runner or build_runner()
    locks = CompositionLocks() if runtime.SERIALIZE_REDEPLOYS else None

    start_workers(config, runner, coordinator, locks=locks)

    server = build_server(create_app(config, runner, locks=locks), config.port)
    logger.info(f"[main] Starting server on http://{runtime.BIND_HOST}:{config.port}")
    coordinator.attach_server(server)

    failures = await coordinator.wait()
    logger.info("[main] All components stopped.")
    return failures


def cli(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    runtime.configure_logging()
    init_sentry()

    config_path = argv[0] if argv else DEFAULT_CONFIG_PATH
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"[config] {e}")
        sys.exit(1)

    preview_config(config)
    asyncio.run(serve(config))


if __name__ == "__main__":
    cli()
