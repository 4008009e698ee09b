"""
config.py
- Defines global runtime flags derived from environment variables.
- Configures the shared loguru logger used by every module.
"""

import os
import sys

from loguru import logger

# --- Runtime Behavior Flags ---
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"
SERIALIZE_REDEPLOYS = os.getenv("SERIALIZE_REDEPLOYS", "false").lower() == "true"

# --- Process & Network ---
DOCKER_BIN = os.getenv("DOCKER_BIN", "docker")
BIND_HOST = os.getenv("BIND_HOST", "0.0.0.0")
SENTRY_DSN = os.getenv("SENTRY_DSN")

# --- Logging ---
LOG_LEVEL = "DEBUG" if DEBUG else "INFO"
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level=LOG_LEVEL):
    """Replace loguru's default sink with the conductor stderr format."""
    logger.remove()
    logger.add(sink=sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
