"""
constants.py
- Project-wide constants shared across the API, operations and runners.
"""

# --- Configuration Defaults ---
DEFAULT_CONFIG_PATH = "/etc/conductor/config.toml"
DEFAULT_PORT = 8080
RESERVED_KEYS = {"port", "token", "force_update_interval", "prune_interval"}

# --- Docker Commands (arguments after the docker executable) ---
REDEPLOY_ARGS = ["compose", "up", "-d", "--pull", "always"]
PRUNE_ARGS = ["image", "prune", "-a", "-f"]

# --- HTTP ---
SUCCESS_BODY = "Success\n"

# --- Ticker ---
MISSED_TICK_TOLERANCE = 0.005  # seconds late before a tick counts as missed
