"""
config_loader.py
- Loads the conductor configuration file (TOML or YAML) into an immutable Config.
- Every top-level key that is not a reserved setting becomes a composition entry.
- Fails fast: any problem raises ConfigError and nothing is started.
"""

import tomllib
from pathlib import Path

import yaml
from loguru import logger

from conductor.core.constants import DEFAULT_PORT, RESERVED_KEYS
from conductor.core.errors import ConfigError
from conductor.core.models import Config, ManagedComposition
from conductor.core.registry import CompositionRegistry


def load_document(path):
    """
    Parse a configuration file into a dict.

    `.toml` files are read with tomllib; anything else is treated as YAML.
    """
    path = Path(path)
    try:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except (tomllib.TOMLDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def _optional_seconds(data, key):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`{key}` must be a positive number of seconds, got {value!r}")
    return value


def _port(data):
    value = data.get("port", DEFAULT_PORT)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value < 65536:
        raise ConfigError(f"`port` must be an integer between 1 and 65535, got {value!r}")
    return value


def _token(data):
    value = data.get("token")
    if not isinstance(value, str) or not value:
        raise ConfigError("`token` is required and must be a non-empty string")
    return value


def _composition(name, entry):
    if not isinstance(entry, dict):
        raise ConfigError(f"Composition `{name}` must be a table with a `work` key")
    work = entry.get("work")
    if not isinstance(work, str) or not work:
        raise ConfigError(f"Composition `{name}` needs a `work` directory string")
    return ManagedComposition(work_directory=Path(work))


def parse_config(data):
    """Build a Config from an already-parsed document."""
    compositions = {
        str(name): _composition(name, entry)
        for name, entry in data.items()
        if name not in RESERVED_KEYS
    }
    return Config(
        token=_token(data),
        compositions=CompositionRegistry(compositions),
        port=_port(data),
        force_update_interval=_optional_seconds(data, "force_update_interval"),
        prune_interval=_optional_seconds(data, "prune_interval"),
    )


def load_config(path):
    config = parse_config(load_document(path))
    logger.info(f"[config] Loaded {path} with {len(config.compositions)} composition(s).")
    return config


def preview_config(config):
    """
    Log a human-readable summary of the loaded configuration.
    The token is never included.
    """
    lines = [
        f"port: {config.port}",
        f"force_update_interval: {config.force_update_interval or 'disabled'}",
        f"prune_interval: {config.prune_interval or 'disabled'}",
    ]
    for name, composition in config.compositions.items():
        lines.append(f"{name}: {composition.work_directory}")
    logger.info("[config] Active configuration:\n" + "\n".join(f"│ {line}" for line in lines))
