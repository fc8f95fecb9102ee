"""Layered TOML configuration for the account directory.

Layers, lowest priority first:

1. ``default.toml`` in the config directory (required)
2. ``{ACCOUNTDIR_ENV}.toml`` beside it (optional)
3. ``PORT`` from the environment, which the legacy Express deployment
   used to choose its listen port

``ACCOUNTDIR_*`` variables are applied later by the Settings model and
win over all of these.
"""

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_ENV = "ACCOUNTDIR_CONFIG_DIR"
ENVIRONMENT_ENV = "ACCOUNTDIR_ENV"
DEFAULT_ENVIRONMENT = "development"

# How many parent directories of the working directory are searched
_SEARCH_DEPTH = 4


def get_config_dir() -> Path:
    """Locate the config directory.

    Raises:
        FileNotFoundError: If ACCOUNTDIR_CONFIG_DIR names a missing directory
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} points at a missing directory: {path}")
        return path

    cwd = Path.cwd()
    for root in (cwd, *cwd.parents[:_SEARCH_DEPTH]):
        if (root / "config").is_dir():
            return root / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file is missing
        tomllib.TOMLDecodeError: On a syntax error
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated with override; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _legacy_env_layer() -> dict[str, Any]:
    port = os.environ.get("PORT")
    return {"api": {"port": int(port)}} if port else {}


def _layers(config_dir: Path) -> Iterator[tuple[str, dict[str, Any]]]:
    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"{default_path} is missing; add it or set {CONFIG_DIR_ENV}"
        )
    yield default_path.name, load_toml(default_path)

    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.is_file():
        yield env_path.name, load_toml(env_path)

    legacy = _legacy_env_layer()
    if legacy:
        yield "PORT", legacy


def load_config() -> dict[str, Any]:
    """Merge every configuration layer into one mapping.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    config_dir = get_config_dir()
    config: dict[str, Any] = {}
    sources = []
    for source, layer in _layers(config_dir):
        config = deep_merge(config, layer)
        sources.append(source)

    logger.debug("config_loaded", config_dir=str(config_dir), sources=sources)
    return config
