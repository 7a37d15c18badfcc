"""Layered configuration: defaults, YAML files, then environment."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from pkgsmith.config.schema import DEFAULT_CONFIG, PkgsmithConfig

logger = logging.getLogger(__name__)

CONFIG_DIR = ".pkgsmith"
CONFIG_FILENAME = "config.yaml"

# Environment variables layered over the config files.
ENV_OVERRIDES: dict[str, str] = {
    "PKGSMITH_USER": "user",
    "PKGSMITH_HOST": "host",
    "PKGSMITH_DIR": "dir",
}


def get_home_config_path() -> Path:
    return Path.home() / CONFIG_DIR / CONFIG_FILENAME


def get_local_config_path() -> Path:
    return Path.cwd() / CONFIG_DIR / CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Read a YAML mapping from `path`.

    Missing, empty, malformed or non-mapping files give None, so the layer
    is skipped.
    """
    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError:
        return None
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed config file %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    return data


def env_config() -> PkgsmithConfig:
    """Build a config from PKGSMITH_* environment variables."""
    data = {
        key: os.environ[var]
        for var, key in ENV_OVERRIDES.items()
        if os.environ.get(var)
    }
    return PkgsmithConfig.from_dict(data)


def load_config() -> PkgsmithConfig:
    """Load merged configuration.

    Precedence (lowest to highest): built-in defaults, the global file
    (~/.pkgsmith/config.yaml), the local file (./.pkgsmith/config.yaml),
    then PKGSMITH_* environment variables. CLI options are merged on top by
    the caller.
    """
    config = DEFAULT_CONFIG
    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            config = config.merge(PkgsmithConfig.from_dict(data))
    return config.merge(env_config())


def save_config(config: PkgsmithConfig, path: Path) -> None:
    """Write the non-None values of `config` to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
