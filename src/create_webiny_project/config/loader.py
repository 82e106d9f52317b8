"""Configuration file loading and merging."""

import logging
import os
from pathlib import Path

import yaml

from create_webiny_project.config.schema import DEFAULT_CONFIG, ProjectConfig

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".webiny"
CONFIG_FILENAME = "config.yaml"

# Environment variable -> config key
ENV_OVERRIDES: dict[str, str] = {
    "CWP_PACKAGE_MANAGER": "package_manager",
    "CWP_REGISTRY_HOST": "registry_host",
    "CWP_TEMPLATE_PREFIX": "template_prefix",
    "CWP_OFFLINE": "offline",
}


def get_home_config_path() -> Path:
    """Get path to global config: ~/.webiny/config.yaml."""
    return Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.webiny/config.yaml."""
    return Path.cwd() / CONFIG_DIRNAME / CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found or empty."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
            if data is None:
                return None
            if not isinstance(data, dict):
                logger.warning("Ignoring config %s: not a mapping", path)
                return None
            result: dict[str, object] = data
            return result
    except yaml.YAMLError:
        logger.warning("Ignoring config %s: invalid YAML", path, exc_info=True)
        return None


def load_env_config() -> ProjectConfig:
    """Build a config from CWP_* environment variables."""
    data = {
        key: os.environ[env_var]
        for env_var, key in ENV_OVERRIDES.items()
        if os.environ.get(env_var)
    }
    return ProjectConfig.from_dict(data)


def load_config() -> ProjectConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.webiny/config.yaml)
    3. Local config (./.webiny/config.yaml)
    4. CWP_* environment variables
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            config = config.merge(ProjectConfig.from_dict(data))

    return config.merge(load_env_config())
