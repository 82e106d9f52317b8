"""Configuration loading."""

from create_webiny_project.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
)
from create_webiny_project.config.schema import DEFAULT_CONFIG, ProjectConfig

__all__ = [
    "DEFAULT_CONFIG",
    "ProjectConfig",
    "get_home_config_path",
    "get_local_config_path",
    "load_config",
]
