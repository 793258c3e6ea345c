"""Configuration: YAML + env overlay."""

from eventail.config.loader import load_config, load_config_with_env
from eventail.config.schema import CONFIG_KEYS, Config, cfg

__all__ = ["CONFIG_KEYS", "Config", "cfg", "load_config", "load_config_with_env"]
