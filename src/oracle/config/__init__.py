"""Configuration management module."""

from oracle.config.loader import load_yaml_config
from oracle.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "get_settings",
    "load_yaml_config",
    "reset_settings",
    "Settings",
]
