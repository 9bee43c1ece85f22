"""YAML loading with ``${VAR}`` / ``${VAR:default}`` environment substitution."""

import os
import re
from pathlib import Path
from typing import Any

import yaml


ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def _substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in a parsed YAML value.

    A variable that is unset and has no default becomes an empty string.
    """
    if isinstance(value, str):
        def replacer(match: re.Match) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            return match.group(2) if match.group(2) is not None else ""

        return ENV_VAR_PATTERN.sub(replacer, value)

    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]

    return value


def load_yaml_config(path: Path | str, *, substitute: bool = True) -> dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Args:
        path: Path to the YAML file
        substitute: Apply environment variable substitution

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the YAML is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return {}

    return _substitute_env_vars(raw_config) if substitute else raw_config


class ConfigLoader:
    """Loads and caches named YAML files from a config directory."""

    def __init__(self, config_dir: Path | str = "config"):
        self.config_dir = Path(config_dir)
        self._cache: dict[str, dict[str, Any]] = {}

    def load(self, name: str, *, reload: bool = False) -> dict[str, Any]:
        """
        Load ``<config_dir>/<name>.yaml`` (or ``.yml``).

        Raises:
            FileNotFoundError: If neither file exists
        """
        if not reload and name in self._cache:
            return self._cache[name]

        yaml_path = self.config_dir / f"{name}.yaml"
        yml_path = self.config_dir / f"{name}.yml"

        if yaml_path.exists():
            config = load_yaml_config(yaml_path)
        elif yml_path.exists():
            config = load_yaml_config(yml_path)
        else:
            raise FileNotFoundError(
                f"Config '{name}' not found in {self.config_dir}"
            )

        self._cache[name] = config
        return config

    def clear_cache(self) -> None:
        self._cache.clear()
