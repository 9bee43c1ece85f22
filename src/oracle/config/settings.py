"""Global settings management."""

import logging
from pathlib import Path

from oracle.config.loader import ConfigLoader
from oracle.config.schemas import SettingsConfig

logger = logging.getLogger(__name__)

# Default config directory (relative to project root)
DEFAULT_CONFIG_DIR = Path("config")


class Settings:
    """
    Central settings manager for the oracle.

    Loads ``settings.yaml`` from the config directory on first access and
    validates it. A missing file yields the schema defaults, which are
    enough to run against the public providers.
    """

    def __init__(self, config_dir: Path | str = DEFAULT_CONFIG_DIR):
        self.config_dir = Path(config_dir)
        self._loader = ConfigLoader(self.config_dir)
        self._settings: SettingsConfig | None = None

    @property
    def settings(self) -> SettingsConfig:
        """Get the validated root settings."""
        if self._settings is None:
            if not self.config_dir.exists():
                logger.warning(
                    f"Config directory not found: {self.config_dir}. "
                    "Using default settings."
                )
            try:
                raw = self._loader.load("settings")
                self._settings = SettingsConfig(**raw)
            except FileNotFoundError:
                logger.info("No settings.yaml found, using defaults")
                self._settings = SettingsConfig()
        return self._settings

    @property
    def logging_config(self):
        return self.settings.logging

    @property
    def providers(self):
        return self.settings.providers

    @property
    def scoring(self):
        return self.settings.scoring

    @property
    def projection(self):
        return self.settings.projection

    @property
    def pipeline(self):
        return self.settings.pipeline

    @property
    def api(self):
        return self.settings.api

    def reload(self) -> None:
        """Reload configuration from disk."""
        self._loader.clear_cache()
        self._settings = None
        logger.info("Configuration reloaded")

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        config = self.logging_config
        logging.basicConfig(
            level=getattr(logging, config.level.upper()),
            format=config.format,
            filename=config.file,
        )
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)


_settings: Settings | None = None


def get_settings(config_dir: Path | str | None = None) -> Settings:
    """
    Get the global settings instance.

    Args:
        config_dir: Optional config directory (only used on first call)
    """
    global _settings
    if _settings is None:
        _settings = Settings(config_dir or DEFAULT_CONFIG_DIR)
    return _settings


def reset_settings() -> None:
    """Reset global settings (mainly for testing)."""
    global _settings
    _settings = None
