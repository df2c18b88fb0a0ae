"""Configuration management for taskboard."""

import logging
import os
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Optional

import yaml

from .utils.datetime import SystemClock, resolve_timezone

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration document cannot be used."""


@dataclass
class ConfigModel:
    """Global configuration model for taskboard."""

    # Which calendar day "today" is
    timezone: str = "UTC"

    # Classification
    due_soon_days: int = 3

    # Report windows
    week_days: int = 7
    month_days: int = 30
    all_time_start: str = "2000-01-01"
    top_categories_limit: int = 5
    trend_days: int = 30

    # Display preferences
    date_format: str = "%Y-%m-%d"

    # File paths
    data_dir: str = "~/.taskboard"

    def __post_init__(self):
        """Post-initialization setup."""
        self.data_dir = os.path.expanduser(self.data_dir)

        try:
            resolve_timezone(self.timezone)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        for name in ("due_soon_days", "week_days", "month_days", "top_categories_limit", "trend_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(f"{name} must be a non-negative integer, got {value!r}")

        if isinstance(self.all_time_start, (date, datetime)):
            self.all_time_start = self.all_time_start.isoformat()[:10]
        try:
            date.fromisoformat(str(self.all_time_start))
        except ValueError as e:
            raise ConfigError(f"all_time_start must be YYYY-MM-DD, got {self.all_time_start!r}") from e

    @property
    def all_time_start_datetime(self) -> datetime:
        """The ``all`` period sentinel as midnight UTC."""
        return datetime.combine(date.fromisoformat(self.all_time_start), time.min, tzinfo=timezone.utc)

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML.

        Raises:
            ConfigError: If the document is not a mapping or holds an invalid value.
        """
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(map(str, unknown)))

        return cls(**{k: v for k, v in data.items() if k in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


class Config:
    """Configuration manager for taskboard."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None, strict: bool = False) -> ConfigModel:
        """Load configuration from file, or fall back to defaults.

        A missing file yields the defaults and nothing is written. A file that
        cannot be used is logged and ignored, unless ``strict`` is set, in
        which case the ``ConfigError`` propagates.
        """
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.debug("Loaded configuration from %s", config_path)
            except (ConfigError, OSError) as e:
                if strict:
                    if isinstance(e, ConfigError):
                        raise
                    raise ConfigError(f"Failed to read {config_path}: {e}") from e
                logger.warning("Failed to load config from %s: %s; using defaults", config_path, e)
                config = ConfigModel()
        else:
            logger.debug("No configuration at %s; using defaults", config_path)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            f.write(config.to_yaml())
        logger.info("Configuration saved to %s", config_path)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)

    @classmethod
    def reset(cls) -> None:
        """Forget the cached configuration."""
        cls._instance = None


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None, strict: bool = False) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path, strict=strict)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)


def default_clock(config: Optional[ConfigModel] = None) -> SystemClock:
    """System clock observing the configured timezone."""
    config = config or get_config()
    return SystemClock(config.timezone)
