"""
MiniShell Configuration Loader

Configuration management for the command engine:
- JSON configuration file loading
- Default value handling
- Runtime configuration updates
- Type-checked access to configuration values

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from minishell.exceptions import ConfigurationError
from minishell.logger import get_logger


@dataclass
class EngineConfig:
    """Engine identification settings."""
    name: str = "minishell"
    version: str = "1.0.0"


@dataclass
class ProcessConfig:
    """External process settings."""
    exec_failure_status: int = 1
    pipefail: bool = False


@dataclass
class RedirectionConfig:
    """Redirection settings."""
    file_mode: int = 0o644
    strict: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds all configuration settings for the engine.
    """
    engine: EngineConfig = field(default_factory=EngineConfig)
    process: ProcessConfig = field(default_factory=ProcessConfig)
    redirection: RedirectionConfig = field(default_factory=RedirectionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('minishell.json')
        >>> print(config.process.exec_failure_status)
        1
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigurationError: If the file cannot be loaded or parsed
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                path=config_path
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {e}",
                path=config_path
            )
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {e}",
                path=config_path
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration root must be an object",
                path=config_path
            )

        self._config = self._parse_config(data)
        get_logger('config').debug(
            f"Loaded configuration from {config_path}",
            context={'sections': sorted(data)}
        )
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into a Config object."""
        config = Config()

        for section in fields(Config):
            if section.name not in data:
                continue
            section_data = data[section.name]
            if not isinstance(section_data, dict):
                raise ConfigurationError(
                    f"Section '{section.name}' must be an object"
                )
            current = getattr(config, section.name)
            values = {}
            for option in fields(current):
                default = getattr(current, option.name)
                value = section_data.get(option.name, default)
                values[option.name] = self._check_type(
                    f"{section.name}.{option.name}", value, default
                )
            setattr(config, section.name, type(current)(**values))

        return config

    @staticmethod
    def _check_type(key: str, value: Any, default: Any) -> Any:
        """Reject values whose type differs from the default's."""
        if default is None or value is None:
            return value
        # bool is an int subclass; keep the two apart
        if isinstance(default, bool) != isinstance(value, bool):
            raise ConfigurationError(f"Invalid type for {key}: {value!r}")
        if not isinstance(value, type(default)):
            raise ConfigurationError(f"Invalid type for {key}: {value!r}")
        return value

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'process.pipefail')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Args:
            key: Dot-notation key (e.g., 'redirection.strict')
            value: Value to set

        Note:
            This modifies configuration at runtime but does not
            persist changes to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigurationError(f"Invalid configuration key: {key}")

        final_key = parts[-1]
        if len(parts) < 2 or not hasattr(obj, final_key):
            raise ConfigurationError(f"Invalid configuration key: {key}")

        setattr(obj, final_key, self._check_type(key, value, getattr(obj, final_key)))

    def reset(self) -> None:
        """Drop any loaded configuration and go back to the defaults."""
        self._config = Config()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            section.name: dict(vars(getattr(self._config, section.name)))
            for section in fields(Config)
        }


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
